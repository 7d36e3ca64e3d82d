from __future__ import annotations

from typing import Any, Protocol

from core.payments.types import PaymentStatus
from schemas.order import Order, OrderStatus
from schemas.payment_schema import StoredPayment


class PaymentStore(Protocol):
    """Persistence port used by the payment orchestrator."""

    async def save_payment(self, payment: StoredPayment) -> StoredPayment:
        ...

    async def get_payment(self, payment_id: str) -> StoredPayment | None:
        ...

    async def get_payment_by_order_id(self, order_id: str) -> StoredPayment | None:
        ...

    async def update_payment_status(
        self,
        payment_id: str,
        status: PaymentStatus,
        *,
        gateway_response: dict[str, Any] | None = None,
        refund_amount: Any | None = None,
    ) -> StoredPayment | None:
        ...

    async def claim_order(self, order_id: str) -> bool:
        """Mark a creation as in flight; False when another one already is."""
        ...

    async def release_order(self, order_id: str) -> None:
        ...

    async def save_order(self, order: Order) -> Order:
        ...

    async def get_order(self, order_id: str) -> Order | None:
        ...

    async def update_order_status(self, order_id: str, status: OrderStatus) -> bool:
        """Return True only when the stored status actually changed."""
        ...

    async def update_order_payment(
        self,
        order_id: str,
        *,
        payment_id: str,
        payment_status: PaymentStatus,
    ) -> Order | None:
        """Record the latest payment on a stored order; None when the order is unknown."""
        ...
