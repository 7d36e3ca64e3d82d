from __future__ import annotations

import logging
from typing import Any

from core.payments.store import PaymentStore
from core.payments.types import PaymentStatus
from schemas.order import Order, OrderStatus
from schemas.payment_schema import StoredPayment, utc_timestamp

logger = logging.getLogger(__name__)


class InMemoryPaymentStore(PaymentStore):
    """Process-local store. Nothing survives a restart."""

    def __init__(self) -> None:
        self._payments: dict[str, StoredPayment] = {}
        self._payment_ids_by_order: dict[str, str] = {}
        self._claimed_orders: set[str] = set()
        self._orders: dict[str, Order] = {}
        self._order_statuses: dict[str, OrderStatus] = {}

    async def save_payment(self, payment: StoredPayment) -> StoredPayment:
        stored = payment.model_copy(deep=True)
        self._payments[stored.payment_id] = stored
        self._payment_ids_by_order[stored.order_id] = stored.payment_id
        logger.info(
            "Saved payment",
            extra={"payment_id": stored.payment_id, "order_id": stored.order_id, "status": stored.status.value},
        )
        return stored.model_copy(deep=True)

    async def get_payment(self, payment_id: str) -> StoredPayment | None:
        row = self._payments.get(payment_id)
        return row.model_copy(deep=True) if row is not None else None

    async def get_payment_by_order_id(self, order_id: str) -> StoredPayment | None:
        payment_id = self._payment_ids_by_order.get(order_id)
        if payment_id is None:
            return None
        return await self.get_payment(payment_id)

    async def update_payment_status(
        self,
        payment_id: str,
        status: PaymentStatus,
        *,
        gateway_response: dict[str, Any] | None = None,
        refund_amount: Any | None = None,
    ) -> StoredPayment | None:
        row = self._payments.get(payment_id)
        if row is None:
            logger.info("Status update for unknown payment", extra={"payment_id": payment_id, "status": status.value})
            return None

        update: dict[str, Any] = {"status": status, "updated_at": utc_timestamp()}
        if gateway_response is not None:
            update["gateway_response"] = gateway_response
        if refund_amount is not None:
            update["refund_amount"] = refund_amount
        updated = row.model_copy(update=update)
        self._payments[payment_id] = updated
        logger.info("Updated payment status", extra={"payment_id": payment_id, "status": status.value})
        return updated.model_copy(deep=True)

    async def claim_order(self, order_id: str) -> bool:
        if order_id in self._claimed_orders:
            return False
        self._claimed_orders.add(order_id)
        return True

    async def release_order(self, order_id: str) -> None:
        self._claimed_orders.discard(order_id)

    async def save_order(self, order: Order) -> Order:
        stored = order.model_copy(deep=True)
        self._orders[stored.id] = stored
        self._order_statuses[stored.id] = stored.status
        logger.info("Saved order", extra={"order_id": stored.id, "total": stored.total})
        return stored.model_copy(deep=True)

    async def get_order(self, order_id: str) -> Order | None:
        row = self._orders.get(order_id)
        return row.model_copy(deep=True) if row is not None else None

    async def update_order_status(self, order_id: str, status: OrderStatus) -> bool:
        previous = self._order_statuses.get(order_id)
        if previous == status:
            return False

        self._order_statuses[order_id] = status
        order = self._orders.get(order_id)
        if order is not None:
            self._orders[order_id] = order.model_copy(update={"status": status, "updated_at": utc_timestamp()})
        logger.info("Updated order status", extra={"order_id": order_id, "status": status.value})
        return True

    async def update_order_payment(
        self,
        order_id: str,
        *,
        payment_id: str,
        payment_status: PaymentStatus,
    ) -> Order | None:
        order = self._orders.get(order_id)
        if order is None:
            return None

        updated = order.model_copy(
            update={"payment_id": payment_id, "payment_status": payment_status, "updated_at": utc_timestamp()}
        )
        self._orders[order_id] = updated
        logger.info(
            "Updated order payment",
            extra={"order_id": order_id, "payment_id": payment_id, "status": payment_status.value},
        )
        return updated.model_copy(deep=True)


_store = InMemoryPaymentStore()


def get_payment_store() -> InMemoryPaymentStore:
    return _store
