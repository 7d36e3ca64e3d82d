from __future__ import annotations

from typing import Protocol

from core.payments.types import GatewayPaymentRequest, GatewayPaymentResponse, GatewayRefundResponse


class PaymentProvider(Protocol):
    """Capability set every gateway integration offers the orchestrator.

    Implementations raise ``core.errors.GatewayError`` for any failure.
    Amounts crossing this boundary are integer minor units.
    """

    provider_name: str

    async def create_payment(self, request: GatewayPaymentRequest) -> GatewayPaymentResponse:
        ...

    async def verify_payment(self, payment_id: str) -> GatewayPaymentResponse:
        ...

    async def refund_payment(self, payment_id: str, amount_minor: int | None = None) -> GatewayRefundResponse:
        ...

    async def get_payment_status(self, payment_id: str) -> str:
        ...
