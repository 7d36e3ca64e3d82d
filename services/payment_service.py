from __future__ import annotations

import json
import logging
from decimal import Decimal
from typing import Any

from core.errors import AppException, ErrorCode, GatewayError
from core.logging import bind_payment_id
from core.payment_utils import from_minor_units, mask_email, to_minor_units
from core.payments.config import PaymentConfig
from core.payments.manager import PaymentManager
from core.payments.provider import PaymentProvider
from core.payments.signatures import verify_signature
from core.payments.status_mapper import map_gateway_status
from core.payments.store import PaymentStore
from core.payments.types import GatewayPaymentRequest, GatewayPaymentResponse, PaymentStatus, PaymentWebhook
from core.payments.validation import validate_payment_request
from core.queue import OrderConfirmation, QueueManager
from core.settings import get_settings
from repositories.payment_repo import get_payment_store
from schemas.order import OrderStatus
from schemas.payment_schema import (
    PaymentError,
    PaymentRequest,
    PaymentResponse,
    PaymentValidation,
    RefundRequest,
    RefundResponse,
    StoredPayment,
)

logger = logging.getLogger(__name__)

# Payments for an order in one of these states are handed back instead of creating another.
_REUSABLE_STATUSES = {PaymentStatus.PENDING, PaymentStatus.PROCESSING, PaymentStatus.SUCCESS}

# Settled payments only move forward through refunds.
_SETTLED_TRANSITIONS = {
    PaymentStatus.SUCCESS: {PaymentStatus.REFUNDED, PaymentStatus.PARTIALLY_REFUNDED},
    PaymentStatus.PARTIALLY_REFUNDED: {PaymentStatus.REFUNDED},
}

_FAILURE_MESSAGES = {
    "PAYMENT_CANCELLED": "You cancelled the payment. No charges have been made to your account.",
    "PAYMENT_FAILED": "Your payment could not be processed. Please try again or use a different payment method.",
    "INSUFFICIENT_FUNDS": "Your account has insufficient funds. Please try with a different payment method.",
    "CARD_DECLINED": "Your card was declined. Please try with a different card or contact your bank.",
}
_DEFAULT_FAILURE_MESSAGE = "We encountered an issue processing your payment. Please try again or contact support."


def describe_payment_failure(error_code: str | None = None, error_description: str | None = None) -> str:
    """Customer-facing text for a failed payment redirect."""

    if error_description:
        return error_description
    return _FAILURE_MESSAGES.get((error_code or "").upper(), _DEFAULT_FAILURE_MESSAGE)


def _status_from_gateway(payment: GatewayPaymentResponse) -> PaymentStatus:
    status = map_gateway_status(payment.status)
    if status == PaymentStatus.SUCCESS and payment.amount_refunded > 0:
        return PaymentStatus.PARTIALLY_REFUNDED
    return status


def _accepts_transition(current: PaymentStatus, new: PaymentStatus) -> bool:
    if not current.is_terminal or current == new:
        return True
    return new in _SETTLED_TRANSITIONS.get(current, set())


class PaymentOrchestrator:
    """Validates, talks to the gateway and keeps the store in step."""

    def __init__(
        self,
        *,
        config: PaymentConfig,
        provider: PaymentProvider,
        store: PaymentStore,
        queue: QueueManager | None = None,
    ) -> None:
        self.config = config
        self.provider = provider
        self.store = store
        self.queue = queue

    def validate_payment(self, request: PaymentRequest) -> PaymentValidation:
        return validate_payment_request(
            request,
            currency=self.config.currency,
            warn_amount=self.config.warn_amount,
            max_amount=self.config.max_amount,
        )

    async def create_payment(self, request: PaymentRequest) -> PaymentResponse:
        validation = self.validate_payment(request)
        for warning in validation.warnings:
            logger.warning(warning.message, extra={"order_id": request.order_id, "code": warning.code})
        if not validation.is_valid:
            return self._failed_create(
                request,
                code="VALIDATION_ERROR",
                message="Payment validation failed",
                details=", ".join(issue.message for issue in validation.errors),
            )

        existing = await self.store.get_payment_by_order_id(request.order_id)
        if existing is not None and existing.status in _REUSABLE_STATUSES:
            logger.info(
                "Returning existing payment for order",
                extra={"payment_id": existing.payment_id, "order_id": request.order_id},
            )
            return self._response_from_stored(existing)

        if not await self.store.claim_order(request.order_id):
            return self._failed_create(
                request,
                code="DUPLICATE_ORDER",
                message="A payment for this order is already being created",
            )

        try:
            return await self._create_with_gateway(request)
        finally:
            await self.store.release_order(request.order_id)

    async def _create_with_gateway(self, request: PaymentRequest) -> PaymentResponse:
        notes: dict[str, Any] = {
            "order_id": request.order_id,
            "customer_id": request.customer_id,
            "customer_email": request.customer_email,
            "customer_phone": request.customer_phone,
            "description": request.description,
        }
        notes.update(request.metadata or {})

        gateway_request = GatewayPaymentRequest(
            amount_minor=to_minor_units(request.amount),
            currency=request.currency,
            receipt=request.order_id,
            callback_url=request.return_url,
            notes=notes,
            webhook_url=request.webhook_url,
        )

        try:
            payment = await self.provider.create_payment(gateway_request)
            if not payment.id:
                raise GatewayError("Gateway response did not include a payment id", kind="rejected")
        except GatewayError as err:
            logger.warning(
                "Payment creation failed",
                extra={"order_id": request.order_id, "kind": err.kind, "gateway_status": err.status_code},
            )
            return self._failed_create(
                request,
                code="PAYMENT_CREATION_FAILED",
                message="Failed to create payment with gateway",
                details=err.message,
            )

        with bind_payment_id(payment.id):
            stored = await self.store.save_payment(
                StoredPayment(
                    payment_id=payment.id,
                    order_id=request.order_id,
                    customer_id=request.customer_id,
                    amount=request.amount,
                    currency=request.currency,
                    status=PaymentStatus.PENDING,
                    provider=self.config.provider,
                    payment_url=payment.short_url or payment.id,
                    gateway_response=payment.raw,
                    metadata=request.metadata,
                )
            )
            logger.info(
                "Payment created",
                extra={"order_id": stored.order_id, "customer_email": mask_email(request.customer_email)},
            )
        return self._response_from_stored(stored)

    async def verify_payment(self, payment_id: str) -> PaymentResponse:
        with bind_payment_id(payment_id):
            try:
                payment = await self.provider.verify_payment(payment_id)
            except GatewayError as err:
                logger.warning("Payment verification failed", extra={"kind": err.kind})
                return PaymentResponse(
                    success=False,
                    payment_id=payment_id,
                    order_id="",
                    amount=Decimal(0),
                    currency=self.config.currency,
                    status=PaymentStatus.FAILED,
                    error=PaymentError(
                        code="PAYMENT_VERIFICATION_FAILED",
                        message="Failed to verify payment with gateway",
                        details=err.message,
                    ),
                )

            resolved_id = payment.id or payment_id
            stored, status = await self._record_gateway_status(resolved_id, payment)
            if stored is not None:
                await self.store.update_order_payment(stored.order_id, payment_id=resolved_id, payment_status=status)

        error = None
        if status == PaymentStatus.FAILED:
            error = PaymentError(
                code=payment.error_code or "PAYMENT_FAILED",
                message=describe_payment_failure(payment.error_code, payment.error_description),
            )

        return PaymentResponse(
            success=status == PaymentStatus.SUCCESS,
            payment_id=resolved_id,
            order_id=str(payment.notes.get("order_id") or payment.order_id),
            amount=from_minor_units(payment.amount),
            currency=payment.currency or self.config.currency,
            status=status,
            payment_url=payment.short_url,
            transaction_id=resolved_id,
            gateway_response=payment.raw,
            error=error,
        )

    async def refund_payment(self, request: RefundRequest) -> RefundResponse:
        amount_minor = to_minor_units(request.amount) if request.amount is not None else None
        with bind_payment_id(request.payment_id):
            try:
                refund = await self.provider.refund_payment(request.payment_id, amount_minor)
            except GatewayError as err:
                logger.warning("Refund failed", extra={"kind": err.kind})
                return RefundResponse(
                    success=False,
                    refund_id="",
                    payment_id=request.payment_id,
                    amount=Decimal(0),
                    status="failed",
                    notes=request.notes,
                    receipt=request.receipt,
                    error=PaymentError(code="REFUND_FAILED", message="Failed to process refund", details=err.message),
                )

            refunded = from_minor_units(refund.amount)
            stored = await self.store.get_payment(request.payment_id)
            if stored is not None:
                total_refunded = (stored.refund_amount or Decimal(0)) + refunded
                if total_refunded >= stored.amount:
                    status = PaymentStatus.REFUNDED
                else:
                    status = PaymentStatus.PARTIALLY_REFUNDED
                await self.store.update_payment_status(
                    request.payment_id,
                    status,
                    gateway_response=refund.raw,
                    refund_amount=total_refunded,
                )
                await self.store.update_order_payment(
                    stored.order_id, payment_id=request.payment_id, payment_status=status
                )
            logger.info("Refund processed", extra={"refund_id": refund.id})

        return RefundResponse(
            success=True,
            refund_id=refund.id,
            payment_id=request.payment_id,
            amount=refunded,
            status=refund.status,
            notes=request.notes,
            receipt=request.receipt,
        )

    async def get_payment_status(self, payment_id: str) -> PaymentStatus:
        with bind_payment_id(payment_id):
            try:
                raw_status = await self.provider.get_payment_status(payment_id)
            except GatewayError as err:
                logger.warning("Payment status lookup failed", extra={"kind": err.kind})
                return PaymentStatus.FAILED
        return map_gateway_status(raw_status)

    async def cancel_payment(self, payment_id: str) -> bool:
        stored = await self.store.get_payment(payment_id)
        if stored is not None and stored.status.is_terminal:
            return False

        if await self.get_payment_status(payment_id) != PaymentStatus.PENDING:
            return False

        with bind_payment_id(payment_id):
            await self.store.update_payment_status(payment_id, PaymentStatus.CANCELLED)
            logger.info("Payment cancelled")
        return True

    async def handle_webhook(self, body: bytes, signature: str | None) -> bool:
        """Apply a signed gateway event. False means it was rejected or unusable."""

        if not verify_signature(body, signature, self.config.webhook_secret):
            logger.warning("Webhook signature rejected")
            return False

        try:
            webhook = PaymentWebhook.from_payload(json.loads(body))
        except (ValueError, TypeError) as err:
            logger.warning("Webhook payload rejected: %s", err)
            return False

        payment = webhook.payment
        if not payment.id:
            logger.warning("Webhook payment has no id", extra={"event": webhook.event})
            return False

        with bind_payment_id(payment.id):
            stored, status = await self._record_gateway_status(payment.id, payment)
            logger.info("Webhook applied", extra={"event": webhook.event, "status": status.value})

            order_id = stored.order_id if stored is not None else str(payment.notes.get("order_id") or payment.order_id)
            if not order_id:
                if status == PaymentStatus.SUCCESS:
                    logger.warning("Successful payment has no order to confirm")
                return True

            order = await self.store.update_order_payment(order_id, payment_id=payment.id, payment_status=status)
            if status != PaymentStatus.SUCCESS:
                return True

            if order is not None and from_minor_units(payment.amount) != Decimal(order.total):
                logger.warning(
                    "Captured amount does not match order total",
                    extra={"order_id": order_id, "amount_minor": payment.amount, "order_total": order.total},
                )
                return True

            await self._confirm_order(order_id, payment)
        return True

    async def _record_gateway_status(
        self,
        payment_id: str,
        payment: GatewayPaymentResponse,
    ) -> tuple[StoredPayment | None, PaymentStatus]:
        """Write the gateway's view unless it would move a settled payment backwards."""

        status = _status_from_gateway(payment)
        current = await self.store.get_payment(payment_id)
        if current is not None and not _accepts_transition(current.status, status):
            logger.info(
                "Ignoring stale gateway status",
                extra={"stored_status": current.status.value, "gateway_status": status.value},
            )
            return current, current.status

        stored = await self.store.update_payment_status(payment_id, status, gateway_response=payment.raw)
        return stored, status

    async def _confirm_order(self, order_id: str, payment: GatewayPaymentResponse) -> None:
        if not await self.store.update_order_status(order_id, OrderStatus.CONFIRMED):
            logger.info("Order already confirmed", extra={"order_id": order_id})
            return

        if self.queue is None:
            return
        self.queue.enqueue_order_confirmation(
            OrderConfirmation(
                order_id=order_id,
                payment_id=payment.id,
                customer_email=payment.email or payment.notes.get("customer_email"),
            )
        )

    def _response_from_stored(self, stored: StoredPayment) -> PaymentResponse:
        return PaymentResponse(
            success=True,
            payment_id=stored.payment_id,
            order_id=stored.order_id,
            amount=stored.amount,
            currency=stored.currency,
            status=stored.status,
            payment_url=stored.payment_url,
            transaction_id=stored.payment_id,
            gateway_response=stored.gateway_response,
        )

    def _failed_create(
        self,
        request: PaymentRequest,
        *,
        code: str,
        message: str,
        details: str | None = None,
    ) -> PaymentResponse:
        return PaymentResponse(
            success=False,
            payment_id="",
            order_id=request.order_id,
            amount=request.amount,
            currency=request.currency or self.config.currency,
            status=PaymentStatus.FAILED,
            error=PaymentError(code=code, message=message, details=details),
        )


def _get_payment_provider() -> PaymentProvider:
    try:
        return PaymentManager.get_instance().provider
    except RuntimeError as err:
        raise AppException(
            status_code=503,
            code=ErrorCode.PAYMENT_PROVIDER_ERROR,
            message="Payment provider is not configured",
            details=str(err),
        ) from err


def get_payment_orchestrator() -> PaymentOrchestrator:
    return PaymentOrchestrator(
        config=PaymentConfig.from_settings(get_settings()),
        provider=_get_payment_provider(),
        store=get_payment_store(),
        queue=QueueManager.get_instance(),
    )
