from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

from core.payments.types import PaymentStatus


def _decimal_to_number(value: Decimal) -> int | float:
    if value == value.to_integral_value():
        return int(value)
    return float(value)


Amount = Annotated[Decimal, PlainSerializer(_decimal_to_number, return_type=Any, when_used="json")]


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class PaymentRequest(BaseModel):
    """Internal payment request; business rules are checked by validation, not here."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    amount: Amount
    currency: str
    order_id: str = Field(alias="orderId")
    customer_id: str = Field(alias="customerId")
    customer_email: str = Field(alias="customerEmail")
    customer_phone: str = Field(alias="customerPhone")
    description: str
    return_url: str = Field(alias="returnUrl")
    webhook_url: str | None = Field(default=None, alias="webhookUrl")
    metadata: dict[str, Any] | None = None


class PaymentError(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    details: str | None = None
    field: str | None = None


class PaymentResponse(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    success: bool
    payment_id: str = Field(alias="paymentId")
    order_id: str = Field(alias="orderId")
    amount: Amount
    currency: str
    status: PaymentStatus
    payment_url: str | None = Field(default=None, alias="paymentUrl")
    transaction_id: str | None = Field(default=None, alias="transactionId")
    gateway_response: dict[str, Any] | None = Field(default=None, alias="gatewayResponse")
    error: PaymentError | None = None
    timestamp: str = Field(default_factory=utc_timestamp)


class ValidationIssue(BaseModel):
    model_config = ConfigDict(frozen=True)

    field: str
    message: str
    code: str


class PaymentValidation(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    is_valid: bool = Field(alias="isValid")
    errors: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[ValidationIssue] = Field(default_factory=list)

    def error_codes(self) -> set[str]:
        return {issue.code for issue in self.errors}


class RefundRequest(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    payment_id: str = Field(alias="paymentId")
    amount: Amount | None = None
    notes: str | None = None
    receipt: str | None = None


class RefundResponse(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    success: bool
    refund_id: str = Field(alias="refundId")
    payment_id: str = Field(alias="paymentId")
    amount: Amount
    status: str
    notes: str | None = None
    receipt: str | None = None
    error: PaymentError | None = None


class StoredPayment(BaseModel):
    """What the store keeps per gateway payment."""

    model_config = ConfigDict(populate_by_name=True)

    payment_id: str = Field(alias="paymentId")
    order_id: str = Field(alias="orderId")
    customer_id: str = Field(alias="customerId")
    amount: Amount
    currency: str
    status: PaymentStatus
    provider: str
    payment_url: str | None = Field(default=None, alias="paymentUrl")
    gateway_response: dict[str, Any] | None = Field(default=None, alias="gatewayResponse")
    metadata: dict[str, Any] | None = None
    refund_amount: Amount | None = Field(default=None, alias="refundAmount")
    created_at: str = Field(default_factory=utc_timestamp, alias="createdAt")
    updated_at: str = Field(default_factory=utc_timestamp, alias="updatedAt")


# --- HTTP payloads ---


class CreatePaymentIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    amount: Amount
    currency: str = Field(min_length=1)
    order_id: str = Field(alias="orderId", min_length=1)
    customer_id: str = Field(alias="customerId", min_length=1)
    customer_email: str = Field(alias="customerEmail", min_length=1)
    customer_phone: str = Field(alias="customerPhone", min_length=1)
    description: str = Field(min_length=1)
    return_url: str | None = Field(default=None, alias="returnUrl")
    webhook_url: str | None = Field(default=None, alias="webhookUrl")
    metadata: dict[str, Any] | None = None


class VerifyPaymentIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    payment_id: str = Field(alias="paymentId", min_length=1)


class RefundIn(BaseModel):
    amount: Amount | None = Field(default=None, gt=0)
    notes: str | None = None
    receipt: str | None = None
