from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class PaymentProviderName(str, Enum):
    RAZORPAY = "razorpay"
    TEST = "test"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SUCCESS = "success"
    FAILED = "failed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"
    PARTIALLY_REFUNDED = "partially_refunded"

    @property
    def is_terminal(self) -> bool:
        return self not in {PaymentStatus.PENDING, PaymentStatus.PROCESSING}


class PaymentMethod(str, Enum):
    CARD = "card"
    UPI = "upi"
    NET_BANKING = "netbanking"
    WALLET = "wallet"
    EMI = "emi"
    CARDLESS_EMI = "cardless_emi"
    PAY_LATER = "paylater"

    @classmethod
    def parse(cls, value: Any) -> "PaymentMethod | None":
        try:
            return cls(str(value).lower()) if value else None
        except ValueError:
            return None


@dataclass(frozen=True)
class GatewayPaymentRequest:
    """Outbound create call. ``amount_minor`` is in paise."""

    amount_minor: int
    currency: str
    receipt: str
    callback_url: str
    notes: dict[str, Any] = field(default_factory=dict)
    webhook_url: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "amount": self.amount_minor,
            "currency": self.currency,
            "receipt": self.receipt,
            "notes": self.notes,
            "callback_url": self.callback_url,
        }
        if self.webhook_url:
            payload["webhook_url"] = self.webhook_url
        return payload


@dataclass(frozen=True)
class GatewayPaymentResponse:
    """Payment entity as the gateway reports it. ``amount`` is in paise."""

    id: str
    amount: int
    currency: str
    status: str
    order_id: str = ""
    entity: str = "payment"
    method: PaymentMethod | None = None
    amount_refunded: int = 0
    refund_status: str | None = None
    captured: bool = False
    email: str | None = None
    contact: str | None = None
    short_url: str | None = None
    error_code: str | None = None
    error_description: str | None = None
    notes: dict[str, Any] = field(default_factory=dict)
    created_at: int | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "GatewayPaymentResponse":
        notes = payload.get("notes")
        return cls(
            id=str(payload.get("id") or ""),
            amount=int(payload.get("amount") or 0),
            currency=str(payload.get("currency") or ""),
            status=str(payload.get("status") or ""),
            order_id=str(payload.get("order_id") or payload.get("receipt") or ""),
            entity=str(payload.get("entity") or "payment"),
            method=PaymentMethod.parse(payload.get("method")),
            amount_refunded=int(payload.get("amount_refunded") or 0),
            refund_status=payload.get("refund_status"),
            captured=bool(payload.get("captured", False)),
            email=payload.get("email"),
            contact=payload.get("contact"),
            short_url=payload.get("short_url"),
            error_code=payload.get("error_code"),
            error_description=payload.get("error_description"),
            notes=notes if isinstance(notes, dict) else {},
            created_at=payload.get("created_at"),
            raw=dict(payload),
        )


@dataclass(frozen=True)
class GatewayRefundResponse:
    id: str
    payment_id: str
    amount: int
    status: str
    raw: dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "GatewayRefundResponse":
        return cls(
            id=str(payload.get("id") or ""),
            payment_id=str(payload.get("payment_id") or ""),
            amount=int(payload.get("amount") or 0),
            status=str(payload.get("status") or ""),
            raw=dict(payload),
        )


@dataclass(frozen=True)
class PaymentWebhook:
    event: str
    account_id: str
    payment: GatewayPaymentResponse
    contains: tuple[str, ...] = ()
    created_at: int | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "PaymentWebhook":
        try:
            entity = payload["payload"]["payment"]["entity"]
        except (KeyError, TypeError) as err:
            raise ValueError("Webhook payload does not contain a payment entity") from err
        if not isinstance(entity, dict):
            raise ValueError("Webhook payment entity must be an object")

        return cls(
            event=str(payload.get("event") or ""),
            account_id=str(payload.get("account_id") or ""),
            payment=GatewayPaymentResponse.from_payload(entity),
            contains=tuple(payload.get("contains") or ()),
            created_at=payload.get("created_at"),
        )
