from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from core.settings import (
    DEFAULT_MAX_AMOUNT,
    DEFAULT_WARN_AMOUNT,
    SUPPORTED_CURRENCY,
    Settings,
)


@dataclass(frozen=True)
class PaymentConfig:
    """Everything the orchestrator needs from configuration, checked once."""

    provider: str
    webhook_secret: str | None = None
    currency: str = SUPPORTED_CURRENCY
    max_amount: Decimal = DEFAULT_MAX_AMOUNT
    warn_amount: Decimal = DEFAULT_WARN_AMOUNT

    def __post_init__(self) -> None:
        if self.currency != SUPPORTED_CURRENCY:
            raise ValueError(f"Only {SUPPORTED_CURRENCY} is supported, got {self.currency!r}")
        if self.max_amount <= 0:
            raise ValueError("max_amount must be positive")
        if self.warn_amount <= 0 or self.warn_amount > self.max_amount:
            raise ValueError("warn_amount must be positive and not exceed max_amount")

    @classmethod
    def from_settings(cls, settings: Settings) -> "PaymentConfig":
        return cls(
            provider=settings.payment_provider,
            webhook_secret=settings.razorpay_webhook_secret,
            currency=settings.payment_currency,
            max_amount=settings.payment_max_amount,
            warn_amount=settings.payment_warn_amount,
        )
