from __future__ import annotations

from threading import Lock

from core.payments.provider import PaymentProvider
from core.payments.razorpay_provider import RazorpayPaymentProvider
from core.payments.test_environment_provider import FakePaymentProvider
from core.settings import Settings, get_settings


def build_provider(settings: Settings) -> PaymentProvider:
    if settings.payment_provider == "test":
        return FakePaymentProvider(base_url=settings.public_base_url)

    if not settings.razorpay_key_id or not settings.razorpay_key_secret:
        raise RuntimeError(
            "Razorpay credentials are not configured. Set RAZORPAY_KEY_ID and RAZORPAY_KEY_SECRET."
        )
    return RazorpayPaymentProvider(
        key_id=settings.razorpay_key_id,
        key_secret=settings.razorpay_key_secret,
        environment=settings.gateway_environment,
        timeout_seconds=settings.payment_gateway_timeout_seconds,
    )


class PaymentManager:
    _instance: "PaymentManager | None" = None
    _lock = Lock()

    def __init__(self, provider: PaymentProvider) -> None:
        self._provider = provider

    @classmethod
    def configure(cls, provider: PaymentProvider) -> "PaymentManager":
        with cls._lock:
            cls._instance = cls(provider=provider)
            return cls._instance

    @classmethod
    def configure_from_settings(cls) -> "PaymentManager":
        return cls.configure(build_provider(get_settings()))

    @classmethod
    def get_instance(cls) -> "PaymentManager":
        if cls._instance is None:
            return cls.configure_from_settings()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        with cls._lock:
            cls._instance = None

    @property
    def provider(self) -> PaymentProvider:
        return self._provider
