from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

SUPPORTED_PAYMENT_PROVIDERS = {"razorpay", "test"}
SUPPORTED_CURRENCY = "INR"
DEFAULT_MAX_AMOUNT = Decimal("1000000")
DEFAULT_WARN_AMOUNT = Decimal("100000")
DEFAULT_GATEWAY_TIMEOUT_SECONDS = 30.0


def _split_csv(value: str | None) -> tuple[str, ...]:
    if not value:
        return tuple()
    return tuple(item.strip() for item in value.split(",") if item.strip())


def _env(name: str) -> str | None:
    raw_value = os.getenv(name)
    if raw_value is None:
        return None
    normalized = raw_value.strip()
    return normalized or None


def _env_flag(name: str, default: str = "false") -> bool:
    return (os.getenv(name, default) or "").strip().lower() in {"1", "true", "yes"}


def _positive_decimal(name: str) -> str | None:
    raw_value = _env(name)
    if raw_value is None:
        return None
    try:
        parsed = Decimal(raw_value)
    except InvalidOperation:
        return f"{name} must be a positive number"
    if not parsed.is_finite() or parsed <= 0:
        return f"{name} must be a positive number"
    return None


def collect_missing_required_env_vars() -> list[str]:
    missing: list[str] = []

    if _env("PUBLIC_BASE_URL") is None:
        missing.append("PUBLIC_BASE_URL")

    payment_provider = (_env("PAYMENT_PROVIDER") or "razorpay").lower()
    if payment_provider == "razorpay":
        for var_name in ("RAZORPAY_KEY_ID", "RAZORPAY_KEY_SECRET", "RAZORPAY_WEBHOOK_SECRET"):
            if _env(var_name) is None:
                missing.append(var_name)

    return sorted(set(missing))


def collect_invalid_env_values() -> list[str]:
    invalid_values: list[str] = []

    payment_provider = (_env("PAYMENT_PROVIDER") or "razorpay").lower()
    if payment_provider not in SUPPORTED_PAYMENT_PROVIDERS:
        invalid_values.append("PAYMENT_PROVIDER must be one of: razorpay, test")

    currency = (_env("PAYMENT_CURRENCY") or SUPPORTED_CURRENCY).upper()
    if currency != SUPPORTED_CURRENCY:
        invalid_values.append(f"PAYMENT_CURRENCY must be {SUPPORTED_CURRENCY}")

    for var_name in ("PAYMENT_MAX_AMOUNT", "PAYMENT_WARN_AMOUNT", "PAYMENT_GATEWAY_TIMEOUT_SECONDS"):
        problem = _positive_decimal(var_name)
        if problem:
            invalid_values.append(problem)

    max_amount = _env("PAYMENT_MAX_AMOUNT")
    warn_amount = _env("PAYMENT_WARN_AMOUNT")
    if (
        max_amount is not None
        and warn_amount is not None
        and _positive_decimal("PAYMENT_MAX_AMOUNT") is None
        and _positive_decimal("PAYMENT_WARN_AMOUNT") is None
        and Decimal(warn_amount) > Decimal(max_amount)
    ):
        invalid_values.append("PAYMENT_WARN_AMOUNT must not exceed PAYMENT_MAX_AMOUNT")

    base_url = _env("PUBLIC_BASE_URL")
    if base_url is not None and not base_url.startswith(("http://", "https://")):
        invalid_values.append("PUBLIC_BASE_URL must start with http:// or https://")

    return invalid_values


def validate_required_environment() -> None:
    missing_vars = collect_missing_required_env_vars()
    invalid_values = collect_invalid_env_values()
    if not missing_vars and not invalid_values:
        return

    message_lines = ["Application startup blocked by invalid environment configuration."]
    if missing_vars:
        message_lines.append("")
        message_lines.append("Missing required environment variables:")
        message_lines.extend(f"- {name}" for name in missing_vars)
    if invalid_values:
        message_lines.append("")
        message_lines.append("Invalid environment values:")
        message_lines.extend(f"- {message}" for message in invalid_values)
    raise RuntimeError("\n".join(message_lines))


@dataclass(frozen=True)
class Settings:
    env: str
    service_name: str
    log_level: str
    cors_origins: tuple[str, ...]
    debug_include_error_details: bool
    public_base_url: str
    payment_provider: str
    payment_currency: str
    payment_max_amount: Decimal
    payment_warn_amount: Decimal
    payment_gateway_timeout_seconds: float
    razorpay_key_id: str | None
    razorpay_key_secret: str | None
    razorpay_webhook_secret: str | None
    celery_broker_url: str | None
    celery_result_backend: str | None

    @property
    def is_production(self) -> bool:
        return self.env.lower() == "production"

    @property
    def gateway_environment(self) -> str:
        return "production" if self.is_production else "sandbox"

    @property
    def success_url(self) -> str:
        return f"{self.public_base_url}/payment/success"

    @property
    def webhook_url(self) -> str:
        return f"{self.public_base_url}/webhooks/payment"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    validate_required_environment()

    return Settings(
        env=os.getenv("ENV", "development"),
        service_name=os.getenv("SERVICE_NAME", "meal-orders-api"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        cors_origins=_split_csv(os.getenv("CORS_ORIGINS")),
        debug_include_error_details=_env_flag("DEBUG_INCLUDE_ERROR_DETAILS"),
        public_base_url=(_env("PUBLIC_BASE_URL") or "").rstrip("/"),
        payment_provider=(_env("PAYMENT_PROVIDER") or "razorpay").lower(),
        payment_currency=(_env("PAYMENT_CURRENCY") or SUPPORTED_CURRENCY).upper(),
        payment_max_amount=Decimal(_env("PAYMENT_MAX_AMOUNT") or DEFAULT_MAX_AMOUNT),
        payment_warn_amount=Decimal(_env("PAYMENT_WARN_AMOUNT") or DEFAULT_WARN_AMOUNT),
        payment_gateway_timeout_seconds=float(
            _env("PAYMENT_GATEWAY_TIMEOUT_SECONDS") or DEFAULT_GATEWAY_TIMEOUT_SECONDS
        ),
        razorpay_key_id=_env("RAZORPAY_KEY_ID"),
        razorpay_key_secret=_env("RAZORPAY_KEY_SECRET"),
        razorpay_webhook_secret=_env("RAZORPAY_WEBHOOK_SECRET"),
        celery_broker_url=_env("CELERY_BROKER_URL"),
        celery_result_backend=_env("CELERY_RESULT_BACKEND"),
    )
