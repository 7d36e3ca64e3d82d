from __future__ import annotations

import re
from decimal import Decimal

from core.payment_utils import sanitize_phone_number
from core.settings import DEFAULT_MAX_AMOUNT, DEFAULT_WARN_AMOUNT, SUPPORTED_CURRENCY
from schemas.payment_schema import PaymentRequest, PaymentValidation, ValidationIssue

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
# Indian mobile numbers: ten digits, leading 6-9.
PHONE_PATTERN = re.compile(r"^[6-9]\d{9}$", re.ASCII)
MIN_ORDER_ID_LENGTH = 3
MIN_AMOUNT = Decimal("0.01")


def is_valid_email(email: str | None) -> bool:
    if not email:
        return False
    return EMAIL_PATTERN.match(email) is not None


def is_valid_phone(phone: str | None) -> bool:
    if not phone:
        return False
    return PHONE_PATTERN.match(sanitize_phone_number(phone)) is not None


def _decimal_places(amount: Decimal) -> int:
    exponent = amount.normalize().as_tuple().exponent
    return -exponent if isinstance(exponent, int) and exponent < 0 else 0


def validate_payment_request(
    request: PaymentRequest,
    *,
    currency: str = SUPPORTED_CURRENCY,
    warn_amount: Decimal = DEFAULT_WARN_AMOUNT,
    max_amount: Decimal = DEFAULT_MAX_AMOUNT,
) -> PaymentValidation:
    errors: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []

    if request.amount <= 0:
        errors.append(ValidationIssue(field="amount", message="Amount must be greater than 0", code="INVALID_AMOUNT"))
    elif request.amount < MIN_AMOUNT or _decimal_places(request.amount) > 2:
        errors.append(
            ValidationIssue(
                field="amount",
                message="Amount must be at least 0.01 with no more than 2 decimal places",
                code="INVALID_AMOUNT",
            )
        )
    elif request.amount > max_amount:
        errors.append(
            ValidationIssue(
                field="amount",
                message=f"Amount must not exceed {max_amount}",
                code="AMOUNT_LIMIT_EXCEEDED",
            )
        )

    if request.amount > warn_amount:
        warnings.append(
            ValidationIssue(field="amount", message="Amount exceeds recommended limit", code="HIGH_AMOUNT_WARNING")
        )

    if not request.currency or request.currency != currency:
        errors.append(
            ValidationIssue(
                field="currency",
                message=f"Only {currency} currency is supported",
                code="UNSUPPORTED_CURRENCY",
            )
        )

    if not is_valid_email(request.customer_email):
        errors.append(
            ValidationIssue(field="customerEmail", message="Valid email address is required", code="INVALID_EMAIL")
        )

    if not is_valid_phone(request.customer_phone):
        errors.append(
            ValidationIssue(field="customerPhone", message="Valid phone number is required", code="INVALID_PHONE")
        )

    if not request.order_id or len(request.order_id) < MIN_ORDER_ID_LENGTH:
        errors.append(
            ValidationIssue(
                field="orderId",
                message=f"Order ID must be at least {MIN_ORDER_ID_LENGTH} characters",
                code="INVALID_ORDER_ID",
            )
        )

    return PaymentValidation(is_valid=not errors, errors=errors, warnings=warnings)
