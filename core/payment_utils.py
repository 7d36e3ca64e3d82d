from __future__ import annotations

import re
import secrets
import string
import time
from decimal import ROUND_HALF_UP, Decimal

from core.settings import DEFAULT_MAX_AMOUNT

_BASE36_ALPHABET = string.digits + string.ascii_uppercase


def to_minor_units(amount: Decimal | int | float) -> int:
    """Rupees to paise, rounded half-up."""
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(amount_minor: int) -> Decimal:
    return Decimal(int(amount_minor)) / 100


def _group_indian(digits: str) -> str:
    # Last three digits, then groups of two: 12,34,567
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_amount(amount: Decimal | int | float) -> str:
    value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    whole, fraction = f"{abs(value):.2f}".split(".")
    return f"{sign}₹{_group_indian(whole)}.{fraction}"


def generate_order_id(prefix: str = "GK") -> str:
    timestamp = int(time.time() * 1000)
    suffix = "".join(secrets.choice(_BASE36_ALPHABET) for _ in range(6))
    return f"{prefix}_{timestamp}_{suffix}"


def validate_amount(amount: Decimal | int | float, *, max_amount: Decimal = DEFAULT_MAX_AMOUNT) -> bool:
    value = Decimal(str(amount))
    return Decimal(0) < value <= max_amount


def sanitize_phone_number(phone: str) -> str:
    return re.sub(r"\D", "", phone or "")


def mask_card_number(card_number: str) -> str:
    if len(card_number) < 8:
        return card_number
    return f"{card_number[:4]}****{card_number[-4:]}"


def mask_email(email: str) -> str:
    username, separator, domain = email.partition("@")
    if not separator or len(username) <= 2:
        return email
    return f"{username[:2]}***@{domain}"
