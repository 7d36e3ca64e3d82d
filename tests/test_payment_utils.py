from decimal import Decimal

import pytest

from core.payment_utils import (
    format_amount,
    from_minor_units,
    generate_order_id,
    mask_card_number,
    mask_email,
    sanitize_phone_number,
    to_minor_units,
    validate_amount,
)


@pytest.mark.parametrize(
    ("amount", "expected"),
    [(Decimal("474"), 47400), (Decimal("0.005"), 1), (Decimal("89.994"), 8999), (1925, 192500)],
)
def test_to_minor_units_rounds_half_up(amount, expected):
    assert to_minor_units(amount) == expected


def test_from_minor_units():
    assert from_minor_units(47451) == Decimal("474.51")


@pytest.mark.parametrize(
    ("amount", "expected"),
    [(474, "₹474.00"), (Decimal("1925.5"), "₹1,925.50"), (100000, "₹1,00,000.00"), (12345678, "₹1,23,45,678.00")],
)
def test_format_amount_uses_indian_grouping(amount, expected):
    assert format_amount(amount) == expected


def test_generated_order_ids_are_unique_and_prefixed():
    ids = {generate_order_id() for _ in range(50)}

    assert len(ids) == 50
    assert all(order_id.startswith("GK_") for order_id in ids)


def test_validate_amount_bounds():
    assert validate_amount(1) is True
    assert validate_amount(1_000_000) is True
    assert validate_amount(0) is False
    assert validate_amount(Decimal("1000000.01")) is False


def test_masking_helpers():
    assert sanitize_phone_number("+91 98765-43210") == "919876543210"
    assert mask_card_number("4111111111111111") == "4111****1111"
    assert mask_card_number("4111") == "4111"
    assert mask_email("asha@example.com") == "as***@example.com"
    assert mask_email("ab@example.com") == "ab@example.com"
