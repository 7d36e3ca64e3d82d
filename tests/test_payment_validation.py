from __future__ import annotations

from decimal import Decimal

import pytest

from core.payments.validation import is_valid_phone, validate_payment_request
from schemas.payment_schema import PaymentRequest


def _request(**overrides) -> PaymentRequest:
    values = {
        "amount": Decimal("474"),
        "currency": "INR",
        "order_id": "GK_123",
        "customer_id": "customer-1",
        "customer_email": "a@b.com",
        "customer_phone": "9876543210",
        "description": "weekly plan",
        "return_url": "http://localhost:3000/payment/success",
    }
    values.update(overrides)
    return PaymentRequest(**values)


def test_weekly_plan_request_is_valid():
    validation = validate_payment_request(_request())

    assert validation.is_valid is True
    assert validation.errors == []
    assert validation.warnings == []


def test_phone_with_leading_one_is_rejected():
    validation = validate_payment_request(_request(customer_phone="1234567890"))

    assert validation.is_valid is False
    assert "INVALID_PHONE" in validation.error_codes()
    assert validation.errors[0].field == "customerPhone"


@pytest.mark.parametrize("amount", ["0", "-1", "-0.01", "-474"])
def test_non_positive_amount_is_rejected(amount):
    validation = validate_payment_request(_request(amount=Decimal(amount)))

    assert validation.is_valid is False
    assert "INVALID_AMOUNT" in validation.error_codes()


@pytest.mark.parametrize("amount", ["0.004", "474.005"])
def test_sub_paisa_amounts_are_rejected(amount):
    validation = validate_payment_request(_request(amount=Decimal(amount)))

    assert validation.error_codes() == {"INVALID_AMOUNT"}


def test_trailing_zeros_do_not_count_as_precision():
    assert validate_payment_request(_request(amount=Decimal("474.500"))).is_valid is True


@pytest.mark.parametrize("currency", ["USD", "inr", "", "EUR"])
def test_other_currencies_are_rejected_even_when_everything_else_is_valid(currency):
    validation = validate_payment_request(_request(currency=currency))

    assert validation.is_valid is False
    assert validation.error_codes() == {"UNSUPPORTED_CURRENCY"}


@pytest.mark.parametrize("leading", "6789")
def test_ten_digit_numbers_starting_six_to_nine_pass(leading):
    assert is_valid_phone(f"{leading}123456789") is True


@pytest.mark.parametrize(
    "phone",
    ["0123456789", "1234567890", "5123456789", "987654321", "98765432101", "", "abcdefghij"],
)
def test_other_phone_shapes_fail(phone):
    assert is_valid_phone(phone) is False


def test_formatted_phone_is_accepted_after_stripping_separators():
    assert is_valid_phone("98765-43210") is True


def test_high_amount_warns_without_failing():
    validation = validate_payment_request(_request(amount=Decimal("150000")))

    assert validation.is_valid is True
    assert [warning.code for warning in validation.warnings] == ["HIGH_AMOUNT_WARNING"]


def test_amount_over_ceiling_is_rejected():
    validation = validate_payment_request(_request(amount=Decimal("1000000.01")))

    assert validation.is_valid is False
    assert "AMOUNT_LIMIT_EXCEEDED" in validation.error_codes()


def test_every_problem_is_reported_at_once():
    validation = validate_payment_request(
        _request(amount=Decimal(0), currency="USD", customer_email="nope", customer_phone="123", order_id="G1")
    )

    assert validation.error_codes() == {
        "INVALID_AMOUNT",
        "UNSUPPORTED_CURRENCY",
        "INVALID_EMAIL",
        "INVALID_PHONE",
        "INVALID_ORDER_ID",
    }
