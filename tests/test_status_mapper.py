import pytest

from core.payments.status_mapper import map_gateway_status
from core.payments.types import GatewayPaymentResponse, PaymentMethod, PaymentStatus


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("created", PaymentStatus.PENDING),
        ("authorized", PaymentStatus.PENDING),
        ("captured", PaymentStatus.SUCCESS),
        ("failed", PaymentStatus.FAILED),
        ("cancelled", PaymentStatus.CANCELLED),
        ("refunded", PaymentStatus.REFUNDED),
        (" Captured ", PaymentStatus.SUCCESS),
    ],
)
def test_known_gateway_statuses(raw, expected):
    assert map_gateway_status(raw) == expected


@pytest.mark.parametrize("raw", ["", None, "disputed", "CAPTURED_LATER", "unknown"])
def test_unrecognized_statuses_fall_back_to_pending(raw, caplog):
    with caplog.at_level("WARNING"):
        assert map_gateway_status(raw) == PaymentStatus.PENDING

    assert "Unrecognized gateway status" in caplog.text


def test_gateway_payment_method_is_parsed():
    payment = GatewayPaymentResponse.from_payload(
        {"id": "pay_1", "amount": 47400, "currency": "INR", "status": "captured", "method": "UPI"}
    )
    unknown = GatewayPaymentResponse.from_payload(
        {"id": "pay_2", "amount": 47400, "currency": "INR", "status": "captured", "method": "crypto"}
    )

    assert payment.method == PaymentMethod.UPI
    assert unknown.method is None
