from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.v1 import payments_route
from core.response_envelope import install_exception_handlers
from services.payment_service import get_payment_orchestrator

PAYMENT_BODY = {
    "amount": 474,
    "currency": "INR",
    "orderId": "GK_123",
    "customerId": "customer-1",
    "customerEmail": "a@b.com",
    "customerPhone": "9876543210",
    "description": "weekly plan",
}


def _build_app(orchestrator) -> FastAPI:
    app = FastAPI()
    install_exception_handlers(app)
    app.include_router(payments_route.router)
    app.dependency_overrides[get_payment_orchestrator] = lambda: orchestrator
    return app


@pytest.fixture
def client(payment_env, orchestrator) -> TestClient:
    return TestClient(_build_app(orchestrator))


def test_create_payment_returns_checkout_details(client, fake_provider):
    response = client.post("/payments", json=PAYMENT_BODY)

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    data = payload["data"]
    assert data["orderId"] == "GK_123"
    assert data["amount"] == 474
    assert data["currency"] == "INR"
    assert data["status"] == "pending"
    assert data["paymentUrl"].startswith("http://localhost:3000/payment/checkout/pay_test_")
    assert data["transactionId"] == data["paymentId"]
    assert set(payload["meta"]) == {"timestamp", "requestId", "version"}


def test_create_payment_defaults_callback_urls(client, fake_provider, monkeypatch):
    sent = []
    original = fake_provider.create_payment

    async def _capture(request):
        sent.append(request)
        return await original(request)

    monkeypatch.setattr(fake_provider, "create_payment", _capture)

    client.post("/payments", json=PAYMENT_BODY)

    assert sent[0].callback_url == "http://localhost:3000/payment/success"
    assert sent[0].webhook_url == "http://localhost:3000/webhooks/payment"
    assert sent[0].amount_minor == 47400


def test_create_payment_with_missing_field_is_400(client):
    body = {key: value for key, value in PAYMENT_BODY.items() if key != "customerEmail"}

    response = client.post("/payments", json=body)

    assert response.status_code == 400
    payload = response.json()
    assert payload["success"] is False
    assert payload["error"]["code"] == "MISSING_REQUIRED_FIELDS"
    assert payload["error"]["details"]["missingFields"] == ["customerEmail"]


def test_create_payment_with_empty_field_counts_as_missing(client):
    response = client.post("/payments", json={**PAYMENT_BODY, "description": ""})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "MISSING_REQUIRED_FIELDS"


def test_create_payment_failing_business_rules_is_400(client):
    response = client.post("/payments", json={**PAYMENT_BODY, "customerPhone": "1234567890"})

    assert response.status_code == 400
    payload = response.json()
    assert payload["success"] is False
    assert payload["error"]["code"] == "VALIDATION_ERROR"
    assert "Valid phone number is required" in payload["error"]["details"]


def test_unexpected_error_is_generic_500(payment_env, orchestrator):
    async def _explode(request):
        raise RuntimeError("database password is hunter2")

    orchestrator.create_payment = _explode
    client = TestClient(_build_app(orchestrator), raise_server_exceptions=False)

    response = client.post("/payments", json=PAYMENT_BODY)

    assert response.status_code == 500
    payload = response.json()
    assert payload["error"]["code"] == "INTERNAL_ERROR"
    assert payload["error"]["message"] == "Internal server error"
    assert payload["error"]["details"] is None
    assert "hunter2" not in response.text


def test_verify_payment_reflects_gateway_status(client, fake_provider):
    payment_id = client.post("/payments", json=PAYMENT_BODY).json()["data"]["paymentId"]

    pending = client.post("/payments/verify", json={"paymentId": payment_id})
    assert pending.status_code == 200
    assert pending.json()["success"] is False
    assert pending.json()["data"]["status"] == "pending"

    fake_provider.set_status(payment_id, "captured")
    captured = client.post("/payments/verify", json={"paymentId": payment_id})
    payload = captured.json()
    assert captured.status_code == 200
    assert payload["success"] is True
    assert payload["data"]["status"] == "success"
    assert payload["data"]["amount"] == 474
    assert "timestamp" in payload["data"]


def test_verify_unknown_payment_is_200_with_error(client):
    response = client.post("/payments/verify", json={"paymentId": "pay_missing"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is False
    assert payload["error"]["code"] == "PAYMENT_VERIFICATION_FAILED"
    assert payload["data"]["status"] == "failed"


def test_verify_without_payment_id_is_400(client):
    response = client.post("/payments/verify", json={})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "MISSING_REQUIRED_FIELDS"


def test_status_cancel_and_refund_routes(client, fake_provider):
    payment_id = client.post("/payments", json=PAYMENT_BODY).json()["data"]["paymentId"]

    status_response = client.get(f"/payments/{payment_id}/status")
    assert status_response.json()["data"] == {"paymentId": payment_id, "status": "pending"}

    refund_before_capture = client.post(f"/payments/{payment_id}/refund", json={})
    assert refund_before_capture.status_code == 400
    assert refund_before_capture.json()["error"]["code"] == "REFUND_FAILED"

    fake_provider.set_status(payment_id, "captured")
    refund = client.post(f"/payments/{payment_id}/refund", json={"amount": 100})
    assert refund.status_code == 200
    assert refund.json()["data"]["amount"] == 100
    assert refund.json()["data"]["status"] == "processed"

    cancel = client.post(f"/payments/{payment_id}/cancel")
    assert cancel.json()["data"] == {"paymentId": payment_id, "cancelled": False}


def test_failure_reason_prefers_description(client):
    known = client.get("/payments/failure-reason", params={"errorCode": "CARD_DECLINED"})
    described = client.get(
        "/payments/failure-reason",
        params={"errorCode": "CARD_DECLINED", "errorDescription": "Card expired"},
    )

    assert known.json()["data"]["message"].startswith("Your card was declined.")
    assert described.json()["data"]["message"] == "Card expired"
