from __future__ import annotations

import json

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.v1 import webhooks_route
from core.payments.config import PaymentConfig
from core.payments.signatures import compute_signature
from core.payments.types import PaymentStatus
from core.response_envelope import install_exception_handlers
from schemas.payment_schema import StoredPayment
from services.payment_service import PaymentOrchestrator, get_payment_orchestrator

SECRET = "whsec_test"


def _build_app(orchestrator) -> FastAPI:
    app = FastAPI()
    install_exception_handlers(app)
    app.include_router(webhooks_route.router)
    app.dependency_overrides[get_payment_orchestrator] = lambda: orchestrator
    return app


def _captured_event(payment_id: str = "pay_1") -> bytes:
    return json.dumps(
        {
            "event": "payment.captured",
            "account_id": "acc_1",
            "payload": {
                "payment": {
                    "entity": {"id": payment_id, "amount": 47400, "currency": "INR", "status": "captured"}
                }
            },
        }
    ).encode()


async def _seed_payment(store, payment_id: str = "pay_1") -> None:
    await store.save_payment(
        StoredPayment(
            payment_id=payment_id,
            order_id="GK_123",
            customer_id="customer-1",
            amount=474,
            currency="INR",
            status=PaymentStatus.PENDING,
            provider="test",
        )
    )


@pytest.mark.asyncio
async def test_signed_event_is_applied(orchestrator, store):
    await _seed_payment(store)
    body = _captured_event()
    client = TestClient(_build_app(orchestrator))

    response = client.post(
        "/webhooks/payment",
        content=body,
        headers={"x-razorpay-signature": compute_signature(body, SECRET), "content-type": "application/json"},
    )

    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert (await store.get_payment("pay_1")).status == PaymentStatus.SUCCESS
    assert (await store.get_payment("pay_1")).gateway_response["status"] == "captured"


def test_missing_signature_is_400(orchestrator):
    client = TestClient(_build_app(orchestrator))

    response = client.post("/webhooks/payment", content=_captured_event())

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Missing signature"


@pytest.mark.asyncio
async def test_bad_signature_is_400_and_changes_nothing(orchestrator, store):
    await _seed_payment(store)
    client = TestClient(_build_app(orchestrator))

    response = client.post(
        "/webhooks/payment",
        content=_captured_event(),
        headers={"x-razorpay-signature": compute_signature(b"something else", SECRET)},
    )

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Invalid signature"
    assert (await store.get_payment("pay_1")).status == PaymentStatus.PENDING


def test_unconfigured_secret_is_500(fake_provider, store):
    orchestrator = PaymentOrchestrator(config=PaymentConfig(provider="test"), provider=fake_provider, store=store)
    client = TestClient(_build_app(orchestrator))

    response = client.post("/webhooks/payment", content=b"{}", headers={"x-razorpay-signature": "abc"})

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "PAYMENT_WEBHOOK_NOT_CONFIGURED"


def test_signed_but_unusable_event_is_500(orchestrator):
    body = json.dumps({"event": "order.paid", "payload": {}}).encode()
    client = TestClient(_build_app(orchestrator))

    response = client.post("/webhooks/payment", content=body, headers={"x-razorpay-signature": compute_signature(body, SECRET)})

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "PAYMENT_WEBHOOK_FAILED"
