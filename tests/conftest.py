from __future__ import annotations

import pytest

from core import task as _task_registration  # noqa: F401
from core.payments.config import PaymentConfig
from core.payments.test_environment_provider import FakePaymentProvider
from core.queue.local_provider import LocalQueueProvider
from core.queue.manager import QueueManager
from core.settings import get_settings
from repositories.payment_repo import InMemoryPaymentStore
from services.payment_service import PaymentOrchestrator

WEBHOOK_SECRET = "whsec_test"


@pytest.fixture
def payment_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("PAYMENT_PROVIDER", "test")
    monkeypatch.setenv("PUBLIC_BASE_URL", "http://localhost:3000")
    monkeypatch.setenv("RAZORPAY_WEBHOOK_SECRET", WEBHOOK_SECRET)
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
def fake_provider() -> FakePaymentProvider:
    return FakePaymentProvider(base_url="http://localhost:3000")


@pytest.fixture
def store() -> InMemoryPaymentStore:
    return InMemoryPaymentStore()


@pytest.fixture
def queue() -> QueueManager:
    return QueueManager(provider=LocalQueueProvider())


@pytest.fixture
def orchestrator(fake_provider, store, queue) -> PaymentOrchestrator:
    return PaymentOrchestrator(
        config=PaymentConfig(provider="test", webhook_secret=WEBHOOK_SECRET),
        provider=fake_provider,
        store=store,
        queue=queue,
    )
