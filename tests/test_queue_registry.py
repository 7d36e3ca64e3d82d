import logging

import pytest

from core.queue import ORDER_CONFIRMATION_TASK, OrderConfirmation, QueueManager
from core.queue.celery_provider import RUN_TASK_NAME, CeleryQueueProvider
from core.queue.local_provider import LocalQueueProvider
from core.queue.tasks import execute_registered_task, list_registered_task_keys, register_task
from core import task as _task_registration  # noqa: F401


@pytest.mark.asyncio
async def test_queue_registry_executes_task():
    async def _sample_task(value: int) -> int:
        return value + 1

    register_task("test_queue_registry_executes_task", _sample_task)
    result = await execute_registered_task(
        task_key="test_queue_registry_executes_task",
        payload={"value": 2},
    )
    assert result == 3


def test_registering_a_different_function_under_same_key_fails():
    async def _first() -> None:
        return None

    async def _second() -> None:
        return None

    register_task("test_duplicate_key", _first)
    register_task("test_duplicate_key", _first)
    with pytest.raises(ValueError):
        register_task("test_duplicate_key", _second)


@pytest.mark.asyncio
async def test_order_confirmation_task_is_registered():
    assert ORDER_CONFIRMATION_TASK in list_registered_task_keys()

    result = await execute_registered_task(
        task_key=ORDER_CONFIRMATION_TASK,
        payload={"order_id": "GK_1", "payment_id": "pay_1", "customer_email": "asha@example.com"},
    )
    assert result is True


@pytest.mark.asyncio
async def test_unknown_task_is_rejected():
    with pytest.raises(ValueError):
        await execute_registered_task(task_key="orders.missing", payload={})


def test_local_provider_runs_job_without_a_loop(caplog):
    caplog.set_level(logging.INFO, logger="core.task")
    manager = QueueManager(provider=LocalQueueProvider())
    payload = {"order_id": "GK_1", "payment_id": "pay_1", "customer_email": None}

    queued = manager.enqueue(ORDER_CONFIRMATION_TASK, payload)

    assert queued.backend == "local"
    assert manager.provider.jobs[0].payload == payload
    assert manager.get_status(queued.task_id) == "SUCCESS"
    assert manager.get_status("other") == "UNKNOWN"
    assert "Order confirmation sent" in caplog.messages


@pytest.mark.asyncio
async def test_local_provider_schedules_job_on_running_loop():
    provider = LocalQueueProvider()
    manager = QueueManager(provider=provider)

    queued = manager.enqueue(ORDER_CONFIRMATION_TASK, {"order_id": "GK_1"})
    await provider.drain()

    # Missing payment_id makes the task call fail.
    assert manager.get_status(queued.task_id) == "FAILURE"


def test_local_provider_history_is_bounded():
    provider = LocalQueueProvider(history=2)
    manager = QueueManager(provider=provider)
    payload = {"order_id": "GK_1", "payment_id": "pay_1"}

    first = manager.enqueue(ORDER_CONFIRMATION_TASK, payload)
    manager.enqueue(ORDER_CONFIRMATION_TASK, payload)
    last = manager.enqueue(ORDER_CONFIRMATION_TASK, payload)

    assert len(provider.jobs) == 2
    assert manager.get_status(first.task_id) == "UNKNOWN"
    assert manager.get_status(last.task_id) == "SUCCESS"


def test_order_confirmation_payload_shape():
    manager = QueueManager(provider=LocalQueueProvider())

    manager.enqueue_order_confirmation(OrderConfirmation(order_id="GK_1", payment_id="pay_1"))

    job = manager.provider.jobs[0]
    assert job.task_key == ORDER_CONFIRMATION_TASK
    assert job.payload == {"order_id": "GK_1", "payment_id": "pay_1", "customer_email": None}


class _StubCelery:
    def __init__(self) -> None:
        self.sent: list[tuple[str, dict]] = []

    def send_task(self, name, **kwargs):
        self.sent.append((name, kwargs))


def test_celery_provider_publishes_with_assigned_task_id():
    app = _StubCelery()
    manager = QueueManager(provider=CeleryQueueProvider(celery_app=app))

    queued = manager.enqueue(ORDER_CONFIRMATION_TASK, {"order_id": "GK_1"})

    name, kwargs = app.sent[0]
    assert name == RUN_TASK_NAME
    assert kwargs["task_id"] == queued.task_id
    assert kwargs["args"] == [ORDER_CONFIRMATION_TASK, {"order_id": "GK_1"}]
    assert manager.backend_name == "celery"
