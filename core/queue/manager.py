from __future__ import annotations

import logging
import uuid
from threading import Lock
from typing import Any

from core.queue.local_provider import LocalQueueProvider
from core.queue.provider import QueueProvider
from core.queue.types import ORDER_CONFIRMATION_TASK, OrderConfirmation, QueuedJob, QueueJobResult, QueueTaskKey

logger = logging.getLogger(__name__)


class QueueManager:
    """Process-wide handle on the background job backend.

    Falls back to the in-memory provider until ``configure`` is called, so
    payment flows keep working in tests and in deployments without a broker.
    """

    _instance: "QueueManager | None" = None
    _lock = Lock()

    def __init__(self, provider: QueueProvider) -> None:
        self._provider = provider

    @classmethod
    def configure(cls, provider: QueueProvider) -> "QueueManager":
        with cls._lock:
            cls._instance = cls(provider=provider)
            return cls._instance

    @classmethod
    def get_instance(cls) -> "QueueManager":
        if cls._instance is None:
            return cls.configure(LocalQueueProvider())
        return cls._instance

    @property
    def provider(self) -> QueueProvider:
        return self._provider

    @property
    def backend_name(self) -> str:
        return self._provider.backend_name

    def enqueue(self, task_key: str, payload: dict[str, Any]) -> QueueJobResult:
        job = QueuedJob(task_id=uuid.uuid4().hex, task_key=QueueTaskKey(task_key), payload=dict(payload))
        result = self._provider.submit(job)
        logger.info(
            "Job enqueued",
            extra={"task_key": task_key, "task_id": result.task_id, "queue_backend": result.backend},
        )
        return result

    def enqueue_order_confirmation(self, confirmation: OrderConfirmation) -> QueueJobResult:
        return self.enqueue(ORDER_CONFIRMATION_TASK, confirmation.as_payload())

    def get_status(self, task_id: str) -> str:
        return self._provider.get_status(task_id)
