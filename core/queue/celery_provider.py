from __future__ import annotations

from typing import Any

from core.queue.types import QueuedJob, QueueJobResult

RUN_TASK_NAME = "celery_worker.run_async_task"

# Broker publish retries; task-level retries live on the worker.
PUBLISH_RETRY_POLICY = {"max_retries": 3, "interval_start": 0, "interval_step": 0.5, "interval_max": 2}


class CeleryQueueProvider:
    backend_name = "celery"

    def __init__(self, celery_app: Any) -> None:
        self._celery_app = celery_app

    def submit(self, job: QueuedJob) -> QueueJobResult:
        self._celery_app.send_task(
            RUN_TASK_NAME,
            args=[str(job.task_key), job.payload],
            task_id=job.task_id,
            retry=True,
            retry_policy=PUBLISH_RETRY_POLICY,
        )
        return QueueJobResult(task_id=job.task_id, backend=self.backend_name, status="queued")

    def get_status(self, task_id: str) -> str:
        return self._celery_app.AsyncResult(task_id).status
