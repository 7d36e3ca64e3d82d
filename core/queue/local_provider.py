from __future__ import annotations

import asyncio
import logging
from collections import deque

from core.queue.tasks import execute_registered_task
from core.queue.types import QueuedJob, QueueJobResult

logger = logging.getLogger(__name__)

DEFAULT_HISTORY = 500


class LocalQueueProvider:
    """Runs jobs in this process; used when no broker is configured.

    Inside a running event loop jobs are scheduled as tasks, otherwise they
    run to completion before ``submit`` returns. Only the most recent
    ``history`` jobs are kept for status lookups.
    """

    backend_name = "local"

    def __init__(self, history: int = DEFAULT_HISTORY) -> None:
        self.jobs: deque[QueuedJob] = deque(maxlen=history)
        self._statuses: dict[str, str] = {}
        self._running: set[asyncio.Task] = set()

    def submit(self, job: QueuedJob) -> QueueJobResult:
        if len(self.jobs) == self.jobs.maxlen:
            self._statuses.pop(self.jobs[0].task_id, None)
        self.jobs.append(job)
        self._statuses[job.task_id] = "PENDING"

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self._run(job))
        else:
            running = loop.create_task(self._run(job))
            self._running.add(running)
            running.add_done_callback(self._running.discard)
        return QueueJobResult(task_id=job.task_id, backend=self.backend_name, status="queued")

    def get_status(self, task_id: str) -> str:
        return self._statuses.get(task_id, "UNKNOWN")

    async def drain(self) -> None:
        """Wait for jobs scheduled on the current loop."""
        if self._running:
            await asyncio.gather(*list(self._running))

    async def _run(self, job: QueuedJob) -> None:
        self._mark(job.task_id, "STARTED")
        try:
            await execute_registered_task(task_key=str(job.task_key), payload=job.payload)
        except Exception:
            self._mark(job.task_id, "FAILURE")
            logger.exception("Local job failed", extra={"task_key": str(job.task_key), "task_id": job.task_id})
            return
        self._mark(job.task_id, "SUCCESS")

    def _mark(self, task_id: str, status: str) -> None:
        # Evicted jobs stay evicted.
        if task_id in self._statuses:
            self._statuses[task_id] = status
