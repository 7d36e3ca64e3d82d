from __future__ import annotations

from typing import Protocol

from core.queue.types import QueuedJob, QueueJobResult


class QueueProvider(Protocol):
    backend_name: str

    def submit(self, job: QueuedJob) -> QueueJobResult:
        ...

    def get_status(self, task_id: str) -> str:
        ...
