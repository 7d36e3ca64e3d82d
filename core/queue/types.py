from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, NewType

QueueTaskKey = NewType("QueueTaskKey", str)

ORDER_CONFIRMATION_TASK = QueueTaskKey("orders.send_confirmation")


@dataclass(frozen=True)
class QueuedJob:
    """A unit of background work; ``task_id`` is assigned before submission."""

    task_id: str
    task_key: QueueTaskKey
    payload: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class QueueJobResult:
    task_id: str
    backend: str
    status: str


@dataclass(frozen=True)
class OrderConfirmation:
    order_id: str
    payment_id: str
    customer_email: str | None = None

    def as_payload(self) -> dict[str, Any]:
        return {
            "order_id": self.order_id,
            "payment_id": self.payment_id,
            "customer_email": self.customer_email,
        }
