from core.queue.manager import QueueManager
from core.queue.tasks import execute_registered_task, list_registered_task_keys, register_task, task
from core.queue.types import ORDER_CONFIRMATION_TASK, OrderConfirmation

__all__ = [
    "ORDER_CONFIRMATION_TASK",
    "OrderConfirmation",
    "QueueManager",
    "execute_registered_task",
    "list_registered_task_keys",
    "register_task",
    "task",
]
