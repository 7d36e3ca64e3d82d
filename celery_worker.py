import asyncio
import os

from celery import Celery
from dotenv import load_dotenv

from core import task as _task_registration  # noqa: F401
from core.queue.celery_provider import RUN_TASK_NAME
from core.queue.tasks import execute_registered_task

load_dotenv()

broker_url = os.getenv("CELERY_BROKER_URL")
backend_url = os.getenv("CELERY_RESULT_BACKEND")

celery_app = Celery("meal_orders", broker=broker_url, backend=backend_url)
celery_app.conf.update(task_track_started=True, task_acks_late=True)


@celery_app.task(name=RUN_TASK_NAME)
def run_async_task(task_key: str, kwargs: dict):
    return asyncio.run(execute_registered_task(task_key=task_key, payload=kwargs))
