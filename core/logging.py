"""JSON logging with request and payment correlation fields."""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

from pythonjsonlogger.json import JsonFormatter

request_id_ctx: ContextVar[str] = ContextVar("request_id", default="")
payment_id_ctx: ContextVar[str] = ContextVar("payment_id", default="")

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(service_name)s %(request_id)s %(payment_id)s %(message)s"


@contextmanager
def bind_payment_id(payment_id: str | None) -> Iterator[None]:
    """Tag log records emitted inside the block with ``payment_id``."""

    token = payment_id_ctx.set(payment_id or "")
    try:
        yield
    finally:
        payment_id_ctx.reset(token)


class ContextFilter(logging.Filter):
    """Attach service and correlation identifiers to every record."""

    def __init__(self, service_name: str) -> None:
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:
        record.service_name = self.service_name
        if not getattr(record, "request_id", ""):
            record.request_id = request_id_ctx.get()
        if not getattr(record, "payment_id", ""):
            record.payment_id = payment_id_ctx.get()
        return True


def configure_logging(*, service_name: str, level: str = "INFO") -> None:
    """Install a single stdout JSON handler on the root logger."""

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(ContextFilter(service_name))
    handler.setFormatter(JsonFormatter(_LOG_FORMAT))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)
