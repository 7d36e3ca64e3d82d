import logging
import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from celery_worker import celery_app
from core.logging import configure_logging, request_id_ctx
from core.payments.manager import PaymentManager
from core.queue.celery_provider import CeleryQueueProvider
from core.queue.local_provider import LocalQueueProvider
from core.queue.manager import QueueManager
from core.response_envelope import (
    apply_response_documentation,
    document_response,
    install_exception_handlers,
)
from core.settings import get_settings

settings = get_settings()
configure_logging(service_name=settings.service_name, level=settings.log_level)
logger = logging.getLogger(__name__)


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_ctx.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_ctx.reset(token)
        response.headers["X-Request-ID"] = request_id
        return response


class RequestTimingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        response.headers["X-Process-Time"] = str(time.time() - start_time)
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.celery_broker_url:
        QueueManager.configure(CeleryQueueProvider(celery_app=celery_app))
    else:
        QueueManager.configure(LocalQueueProvider())

    manager = PaymentManager.configure_from_settings()
    logger.info(
        "Payment provider configured",
        extra={"provider": manager.provider.provider_name, "queue_backend": QueueManager.get_instance().backend_name},
    )

    yield


app = FastAPI(lifespan=lifespan, title="Meal Orders API")
app.add_middleware(RequestIdMiddleware)
app.add_middleware(RequestTimingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins) if settings.cors_origins else ["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
install_exception_handlers(
    app,
    include_error_details=settings.debug_include_error_details and not settings.is_production,
)


@app.get("/health", tags=["Health"])
@document_response(
    success_example={"status": "healthy", "services": {"payments": "razorpay", "queue": "celery"}},
)
async def health_check():
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "services": {
            "payments": PaymentManager.get_instance().provider.provider_name,
            "queue": QueueManager.get_instance().backend_name,
        },
    }


# --- routes ---
from api.v1.menu_route import router as menu_router
from api.v1.orders_route import router as orders_router
from api.v1.payments_route import router as payments_router
from api.v1.webhooks_route import router as webhooks_router

app.include_router(payments_router)
app.include_router(webhooks_router)
app.include_router(menu_router)
app.include_router(orders_router)

apply_response_documentation(app)
