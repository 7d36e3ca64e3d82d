import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request, status
from fastapi.responses import JSONResponse

from core.errors import ErrorCode, SignatureError, WebhookSecretNotConfigured
from core.payments.signatures import require_valid_signature
from core.response_envelope import error_response
from services.payment_service import PaymentOrchestrator, get_payment_orchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["Webhooks"])

SIGNATURE_HEADER = "x-razorpay-signature"


@router.post(
    "/payment",
    responses={
        400: {"description": "Missing or invalid signature"},
        500: {"description": "Webhook secret not configured or processing failed"},
    },
)
async def payment_webhook(
    request: Request,
    signature: Optional[str] = Header(default=None, alias=SIGNATURE_HEADER),
    orchestrator: PaymentOrchestrator = Depends(get_payment_orchestrator),
):
    """Receive signed payment events from the gateway."""
    request_id = getattr(request.state, "request_id", None)
    if not signature:
        logger.warning("Webhook received without signature")
        return error_response(
            status_code=status.HTTP_400_BAD_REQUEST,
            code=ErrorCode.PAYMENT_WEBHOOK_INVALID.value,
            message="Missing signature",
            request_id=request_id,
        )

    body = await request.body()
    try:
        require_valid_signature(body, signature, orchestrator.config.webhook_secret)
    except WebhookSecretNotConfigured as err:
        logger.error("Webhook secret is not configured")
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            code=ErrorCode.PAYMENT_WEBHOOK_NOT_CONFIGURED.value,
            message=str(err),
            request_id=request_id,
        )
    except SignatureError as err:
        logger.warning("Webhook signature mismatch")
        return error_response(
            status_code=status.HTTP_400_BAD_REQUEST,
            code=ErrorCode.PAYMENT_WEBHOOK_INVALID.value,
            message=err.message,
            request_id=request_id,
        )

    if not await orchestrator.handle_webhook(body, signature):
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            code=ErrorCode.PAYMENT_WEBHOOK_FAILED.value,
            message="Webhook processing failed",
            request_id=request_id,
        )
    return JSONResponse(status_code=status.HTTP_200_OK, content={"success": True})
