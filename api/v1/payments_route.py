from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status

from core.response_envelope import document_response, envelope_response, error_response
from core.settings import get_settings
from schemas.payment_schema import CreatePaymentIn, PaymentRequest, RefundIn, RefundRequest, VerifyPaymentIn
from services.payment_service import PaymentOrchestrator, describe_payment_failure, get_payment_orchestrator

router = APIRouter(prefix="/payments", tags=["Payments"])

_CREATED_FIELDS = {"payment_id", "order_id", "amount", "currency", "status", "payment_url", "transaction_id"}
_VERIFIED_FIELDS = {"payment_id", "order_id", "amount", "currency", "status", "transaction_id", "timestamp"}


@router.post("")
@document_response(
    success_example={
        "paymentId": "pay_29QQoUBi66xm2f",
        "orderId": "GK_1718000000000_A1B2C3",
        "amount": 474,
        "currency": "INR",
        "status": "pending",
        "paymentUrl": "https://rzp.io/i/abc123",
        "transactionId": "pay_29QQoUBi66xm2f",
    },
    response_codes={400: "Missing fields, failed validation or gateway rejection", 503: "Gateway not configured"},
)
async def create_payment(
    payload: CreatePaymentIn,
    request: Request,
    orchestrator: PaymentOrchestrator = Depends(get_payment_orchestrator),
):
    settings = get_settings()
    response = await orchestrator.create_payment(
        PaymentRequest(
            amount=payload.amount,
            currency=payload.currency,
            order_id=payload.order_id,
            customer_id=payload.customer_id,
            customer_email=payload.customer_email,
            customer_phone=payload.customer_phone,
            description=payload.description,
            return_url=payload.return_url or settings.success_url,
            webhook_url=payload.webhook_url or settings.webhook_url,
            metadata=payload.metadata or {},
        )
    )
    if not response.success:
        error = response.error
        return error_response(
            status_code=status.HTTP_400_BAD_REQUEST,
            code=error.code if error else "PAYMENT_CREATION_FAILED",
            message=error.message if error else "Payment creation failed",
            details=error.details if error else None,
            request_id=getattr(request.state, "request_id", None),
        )
    return response.model_dump(mode="json", by_alias=True, include=_CREATED_FIELDS)


@router.post("/verify")
async def verify_payment(
    payload: VerifyPaymentIn,
    request: Request,
    orchestrator: PaymentOrchestrator = Depends(get_payment_orchestrator),
):
    """Look the payment up at the gateway. Always 200; ``success`` mirrors the payment outcome."""
    response = await orchestrator.verify_payment(payload.payment_id)
    return envelope_response(
        success=response.success,
        data=response.model_dump(mode="json", by_alias=True, include=_VERIFIED_FIELDS),
        error=response.error,
        request=request,
    )


@router.get("/failure-reason")
@document_response(success_example={"message": "Your card was declined. Please try with a different card or contact your bank."})
async def payment_failure_reason(
    error_code: Optional[str] = Query(default=None, alias="errorCode"),
    error_description: Optional[str] = Query(default=None, alias="errorDescription"),
):
    return {"errorCode": error_code, "message": describe_payment_failure(error_code, error_description)}


@router.get("/{payment_id}/status")
@document_response(success_example={"paymentId": "pay_29QQoUBi66xm2f", "status": "success"})
async def payment_status(payment_id: str, orchestrator: PaymentOrchestrator = Depends(get_payment_orchestrator)):
    return {"paymentId": payment_id, "status": await orchestrator.get_payment_status(payment_id)}


@router.post("/{payment_id}/cancel")
@document_response(success_example={"paymentId": "pay_29QQoUBi66xm2f", "cancelled": True})
async def cancel_payment(payment_id: str, orchestrator: PaymentOrchestrator = Depends(get_payment_orchestrator)):
    return {"paymentId": payment_id, "cancelled": await orchestrator.cancel_payment(payment_id)}


@router.post("/{payment_id}/refund")
@document_response(
    success_example={"refundId": "rfnd_FP8QHiV938haTz", "paymentId": "pay_29QQoUBi66xm2f", "amount": 474, "status": "processed"},
    response_codes={400: "Refund rejected by the gateway"},
)
async def refund_payment(
    payment_id: str,
    payload: RefundIn,
    request: Request,
    orchestrator: PaymentOrchestrator = Depends(get_payment_orchestrator),
):
    response = await orchestrator.refund_payment(
        RefundRequest(payment_id=payment_id, amount=payload.amount, notes=payload.notes, receipt=payload.receipt)
    )
    if not response.success:
        error = response.error
        return error_response(
            status_code=status.HTTP_400_BAD_REQUEST,
            code=error.code if error else "REFUND_FAILED",
            message=error.message if error else "Refund failed",
            details=error.details if error else None,
            request_id=getattr(request.state, "request_id", None),
        )
    return response.model_dump(mode="json", by_alias=True, exclude={"error"})
