from fastapi import APIRouter, Depends

from core.payments.store import PaymentStore
from core.response_envelope import document_created, document_response
from repositories.payment_repo import get_payment_store
from schemas.order import CheckoutIn
from services.order_service import create_order, retrieve_order

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.post("")
@document_created(
    success_example={
        "id": "GK_1718000000000_A1B2C3",
        "subtotal": 474,
        "deliveryFee": 0,
        "discount": 0,
        "total": 474,
        "status": "pending",
        "paymentStatus": "pending",
    }
)
async def checkout(payload: CheckoutIn, store: PaymentStore = Depends(get_payment_store)):
    return await create_order(payload, store=store)


@router.get("/{order_id}")
@document_response(response_codes={404: "Order not found"})
async def get_order(order_id: str, store: PaymentStore = Depends(get_payment_store)):
    return await retrieve_order(order_id, store=store)
