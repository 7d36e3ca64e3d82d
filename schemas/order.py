# ============================================================================
# ORDER SCHEMA
# ============================================================================

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from core.payments.types import PaymentStatus
from schemas.menu_plan import PlanDuration


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class DeliveryAddress(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    phone: str
    address: str
    landmark: Optional[str] = None
    city: str = ""
    state: str = ""
    pincode: str
    delivery_instructions: Optional[str] = Field(default=None, alias="deliveryInstructions")


class CustomerInfo(BaseModel):
    name: str
    email: str
    phone: str


class OrderItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    plan_id: str = Field(alias="planId")
    plan_name: str = Field(alias="planName")
    quantity: int = Field(default=1, ge=1)
    unit_price: int = Field(alias="unitPrice")
    total_price: int = Field(alias="totalPrice")
    duration: PlanDuration
    start_date: str = Field(alias="startDate")
    end_date: str = Field(alias="endDate")


class Order(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    customer_id: str = Field(alias="customerId")
    customer_email: str = Field(alias="customerEmail")
    customer_phone: str = Field(alias="customerPhone")
    customer_name: str = Field(alias="customerName")
    delivery_address: DeliveryAddress = Field(alias="deliveryAddress")
    items: List[OrderItem]
    subtotal: int
    delivery_fee: int = Field(default=0, alias="deliveryFee")
    discount: int = 0
    total: int
    status: OrderStatus = OrderStatus.PENDING
    payment_status: PaymentStatus = Field(default=PaymentStatus.PENDING, alias="paymentStatus")
    payment_id: Optional[str] = Field(default=None, alias="paymentId")
    notes: Optional[str] = None
    created_at: str = Field(default_factory=_now_iso, alias="createdAt")
    updated_at: str = Field(default_factory=_now_iso, alias="updatedAt")


class CheckoutIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    plan_id: str = Field(alias="planId", min_length=1)
    duration: PlanDuration = PlanDuration.WEEKLY
    customer: CustomerInfo
    delivery_address: DeliveryAddress = Field(alias="deliveryAddress")
    notes: Optional[str] = None
