from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta, timezone

from fastapi import status

from core.errors import AppException, ErrorCode, resource_not_found, validation_failed
from core.menu_plans import DAYS_PER_DURATION
from core.payment_utils import generate_order_id, mask_email
from core.payments.store import PaymentStore
from core.payments.validation import is_valid_email, is_valid_phone
from schemas.order import CheckoutIn, Order, OrderItem
from services.menu_service import calculate_plan_pricing, get_menu_plan

logger = logging.getLogger(__name__)

PINCODE_PATTERN = re.compile(r"^\d{6}$", re.ASCII)


def validate_checkout(payload: CheckoutIn) -> dict[str, str]:
    """Field name to message for every problem in the checkout form."""

    errors: dict[str, str] = {}
    customer = payload.customer
    address = payload.delivery_address

    if not customer.name.strip():
        errors["name"] = "Name is required"
    if not customer.email.strip():
        errors["email"] = "Email is required"
    elif not is_valid_email(customer.email):
        errors["email"] = "Please enter a valid email address"
    if not customer.phone.strip():
        errors["phone"] = "Phone number is required"
    elif not is_valid_phone(customer.phone):
        errors["phone"] = "Please enter a valid 10-digit phone number"

    if not address.name.strip():
        errors["deliveryName"] = "Delivery name is required"
    if not address.phone.strip():
        errors["deliveryPhone"] = "Delivery phone is required"
    elif not is_valid_phone(address.phone):
        errors["deliveryPhone"] = "Please enter a valid 10-digit phone number"
    if not address.address.strip():
        errors["address"] = "Address is required"
    if not address.pincode.strip():
        errors["pincode"] = "Pincode is required"
    elif not PINCODE_PATTERN.match(address.pincode):
        errors["pincode"] = "Please enter a valid 6-digit pincode"

    return errors


def build_checkout_order(payload: CheckoutIn, *, now: datetime | None = None) -> Order:
    errors = validate_checkout(payload)
    if errors:
        raise validation_failed("Checkout details are invalid", details=errors)

    plan = get_menu_plan(payload.plan_id)
    if not plan.is_available:
        raise AppException(
            status_code=status.HTTP_409_CONFLICT,
            code=ErrorCode.PLAN_UNAVAILABLE,
            message="This menu plan is not available right now",
            details={"plan_id": plan.id},
        )

    pricing = calculate_plan_pricing(plan.id, payload.duration)
    start = now or datetime.now(timezone.utc)
    end = start + timedelta(days=DAYS_PER_DURATION[payload.duration])
    created_at = start.isoformat()

    return Order(
        id=generate_order_id(),
        customer_id=payload.customer.email,
        customer_email=payload.customer.email,
        customer_phone=payload.customer.phone,
        customer_name=payload.customer.name,
        delivery_address=payload.delivery_address,
        items=[
            OrderItem(
                plan_id=plan.id,
                plan_name=plan.name,
                quantity=1,
                unit_price=pricing.unit_price,
                total_price=pricing.total_price,
                duration=payload.duration,
                start_date=created_at,
                end_date=end.isoformat(),
            )
        ],
        subtotal=pricing.total_price,
        delivery_fee=0,
        discount=pricing.savings,
        total=pricing.total_price,
        notes=payload.notes,
        created_at=created_at,
        updated_at=created_at,
    )


async def create_order(payload: CheckoutIn, *, store: PaymentStore) -> Order:
    order = await store.save_order(build_checkout_order(payload))
    logger.info(
        "Order created",
        extra={"order_id": order.id, "plan_id": payload.plan_id, "customer_email": mask_email(order.customer_email)},
    )
    return order


async def retrieve_order(order_id: str, *, store: PaymentStore) -> Order:
    order = await store.get_order(order_id)
    if order is None:
        raise resource_not_found("Order", order_id)
    return order
