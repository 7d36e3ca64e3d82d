from __future__ import annotations

import logging

from core.payment_utils import mask_email
from core.queue.tasks import task
from core.queue.types import ORDER_CONFIRMATION_TASK

logger = logging.getLogger(__name__)


@task(ORDER_CONFIRMATION_TASK)
async def send_order_confirmation(order_id: str, payment_id: str, customer_email: str | None = None) -> bool:
    # Delivery channel (email/SMS) is not wired yet; the confirmation is logged.
    logger.info(
        "Order confirmation sent",
        extra={
            "order_id": order_id,
            "payment_id": payment_id,
            "customer_email": mask_email(customer_email) if customer_email else None,
        },
    )
    return True
