from __future__ import annotations

import logging

from core.payments.types import PaymentStatus

logger = logging.getLogger(__name__)

GATEWAY_STATUS_MAP: dict[str, PaymentStatus] = {
    "created": PaymentStatus.PENDING,
    "authorized": PaymentStatus.PENDING,
    "captured": PaymentStatus.SUCCESS,
    "failed": PaymentStatus.FAILED,
    "cancelled": PaymentStatus.CANCELLED,
    "refunded": PaymentStatus.REFUNDED,
}


def map_gateway_status(raw_status: str | None) -> PaymentStatus:
    """Normalize a gateway status string.

    Unrecognized values fall back to ``pending`` and are logged.
    """
    value = (raw_status or "").strip().lower()
    mapped = GATEWAY_STATUS_MAP.get(value)
    if mapped is None:
        logger.warning("Unrecognized gateway status, treating as pending", extra={"gateway_status": raw_status})
        return PaymentStatus.PENDING
    return mapped
