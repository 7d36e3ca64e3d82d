from core.payments.config import PaymentConfig
from core.payments.manager import PaymentManager
from core.payments.provider import PaymentProvider
from core.payments.types import (
    GatewayPaymentRequest,
    GatewayPaymentResponse,
    GatewayRefundResponse,
    PaymentMethod,
    PaymentProviderName,
    PaymentStatus,
    PaymentWebhook,
)

__all__ = [
    "GatewayPaymentRequest",
    "GatewayPaymentResponse",
    "GatewayRefundResponse",
    "PaymentConfig",
    "PaymentManager",
    "PaymentMethod",
    "PaymentProvider",
    "PaymentProviderName",
    "PaymentStatus",
    "PaymentWebhook",
]
