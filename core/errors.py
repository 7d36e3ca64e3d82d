from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from fastapi import HTTPException, status


class ErrorCode(str, Enum):
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    MISSING_REQUIRED_FIELDS = "MISSING_REQUIRED_FIELDS"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    PAYMENT_PROVIDER_ERROR = "PAYMENT_PROVIDER_ERROR"
    PAYMENT_WEBHOOK_INVALID = "PAYMENT_WEBHOOK_INVALID"
    PAYMENT_WEBHOOK_NOT_CONFIGURED = "PAYMENT_WEBHOOK_NOT_CONFIGURED"
    PAYMENT_WEBHOOK_FAILED = "PAYMENT_WEBHOOK_FAILED"
    PLAN_UNAVAILABLE = "PLAN_UNAVAILABLE"


class AppException(HTTPException):
    def __init__(
        self,
        *,
        status_code: int,
        code: ErrorCode | str,
        message: str,
        details: Any | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        detail = {
            "message": message,
            "code": code.value if isinstance(code, ErrorCode) else code,
            "details": details,
        }
        super().__init__(status_code=status_code, detail=detail, headers=headers)


GatewayErrorKind = Literal["transport", "rejected"]


class GatewayError(Exception):
    """Failure talking to the payment gateway.

    ``transport`` covers timeouts, DNS failures and dropped connections;
    ``rejected`` means the gateway answered with a non-2xx status.
    """

    def __init__(
        self,
        message: str,
        *,
        kind: GatewayErrorKind,
        status_code: int | None = None,
        payload: Any | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.status_code = status_code
        self.payload = payload


class SignatureError(Exception):
    def __init__(self, message: str = "Invalid signature") -> None:
        super().__init__(message)
        self.message = message


class WebhookSecretNotConfigured(RuntimeError):
    pass


def resource_not_found(resource: str, resource_id: str | None = None) -> AppException:
    details = {"resource": resource}
    if resource_id:
        details["resource_id"] = resource_id
    return AppException(
        status_code=status.HTTP_404_NOT_FOUND,
        code=ErrorCode.RESOURCE_NOT_FOUND,
        message=f"{resource} not found",
        details=details,
    )


def validation_failed(message: str, details: Any | None = None) -> AppException:
    return AppException(
        status_code=status.HTTP_400_BAD_REQUEST,
        code=ErrorCode.VALIDATION_FAILED,
        message=message,
        details=details,
    )
