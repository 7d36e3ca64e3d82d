from __future__ import annotations

import logging
import re
from typing import Any

import httpx

from core.errors import GatewayError
from core.payments.provider import PaymentProvider
from core.payments.types import (
    GatewayPaymentRequest,
    GatewayPaymentResponse,
    GatewayRefundResponse,
    PaymentProviderName,
)

logger = logging.getLogger(__name__)

RAZORPAY_BASE_URL = "https://api.razorpay.com/v1"

# Ids are interpolated into request paths.
PAYMENT_ID_PATTERN = re.compile(r"[A-Za-z0-9_]+")


def _json_or_empty(response: httpx.Response) -> dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def _payment_path(payment_id: str, suffix: str = "") -> str:
    if not PAYMENT_ID_PATTERN.fullmatch(payment_id or ""):
        raise GatewayError("Invalid payment id", kind="rejected", status_code=400)
    return f"/payments/{payment_id}{suffix}"


def _parse(action: str, parser, data: dict[str, Any]):
    try:
        return parser(data)
    except (ValueError, TypeError) as err:
        logger.warning("Razorpay %s returned an unreadable body", action, extra={"error": str(err)})
        raise GatewayError(f"{action} failed: malformed gateway response", kind="rejected", payload=data) from err


def _error_description(data: dict[str, Any]) -> str:
    error = data.get("error")
    if isinstance(error, dict) and error.get("description"):
        return str(error["description"])
    return "Unknown error"


class RazorpayPaymentProvider(PaymentProvider):
    provider_name = PaymentProviderName.RAZORPAY.value

    def __init__(
        self,
        *,
        key_id: str,
        key_secret: str,
        environment: str = "sandbox",
        timeout_seconds: float = 30.0,
        base_url: str = RAZORPAY_BASE_URL,
    ) -> None:
        self._auth = (key_id, key_secret)
        self._environment = environment
        self._timeout = timeout_seconds
        self._base_url = base_url.rstrip("/")

    @property
    def environment(self) -> str:
        return self._environment

    async def _request(
        self,
        method: str,
        path: str,
        *,
        action: str,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient(base_url=self._base_url, auth=self._auth, timeout=self._timeout) as client:
                response = await client.request(method, path, json=json)
        except httpx.HTTPError as err:
            logger.warning("Razorpay %s transport failure", action, extra={"path": path, "error": str(err)})
            raise GatewayError(f"{action} failed: {err.__class__.__name__}", kind="transport") from err

        data = _json_or_empty(response)
        if not response.is_success:
            description = _error_description(data)
            logger.warning(
                "Razorpay %s rejected",
                action,
                extra={"path": path, "status_code": response.status_code, "description": description},
            )
            raise GatewayError(
                f"{action} failed: {description}",
                kind="rejected",
                status_code=response.status_code,
                payload=data,
            )
        return data

    async def create_payment(self, request: GatewayPaymentRequest) -> GatewayPaymentResponse:
        data = await self._request("POST", "/payments", action="Payment creation", json=request.to_payload())
        return _parse("Payment creation", GatewayPaymentResponse.from_payload, data)

    async def verify_payment(self, payment_id: str) -> GatewayPaymentResponse:
        data = await self._request("GET", _payment_path(payment_id), action="Payment verification")
        return _parse("Payment verification", GatewayPaymentResponse.from_payload, data)

    async def refund_payment(self, payment_id: str, amount_minor: int | None = None) -> GatewayRefundResponse:
        payload: dict[str, Any] = {}
        if amount_minor is not None:
            payload["amount"] = amount_minor
        data = await self._request("POST", _payment_path(payment_id, "/refund"), action="Refund", json=payload)
        return _parse("Refund", GatewayRefundResponse.from_payload, data)

    async def get_payment_status(self, payment_id: str) -> str:
        payment = await self.verify_payment(payment_id)
        return payment.status
