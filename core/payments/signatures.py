from __future__ import annotations

import hashlib
import hmac

from core.errors import SignatureError, WebhookSecretNotConfigured


def _as_bytes(value: bytes | str) -> bytes:
    if isinstance(value, bytes):
        return value
    return value.encode("utf-8")


def compute_signature(body: bytes | str, secret: str) -> str:
    return hmac.new(_as_bytes(secret), _as_bytes(body), hashlib.sha256).hexdigest()


def verify_signature(body: bytes | str, signature: str | None, secret: str | None) -> bool:
    if not signature or not secret:
        return False
    expected = compute_signature(body, secret)
    return hmac.compare_digest(expected.encode("ascii"), _as_bytes(signature.strip()))


def require_valid_signature(body: bytes | str, signature: str | None, secret: str | None) -> None:
    if not secret:
        raise WebhookSecretNotConfigured("Webhook secret not configured")
    if not signature:
        raise SignatureError("Missing signature")
    if not verify_signature(body, signature, secret):
        raise SignatureError()
