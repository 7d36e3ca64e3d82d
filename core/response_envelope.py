from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import wraps
from typing import Any, Callable

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from pydantic import BaseModel
from starlette.responses import Response

from core.logging import request_id_ctx
from core.validation_errors import summarize_validation_errors

logger = logging.getLogger(__name__)

API_VERSION = "1.0"

_RESPONSE_DOC_ATTR = "__response_doc_config__"


@dataclass(frozen=True)
class ResponseDocConfig:
    status_code: int
    description: str
    success_example: Any | None = None
    summary: str | None = None
    response_codes: dict[int, str] | None = None
    error_examples: dict[int, Any] | None = None


def build_meta(request_id: str | None = None) -> dict[str, Any]:
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "requestId": request_id or request_id_ctx.get() or None,
        "version": API_VERSION,
    }


def _encode(data: Any) -> Any:
    # Models go out under their camelCase aliases.
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True)
    if isinstance(data, list):
        return [_encode(item) for item in data]
    return jsonable_encoder(data, by_alias=True)


def success_payload(data: Any, *, request_id: str | None = None) -> dict[str, Any]:
    return {
        "success": True,
        "data": _encode(data),
        "meta": build_meta(request_id),
    }


def error_payload(
    code: str,
    message: str,
    details: Any = None,
    *,
    data: Any = None,
    request_id: str | None = None,
) -> dict[str, Any]:
    return {
        "success": False,
        "data": _encode(data),
        "error": {"code": code, "message": message, "details": jsonable_encoder(details)},
        "meta": build_meta(request_id),
    }


def _request_id_from_request(request: Request | None) -> str | None:
    if request is None:
        return None
    return getattr(request.state, "request_id", None)


def envelope_response(
    *,
    success: bool,
    data: Any,
    error: BaseModel | None = None,
    status_code: int = status.HTTP_200_OK,
    request: Request | None = None,
) -> JSONResponse:
    """Envelope for results that carry their own success flag, such as verification."""

    request_id = _request_id_from_request(request)
    if success or error is None:
        content = success_payload(data, request_id=request_id)
        content["success"] = success
    else:
        content = error_payload(
            error.code,
            error.message,
            getattr(error, "details", None),
            data=data,
            request_id=request_id,
        )
    return JSONResponse(status_code=status_code, content=content)


def error_response(
    *,
    status_code: int,
    code: str,
    message: str,
    details: Any = None,
    data: Any = None,
    headers: dict[str, str] | None = None,
    request_id: str | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        headers=headers,
        content=error_payload(code, message, details, data=data, request_id=request_id),
    )


def _parse_http_exception_detail(detail: Any) -> tuple[str, str, Any]:
    if isinstance(detail, str):
        return "HTTP_EXCEPTION", detail, None

    if isinstance(detail, dict):
        message = detail.get("message")
        if isinstance(message, str) and message.strip():
            code = detail.get("code", "HTTP_EXCEPTION")
            details = detail.get("details")
            remaining = {k: v for k, v in detail.items() if k not in {"message", "code", "details"}}
            if remaining:
                details = {"extra": remaining, "details": details}
            return code, message, details

        nested_detail = detail.get("detail")
        if isinstance(nested_detail, str) and nested_detail.strip():
            return "HTTP_EXCEPTION", nested_detail, detail

        return "HTTP_EXCEPTION", "Request failed", detail

    if detail is None:
        return "HTTP_EXCEPTION", "Request failed", None

    return "HTTP_EXCEPTION", str(detail), None


def http_exception_response(exc: HTTPException, request: Request | None = None) -> JSONResponse:
    code, message, details = _parse_http_exception_detail(exc.detail)
    return error_response(
        status_code=exc.status_code,
        code=code,
        message=message,
        details=details,
        request_id=_request_id_from_request(request),
        headers=exc.headers,
    )


def _extract_request(*args: Any, **kwargs: Any) -> Request | None:
    for value in kwargs.values():
        if isinstance(value, Request):
            return value
    for value in args:
        if isinstance(value, Request):
            return value
    return None


def document_response(
    *,
    status_code: int = status.HTTP_200_OK,
    description: str = "Successful response",
    success_example: Any | None = None,
    summary: str | None = None,
    response_codes: dict[int, str] | None = None,
    error_examples: dict[int, Any] | None = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Wrap a route's return value in the success envelope and document it."""

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        config = ResponseDocConfig(
            status_code=status_code,
            description=description,
            success_example=success_example,
            summary=summary,
            response_codes=response_codes,
            error_examples=error_examples,
        )

        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Response:
            result = func(*args, **kwargs)
            if inspect.isawaitable(result):
                result = await result

            if isinstance(result, Response):
                return result

            request_id = _request_id_from_request(_extract_request(*args, **kwargs))
            return JSONResponse(status_code=status_code, content=success_payload(result, request_id=request_id))

        setattr(wrapper, _RESPONSE_DOC_ATTR, config)
        return wrapper

    return decorator


def document_created(*, success_example: Any | None = None) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    return document_response(
        status_code=status.HTTP_201_CREATED,
        description="Resource created",
        success_example=success_example,
    )


def apply_response_documentation(app: FastAPI) -> None:
    updated = False

    for route in app.routes:
        if not isinstance(route, APIRoute):
            continue

        config = getattr(route.endpoint, _RESPONSE_DOC_ATTR, None)
        if not isinstance(config, ResponseDocConfig):
            continue

        if config.summary and not route.summary:
            route.summary = config.summary

        route.status_code = config.status_code

        existing_responses = dict(route.responses or {})
        success_code = config.status_code
        response_entry = dict(existing_responses.get(success_code, {}))
        response_entry.setdefault("description", config.description)

        content = dict(response_entry.get("content", {}))
        app_json = dict(content.get("application/json", {}))
        app_json.setdefault(
            "example",
            {
                "success": True,
                "data": config.success_example,
                "meta": {"timestamp": "2024-01-01T00:00:00+00:00", "requestId": "req-1", "version": API_VERSION},
            },
        )
        content["application/json"] = app_json
        response_entry["content"] = content
        existing_responses[success_code] = response_entry

        for code, code_description in (config.response_codes or {}).items():
            entry = dict(existing_responses.get(code, {}))
            entry.setdefault("description", code_description)
            existing_responses[code] = entry

        for code, example in (config.error_examples or {}).items():
            entry = dict(existing_responses.get(code, {}))
            entry.setdefault("description", "Error response")
            entry_content = dict(entry.get("content", {}))
            entry_json = dict(entry_content.get("application/json", {}))
            entry_json.setdefault("example", example)
            entry_content["application/json"] = entry_json
            entry["content"] = entry_content
            existing_responses[code] = entry

        route.responses = existing_responses
        updated = True

    if updated:
        app.openapi_schema = None


def install_exception_handlers(app: FastAPI, *, include_error_details: bool = False) -> None:
    """Route every error through the envelope. Unexpected errors never leak detail unless asked."""

    @app.exception_handler(HTTPException)
    async def custom_http_exception_handler(request: Request, exc: HTTPException):
        return http_exception_response(exc=exc, request=request)

    @app.exception_handler(RequestValidationError)
    async def custom_validation_exception_handler(request: Request, exc: RequestValidationError):
        code, message, details = summarize_validation_errors(list(exc.errors()))
        return error_response(
            status_code=status.HTTP_400_BAD_REQUEST,
            code=code.value,
            message=message,
            details=details,
            request_id=_request_id_from_request(request),
        )

    @app.exception_handler(Exception)
    async def custom_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            code="INTERNAL_ERROR",
            message="Internal server error",
            details=str(exc) if include_error_details else None,
            request_id=_request_id_from_request(request),
        )
