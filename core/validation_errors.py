from __future__ import annotations

from typing import Any, Iterable

from core.errors import ErrorCode

_REQUEST_LOCATIONS = {"body", "query", "path", "header", "cookie"}


def _split_location(location_parts: Iterable[Any]) -> tuple[str, str]:
    parts = [str(part) for part in location_parts]
    if parts and parts[0] in _REQUEST_LOCATIONS:
        location, parts = parts[0], parts[1:]
    else:
        location = "body"
    return location, ".".join(parts) or "(root)"


def _is_missing(error: dict[str, Any]) -> bool:
    # An empty required string counts as absent, same as a dropped key.
    if error.get("type") == "missing":
        return True
    return error.get("type") == "string_too_short" and error.get("input") == ""


def format_validation_error_details(errors: list[dict[str, Any]]) -> dict[str, Any]:
    field_errors: list[dict[str, str]] = []
    missing_fields: list[str] = []

    for error in errors:
        raw_loc = error.get("loc")
        if isinstance(raw_loc, (list, tuple)):
            location, field = _split_location(raw_loc)
        elif raw_loc is None:
            location, field = "body", "(root)"
        else:
            location, field = _split_location([raw_loc])

        field_errors.append(
            {
                "field": field,
                "location": location,
                "message": str(error.get("msg", "Invalid value")),
                "type": str(error.get("type", "validation_error")),
            }
        )
        if _is_missing(error) and field not in missing_fields:
            missing_fields.append(field)

    return {"missingFields": missing_fields, "fieldErrors": field_errors}


def summarize_validation_errors(errors: list[dict[str, Any]]) -> tuple[ErrorCode, str, dict[str, Any]]:
    """Error code, message and details for a rejected request body."""

    details = format_validation_error_details(errors)
    missing = details["missingFields"]
    if missing:
        return ErrorCode.MISSING_REQUIRED_FIELDS, f"Missing required fields: {', '.join(missing)}", details

    count = len(details["fieldErrors"])
    noun = "field" if count == 1 else "fields"
    return ErrorCode.VALIDATION_FAILED, f"Invalid value for {count} {noun}", details
