"""Convert Pydantic validation errors to the AppTrack ToolError contract."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from models.errors import ToolError, create_validation_error

_MESSAGE_PREFIXES = ("Value error, ", "Assertion failed, ")


def _loc_to_field(loc: tuple[Any, ...]) -> str:
    parts = [str(part) for part in loc if part != "__root__"]
    return ".".join(parts)


def _clean_pydantic_message(message: str) -> str:
    for prefix in _MESSAGE_PREFIXES:
        if message.startswith(prefix):
            return message[len(prefix) :]
    return message


def map_pydantic_validation_error(error: ValidationError) -> ToolError:
    """
    Map a request-schema ValidationError to a VALIDATION_ERROR ToolError.

    Only the first issue is reported; the message names the offending field
    (``Invalid application_id: ...``) or, for model-level checks, carries the
    validator's message as is.
    """
    issues = error.errors()
    if not issues:
        return create_validation_error("Invalid input")

    first = issues[0]
    field = _loc_to_field(first.get("loc", ()))
    message = _clean_pydantic_message(first.get("msg", "Invalid input"))

    if field:
        return create_validation_error(f"Invalid {field}: {message}")
    return create_validation_error(message)
