"""
Cursor encoding/decoding utilities for pagination.

Cursors are opaque strings that encode pagination state (date_applied, id).
"""

import base64
import binascii
import json
from typing import Optional, Tuple

from models.errors import create_validation_error
from pydantic import BaseModel, ConfigDict, ValidationError


class CursorPayload(BaseModel):
    """Pydantic model for cursor payload validation.

    Uses strict mode so that e.g. ``"123"`` is rejected for ``id``
    (must be a real int) and ``123`` is rejected for ``date_applied``
    (must be a real str).  Extra fields are forbidden.
    """

    model_config = ConfigDict(strict=True, extra="forbid")

    date_applied: str
    id: int


def encode_cursor(date_applied: str, record_id: int) -> str:
    """
    Encode pagination state into an opaque cursor string.

    Args:
        date_applied: ISO 8601 timestamp of the last row on the page
        record_id: Application id of the last row on the page

    Returns:
        Base64-encoded cursor string
    """
    payload = {"date_applied": date_applied, "id": record_id}

    json_str = json.dumps(payload, separators=(",", ":"))
    return base64.b64encode(json_str.encode("utf-8")).decode("ascii")


def _map_cursor_validation_error(error: ValidationError) -> Exception:
    """Convert a Pydantic ``ValidationError`` into a ``ToolError``."""
    issues = error.errors()
    if not issues:
        return create_validation_error("Invalid cursor format")

    first = issues[0]
    field = first.get("loc", ("",))[0]
    error_type = first.get("type", "")
    msg = first.get("msg", "invalid value")

    if error_type == "missing":
        return create_validation_error(f"Invalid cursor format: missing '{field}' field")

    return create_validation_error(f"Invalid cursor format: '{field}' {msg.lower()}")


def decode_cursor(cursor: Optional[str]) -> Optional[Tuple[str, int]]:
    """
    Decode an opaque cursor string into pagination state.

    Args:
        cursor: Base64-encoded cursor string (None for first page)

    Returns:
        Tuple of (date_applied, id) or None if cursor is None

    Raises:
        ToolError: If cursor is malformed or invalid
    """
    if cursor is None:
        return None

    try:
        decoded_bytes = base64.b64decode(cursor.encode("ascii"), validate=True)
        json_str = decoded_bytes.decode("utf-8")

        payload = json.loads(json_str)

        # Structural check - must be a JSON object, not array/scalar
        if not isinstance(payload, dict):
            raise create_validation_error("Invalid cursor format: payload must be a JSON object")

        cursor_data = CursorPayload.model_validate(payload)
        return (cursor_data.date_applied, cursor_data.id)

    except ValidationError as e:
        raise _map_cursor_validation_error(e) from e
    except json.JSONDecodeError as e:
        raise create_validation_error(f"Invalid cursor format: malformed JSON - {str(e)}") from e
    except UnicodeDecodeError as e:
        raise create_validation_error(
            f"Invalid cursor format: invalid UTF-8 encoding - {str(e)}"
        ) from e
    except (binascii.Error, ValueError) as e:
        raise create_validation_error(f"Invalid cursor format: malformed base64 - {str(e)}") from e
