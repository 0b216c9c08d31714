"""
Main MCP tool handler for get_valid_next_statuses.

Advisory lookup of the statuses an application may move to next, for
pre-filtering choices in a client. The authoritative check is repeated by
update_application_status against the persisted status at write time.
"""

from typing import Any, Dict

from pydantic import ValidationError

from config import get_config
from db.applications_reader import get_connection, load_application
from models.errors import ToolError, create_internal_error
from schemas.get_valid_next_statuses import (
    GetValidNextStatusesRequest,
    GetValidNextStatusesResponse,
)
from utils.pydantic_error_mapper import map_pydantic_validation_error
from utils.status_ledger import can_undo
from utils.status_policy import valid_next_statuses


def get_valid_next_statuses(args: Dict[str, Any]) -> Dict[str, Any]:
    """
    Return the legal next statuses for an application or a bare status.

    Args:
        args: Dictionary containing exactly one of:
            - application_id (int): Look up the application's current status
            - current_status (str): Evaluate this status directly
          and optionally:
            - db_path (str): Database path override (application_id lookups only)

    Returns:
        Dictionary with structure:
        {
            "application_id": int | None,
            "current_status": str,
            "valid_next_statuses": [str, ...],  # ascending rank, includes current
            "can_undo": bool | None             # only for application_id lookups
        }

        An unrecognized current_status returns every status (fail-open) unless
        APPTRACK_STRICT_STATUS_CHECK is enabled, in which case it is a
        VALIDATION_ERROR.
    """
    try:
        request = GetValidNextStatusesRequest.model_validate(args)
        strict = get_config().strict_status_check

        if request.application_id is not None:
            with get_connection(request.db_path) as conn:
                application = load_application(conn, request.application_id)
            current_status = application.current_status.value
            undo_available = can_undo(application)
        else:
            current_status = request.current_status
            undo_available = None

        statuses = valid_next_statuses(current_status, strict=strict)

        return GetValidNextStatusesResponse(
            application_id=request.application_id,
            current_status=current_status,
            valid_next_statuses=[status.value for status in statuses],
            can_undo=undo_available,
        ).model_dump(exclude_none=True)

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()
