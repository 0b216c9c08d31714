"""
Main MCP tool handler for undo_status_change.

Reverts the most recent status change of an application. The undo is a
structural pop of the last history entry; the transition rules are not
consulted.
"""

import logging
from typing import Any, Dict

from pydantic import ValidationError

from db.applications_writer import ApplicationsWriter
from models.application import to_application_schema
from models.errors import ErrorCode, ToolError, create_internal_error
from schemas.undo_status_change import UndoStatusChangeRequest, UndoStatusChangeResponse
from utils.pydantic_error_mapper import map_pydantic_validation_error
from utils.status_ledger import undo_last
from utils.validation import get_current_utc_timestamp

logger = logging.getLogger(__name__)


def undo_status_change(args: Dict[str, Any]) -> Dict[str, Any]:
    """
    Undo the last status change of an application (single step, no redo).

    Args:
        args: Dictionary containing parameters:
            - application_id (int): Application to revert
            - db_path (str, optional): Database path override

    Returns:
        Dictionary with structure (success case):
        {
            "application_id": int,
            "previous_status": str,     # status before the undo
            "restored_status": str,     # status after the undo
            "removed_entry": {"status": str, "changed_at": str},
            "application": {...}
        }

        When only the initial Applied entry remains, returns an error with
        code UNDO_NOT_ALLOWED and details {current_status, history_length},
        so callers can disable their undo control. Other error codes:
        APPLICATION_NOT_FOUND, VALIDATION_ERROR, DB_ERROR, INTERNAL_ERROR.
    """
    try:
        request = UndoStatusChangeRequest.model_validate(args)

        with ApplicationsWriter(request.db_path) as writer:
            application = writer.load_application(request.application_id)
            previous_status = application.current_status

            removed = undo_last(application)

            timestamp = get_current_utc_timestamp()
            writer.record_undo(application, timestamp)
            writer.commit()

        logger.info(
            "Application %s undo: '%s' -> '%s'",
            application.id,
            previous_status.value,
            application.current_status.value,
        )

        return UndoStatusChangeResponse(
            application_id=application.id,
            previous_status=previous_status.value,
            restored_status=application.current_status.value,
            removed_entry={"status": removed.status.value, "changed_at": removed.changed_at},
            application=to_application_schema(application),
        ).model_dump()

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        if e.code == ErrorCode.UNDO_NOT_ALLOWED:
            logger.info("Undo refused for application %s: %s", args.get("application_id"), e.message)
        return e.to_dict()

    except Exception as e:
        logger.exception("undo_status_change failed")
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()
