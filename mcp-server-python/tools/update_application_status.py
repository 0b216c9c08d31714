"""
Main MCP tool handler for update_application_status.

The authority for status changes: re-validates the requested target against
the status persisted for the application, inside the same write transaction
that commits the change, then records it through the status ledger.
"""

import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError

from config import get_config
from db.applications_writer import ApplicationsWriter
from models.application import JobApplication, to_application_schema
from models.errors import ToolError, create_internal_error
from schemas.update_application_status import (
    UpdateApplicationStatusRequest,
    UpdateApplicationStatusResponse,
)
from utils.pydantic_error_mapper import map_pydantic_validation_error
from utils.status_ledger import apply_transition
from utils.status_policy import check_transition_or_raise
from utils.validation import get_current_utc_timestamp, validate_status

logger = logging.getLogger(__name__)


def build_response(
    application_id: int,
    previous_status: str,
    target_status: str,
    action: str,
    dry_run: bool,
    application: Optional[JobApplication] = None,
) -> Dict[str, Any]:
    """Build a structured success response payload."""
    return UpdateApplicationStatusResponse(
        application_id=application_id,
        previous_status=previous_status,
        target_status=target_status,
        action=action,
        success=True,
        dry_run=dry_run,
        application=to_application_schema(application) if application is not None else None,
    ).model_dump()


def update_application_status(args: Dict[str, Any]) -> Dict[str, Any]:
    """
    Move an application to a new status.

    This is the main entry point for the MCP tool. It orchestrates:
    1. Validates input parameters (application_id, target_status, dry_run)
    2. Opens a write transaction and loads the application
    3. Checks the transition against the persisted current status
    4. Returns a noop when target equals current (nothing recorded)
    5. If dry_run=true, returns the predicted action without writing
    6. Appends the history entry, updates the current status and commits

    Args:
        args: Dictionary containing parameters:
            - application_id (int): Application to update
            - target_status (str): Desired status (display value, e.g. "Final Interview")
            - dry_run (bool, optional): Preview without writing (default: False)
            - db_path (str, optional): Database path override

    Returns:
        Dictionary with structure (success case):
        {
            "application_id": int,
            "previous_status": str,
            "target_status": str,
            "action": str,          # "updated", "noop", "would_update"
            "success": true,
            "dry_run": bool,
            "application": {...}    # current record (post-change for "updated")
        }

        On rejection or error, returns:
        {
            "error": {
                "code": str,        # ILLEGAL_TRANSITION, APPLICATION_NOT_FOUND,
                                    # VALIDATION_ERROR, DB_ERROR, INTERNAL_ERROR
                "message": str,
                "retryable": bool,
                "details": {...}    # ILLEGAL_TRANSITION: current_status,
                                    # target_status, allowed_statuses
            }
        }
    """
    try:
        request = UpdateApplicationStatusRequest.model_validate(args)
        target_status = validate_status(request.target_status, "target_status")
        strict = get_config().strict_status_check

        with ApplicationsWriter(request.db_path) as writer:
            application = writer.load_application(request.application_id)
            previous_status = application.current_status

            try:
                result = check_transition_or_raise(previous_status, target_status, strict=strict)
            except ToolError:
                logger.warning(
                    "Rejected transition for application %s: '%s' -> '%s'",
                    application.id,
                    previous_status.value,
                    target_status.value,
                )
                raise

            if result.is_noop:
                logger.info(
                    "Application %s already in '%s'; no change recorded",
                    application.id,
                    target_status.value,
                )
                return build_response(
                    application_id=application.id,
                    previous_status=previous_status.value,
                    target_status=target_status.value,
                    action="noop",
                    dry_run=request.dry_run,
                    application=application,
                )

            if request.dry_run:
                return build_response(
                    application_id=application.id,
                    previous_status=previous_status.value,
                    target_status=target_status.value,
                    action="would_update",
                    dry_run=True,
                    application=application,
                )

            timestamp = get_current_utc_timestamp()
            entry = apply_transition(application, target_status, timestamp)
            writer.record_transition(application, entry, timestamp)
            writer.commit()

        logger.info(
            "Application %s moved '%s' -> '%s'",
            application.id,
            previous_status.value,
            target_status.value,
        )

        return build_response(
            application_id=application.id,
            previous_status=previous_status.value,
            target_status=target_status.value,
            action="updated",
            dry_run=False,
            application=application,
        )

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        logger.exception("update_application_status failed")
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()
