"""
Main MCP tool handler for update_application_notes.

Edits the free-text notes of an application. Status and history are not
touched; status changes go through update_application_status.
"""

from typing import Any, Dict

from pydantic import ValidationError

from db.applications_writer import ApplicationsWriter
from models.application import to_application_schema
from models.errors import ToolError, create_internal_error
from schemas.update_application_notes import (
    UpdateApplicationNotesRequest,
    UpdateApplicationNotesResponse,
)
from utils.pydantic_error_mapper import map_pydantic_validation_error
from utils.validation import get_current_utc_timestamp


def update_application_notes(args: Dict[str, Any]) -> Dict[str, Any]:
    """
    Replace the notes of an application.

    Args:
        args: Dictionary containing parameters:
            - application_id (int): Application to edit
            - notes (str | None): New notes; None clears them
            - db_path (str, optional): Database path override

    Returns:
        {"application": {...}} with the updated record, or {"error": {...}}.
    """
    try:
        request = UpdateApplicationNotesRequest.model_validate(args)

        with ApplicationsWriter(request.db_path) as writer:
            timestamp = get_current_utc_timestamp()
            writer.update_notes(request.application_id, request.notes, timestamp)
            application = writer.load_application(request.application_id)
            writer.commit()

        return UpdateApplicationNotesResponse(
            application=to_application_schema(application)
        ).model_dump()

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()
