"""
Main MCP tool handler for get_application.

Read-only lookup of one application with its full status history.
"""

from typing import Any, Dict

from pydantic import ValidationError

from db.applications_reader import get_connection, load_application
from models.application import to_application_schema
from models.errors import ToolError, create_internal_error
from schemas.get_application import GetApplicationRequest, GetApplicationResponse
from utils.pydantic_error_mapper import map_pydantic_validation_error


def get_application(args: Dict[str, Any]) -> Dict[str, Any]:
    """
    Fetch one application by id.

    Args:
        args: Dictionary containing parameters:
            - application_id (int): Application id (positive integer)
            - db_path (str, optional): Database path override

    Returns:
        {"application": {...}} with the same shape create_application returns,
        or {"error": {...}} with code VALIDATION_ERROR, APPLICATION_NOT_FOUND,
        DB_NOT_FOUND, DB_ERROR or INTERNAL_ERROR.
    """
    try:
        request = GetApplicationRequest.model_validate(args)

        with get_connection(request.db_path) as conn:
            application = load_application(conn, request.application_id)

        return GetApplicationResponse(
            application=to_application_schema(application)
        ).model_dump()

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()
