"""
Main MCP tool handler for delete_application.

Removes an application record together with its whole status history.
"""

import logging
from typing import Any, Dict

from pydantic import ValidationError

from db.applications_writer import ApplicationsWriter
from models.errors import ToolError, create_internal_error
from schemas.delete_application import DeleteApplicationRequest, DeleteApplicationResponse
from utils.pydantic_error_mapper import map_pydantic_validation_error

logger = logging.getLogger(__name__)


def delete_application(args: Dict[str, Any]) -> Dict[str, Any]:
    """
    Delete an application by id.

    Args:
        args: Dictionary containing parameters:
            - application_id (int): Application to delete
            - db_path (str, optional): Database path override

    Returns:
        {"application_id": int, "deleted": true}, or {"error": {...}} with
        APPLICATION_NOT_FOUND when no record has this id.
    """
    try:
        request = DeleteApplicationRequest.model_validate(args)

        with ApplicationsWriter(request.db_path) as writer:
            writer.delete_application(request.application_id)
            writer.commit()

        logger.info("Deleted application %s", request.application_id)

        return DeleteApplicationResponse(
            application_id=request.application_id, deleted=True
        ).model_dump()

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()
