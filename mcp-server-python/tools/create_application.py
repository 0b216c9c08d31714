"""
Main MCP tool handler for create_application.

Creates a new application record whose status history starts with a single
Applied entry stamped with the application date.
"""

import logging
from typing import Any, Dict

from pydantic import ValidationError

from db.applications_writer import ApplicationsWriter
from models.application import JobApplication, to_application_schema
from models.errors import ToolError, create_internal_error
from schemas.create_application import CreateApplicationRequest, CreateApplicationResponse
from utils.pydantic_error_mapper import map_pydantic_validation_error
from utils.validation import get_current_utc_timestamp

logger = logging.getLogger(__name__)


def create_application(args: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create a job application in the Applied status.

    Args:
        args: Dictionary containing parameters:
            - company (str): Company name (required, non-empty)
            - role (str): Role title (required, non-empty)
            - job_posting_url (str, optional): http(s) URL of the posting
            - notes (str, optional): Free-text notes
            - db_path (str, optional): Database path override

    Returns:
        Dictionary with structure:
        {
            "action": "created",
            "application": {
                "id": int,
                "company": str,
                "role": str,
                "notes": str | None,
                "job_posting_url": str | None,
                "date_applied": str,
                "current_status": "Applied",
                "history": [{"status": "Applied", "changed_at": str}],
                "can_undo": false,
                "updated_at": str
            }
        }

        On error, returns:
        {
            "error": {
                "code": str,         # VALIDATION_ERROR, DB_ERROR, INTERNAL_ERROR
                "message": str,
                "retryable": bool
            }
        }
    """
    try:
        request = CreateApplicationRequest.model_validate(args)

        timestamp = get_current_utc_timestamp()
        application = JobApplication.new(
            company=request.company,
            role=request.role,
            date_applied=timestamp,
            notes=request.notes,
            job_posting_url=request.job_posting_url,
        )
        application.updated_at = timestamp

        with ApplicationsWriter(request.db_path) as writer:
            writer.insert_application(application)
            writer.commit()

        logger.info(
            "Created application %s (%s, %s)", application.id, application.company, application.role
        )

        return CreateApplicationResponse(
            action="created", application=to_application_schema(application)
        ).model_dump()

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        logger.exception("create_application failed")
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()
