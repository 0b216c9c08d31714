"""
Main MCP tool handler for list_applications.

Integrates validation, cursor decoding, database reading, pagination and
schema mapping to page through tracked applications, newest first.
"""

from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from config import get_config
from db.applications_reader import build_applications, get_connection, query_applications
from models.application import to_application_schema
from models.errors import ToolError, create_internal_error
from schemas.list_applications import ListApplicationsRequest, ListApplicationsResponse
from utils.cursor import decode_cursor, encode_cursor
from utils.pydantic_error_mapper import map_pydantic_validation_error
from utils.validation import MAX_LIMIT, validate_status


def paginate_rows(
    rows: List[Dict[str, Any]], limit: int
) -> Tuple[List[Dict[str, Any]], bool, Optional[str]]:
    """
    Split a limit+1 fetch into (page, has_more, next_cursor).

    The cursor points at the last row of the page and is only set when a
    further page exists.
    """
    page = rows[:limit]
    has_more = len(rows) > limit
    next_cursor = None
    if has_more and page:
        next_cursor = encode_cursor(page[-1]["date_applied"], page[-1]["id"])
    return page, has_more, next_cursor


def list_applications(args: Dict[str, Any]) -> Dict[str, Any]:
    """
    Retrieve applications in pages with cursor-based pagination.

    Args:
        args: Dictionary containing optional parameters:
            - limit (int): Page size (1-200, default APPTRACK_LIST_LIMIT or 50)
            - cursor (str): Opaque pagination cursor for next page
            - status (str): Only return applications currently in this status
            - db_path (str): Database path override

    Returns:
        Dictionary with structure:
        {
            "applications": [...],   # Application records, newest date_applied first
            "count": int,            # Number of applications in this page
            "has_more": bool,        # Whether more pages exist
            "next_cursor": str|None  # Cursor for next page, or None on the last page
        }

        On error, returns {"error": {"code", "message", "retryable"}}.
    """
    try:
        request = ListApplicationsRequest.model_validate(args)

        limit = request.limit
        if limit is None:
            limit = min(get_config().list_limit, MAX_LIMIT)

        status = validate_status(request.status) if request.status is not None else None

        # None for first page, or (date_applied, id) for subsequent pages
        cursor_state = decode_cursor(request.cursor)

        with get_connection(request.db_path) as conn:
            rows = query_applications(conn=conn, limit=limit, cursor=cursor_state, status=status)
            page, has_more, next_cursor = paginate_rows(rows, limit)
            applications = build_applications(conn, page)

        records = [to_application_schema(application) for application in applications]

        return ListApplicationsResponse(
            applications=records,
            count=len(records),
            has_more=has_more,
            next_cursor=next_cursor,
        ).model_dump()

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        internal_error = create_internal_error(message=str(e), original_error=e)
        return internal_error.to_dict()
