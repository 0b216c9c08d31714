"""
Error model for the AppTrack MCP tools.

Provides structured error codes and sanitized error messages.
"""

from enum import Enum
from typing import Any, Dict, List, Optional
import re


class ErrorCode(str, Enum):
    """Structured error codes for the MCP tools."""
    VALIDATION_ERROR = "VALIDATION_ERROR"
    ILLEGAL_TRANSITION = "ILLEGAL_TRANSITION"
    UNDO_NOT_ALLOWED = "UNDO_NOT_ALLOWED"
    APPLICATION_NOT_FOUND = "APPLICATION_NOT_FOUND"
    DB_NOT_FOUND = "DB_NOT_FOUND"
    DB_ERROR = "DB_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ToolError(Exception):
    """Base exception for tool errors with structured error information."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        retryable: bool = False,
        original_error: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize a tool error.

        Args:
            code: The error code
            message: Human-readable error message
            retryable: Whether the operation can be retried
            original_error: The original exception if this wraps another error
            details: Optional machine-readable context (e.g. current/target status)
        """
        self.code = code
        self.message = message
        self.retryable = retryable
        self.original_error = original_error
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert error to dictionary format for MCP response."""
        error = {
            "code": self.code.value,
            "message": self.message,
            "retryable": self.retryable,
        }
        if self.details:
            error["details"] = self.details
        return {"error": error}


def sanitize_path(path: str) -> str:
    """
    Sanitize file paths to avoid exposing sensitive system details.

    Returns only the basename for absolute paths, keeps relative paths.
    """
    import os
    if os.path.isabs(path):
        return os.path.basename(path)
    return path


def sanitize_sql_error(error_msg: str) -> str:
    """
    Sanitize SQL error messages to remove sensitive details.

    Removes SQL fragments and absolute paths, keeps only actionable information.

    Args:
        error_msg: The original error message

    Returns:
        Sanitized error message
    """
    sanitized = re.sub(r'SQL:.*', '', error_msg, flags=re.IGNORECASE)
    sanitized = re.sub(r'"[^"]*SELECT[^"]*"', '[SQL query]', sanitized, flags=re.IGNORECASE)
    sanitized = re.sub(r"'[^']*SELECT[^']*'", '[SQL query]', sanitized, flags=re.IGNORECASE)

    # Unquoted statements
    sanitized = re.sub(
        r'\b(SELECT|INSERT|UPDATE|DELETE)\b.*', '[SQL query]', sanitized, flags=re.IGNORECASE
    )

    sanitized = re.sub(r'/[^\s]+/', '[path]/', sanitized)

    return sanitized.strip()


def sanitize_stack_trace(error_msg: str) -> str:
    """Keep only the first line of an error message."""
    lines = error_msg.split('\n')
    if lines:
        return lines[0].strip()
    return error_msg


def create_validation_error(message: str) -> ToolError:
    """
    Create a validation error.

    Args:
        message: Description of the validation failure

    Returns:
        ToolError with VALIDATION_ERROR code
    """
    return ToolError(
        code=ErrorCode.VALIDATION_ERROR,
        message=message,
        retryable=False
    )


def create_illegal_transition_error(
    current_status: str, target_status: str, allowed_statuses: List[str]
) -> ToolError:
    """
    Create an illegal transition error.

    The message and details name the persisted status, the attempted target
    and the targets that would have been accepted.

    Args:
        current_status: Status currently recorded for the application
        target_status: Status the caller asked for
        allowed_statuses: Legal targets from current_status, in rank order

    Returns:
        ToolError with ILLEGAL_TRANSITION code
    """
    allowed = ", ".join(f"'{s}'" for s in allowed_statuses)
    return ToolError(
        code=ErrorCode.ILLEGAL_TRANSITION,
        message=(
            f"Transition from '{current_status}' to '{target_status}' is not allowed. "
            f"Allowed transitions from '{current_status}': {allowed}"
        ),
        retryable=False,
        details={
            "current_status": current_status,
            "target_status": target_status,
            "allowed_statuses": list(allowed_statuses),
        },
    )


def create_undo_not_allowed_error(current_status: str, history_length: int) -> ToolError:
    """
    Create an undo-not-allowed error.

    Args:
        current_status: Status currently recorded for the application
        history_length: Number of entries in the status history

    Returns:
        ToolError with UNDO_NOT_ALLOWED code
    """
    return ToolError(
        code=ErrorCode.UNDO_NOT_ALLOWED,
        message=(
            f"Cannot undo: status history has {history_length} entry and the initial "
            f"'{current_status}' entry cannot be removed"
        ),
        retryable=False,
        details={"current_status": current_status, "history_length": history_length},
    )


def create_application_not_found_error(application_id: int) -> ToolError:
    """
    Create an application not found error.

    Args:
        application_id: The id that failed to resolve

    Returns:
        ToolError with APPLICATION_NOT_FOUND code
    """
    return ToolError(
        code=ErrorCode.APPLICATION_NOT_FOUND,
        message=f"Application {application_id} does not exist",
        retryable=False,
        details={"application_id": application_id},
    )


def create_db_not_found_error(db_path: str) -> ToolError:
    """
    Create a database not found error.

    Args:
        db_path: The database path that was not found

    Returns:
        ToolError with DB_NOT_FOUND code
    """
    sanitized_path = sanitize_path(db_path)
    return ToolError(
        code=ErrorCode.DB_NOT_FOUND,
        message=f"Database not found: {sanitized_path}",
        retryable=False
    )


def create_db_error(message: str, retryable: bool = False, original_error: Optional[Exception] = None) -> ToolError:
    """
    Create a database error.

    Args:
        message: Description of the database error
        retryable: Whether the operation can be retried
        original_error: The original exception

    Returns:
        ToolError with DB_ERROR code
    """
    sanitized_message = sanitize_sql_error(message)
    sanitized_message = sanitize_stack_trace(sanitized_message)

    return ToolError(
        code=ErrorCode.DB_ERROR,
        message=f"Database error: {sanitized_message}",
        retryable=retryable,
        original_error=original_error
    )


def create_internal_error(message: str, original_error: Optional[Exception] = None) -> ToolError:
    """
    Create an internal error for unexpected exceptions.

    Args:
        message: Description of the internal error
        original_error: The original exception

    Returns:
        ToolError with INTERNAL_ERROR code
    """
    sanitized_message = sanitize_stack_trace(message)

    return ToolError(
        code=ErrorCode.INTERNAL_ERROR,
        message=f"Internal error: {sanitized_message}",
        retryable=True,
        original_error=original_error
    )
