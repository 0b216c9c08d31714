"""
Input validation utilities for the AppTrack MCP tools.

Validates status values and provides the shared timestamp helper.
"""

from datetime import datetime, timezone

from models.errors import create_validation_error
from models.status import ApplicationStatus, all_statuses

# Constants for list_applications validation
DEFAULT_LIMIT = 50
MIN_LIMIT = 1
MAX_LIMIT = 200

# Free-text limits for application fields
MAX_COMPANY_LENGTH = 200
MAX_ROLE_LENGTH = 200
MAX_URL_LENGTH = 2048
MAX_NOTES_LENGTH = 10000


def validate_status(status, field_name: str = "status") -> ApplicationStatus:
    """
    Validate a status parameter against the ApplicationStatus enum.

    Args:
        status: The status value to validate
        field_name: Parameter name used in error messages

    Returns:
        Validated ApplicationStatus member

    Raises:
        ToolError: If status is invalid
    """
    if status is None:
        raise create_validation_error(f"Invalid {field_name}: cannot be null")

    if isinstance(status, ApplicationStatus):
        return status

    if not isinstance(status, str):
        raise create_validation_error(
            f"Invalid {field_name} type: expected string, got {type(status).__name__}"
        )

    if not status:
        raise create_validation_error(f"Invalid {field_name}: cannot be empty")

    if status != status.strip():
        raise create_validation_error(
            f"Invalid {field_name}: '{status}' contains leading or trailing whitespace"
        )

    # Case-sensitive match against display values
    try:
        return ApplicationStatus(status)
    except ValueError:
        allowed = ", ".join(s.value for s in all_statuses())
        raise create_validation_error(
            f"Invalid {field_name} value: '{status}'. Allowed values are: {allowed}"
        )


def get_current_utc_timestamp() -> str:
    """
    Generate a UTC timestamp in ISO 8601 format with millisecond precision.

    Returns a timestamp string in the format: YYYY-MM-DDTHH:MM:SS.mmmZ
    Example: 2026-02-04T03:47:36.966Z

    Used for date_applied, history changed_at and updated_at values.
    """
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")
