"""
Status history ledger and undo controller.

The only code that mutates ``JobApplication.current_status`` and
``JobApplication.history``. Transitions are appended, undo pops the most
recent entry. Neither operation consults the transition rules: the caller
(the authority in ``tools/update_application_status.py``) has already
validated the target, and every entry left behind by an undo is a status the
application legitimately held.
"""

import logging
from typing import Optional

from models.application import JobApplication, StatusHistoryEntry
from models.errors import create_undo_not_allowed_error
from models.status import ApplicationStatus

logger = logging.getLogger(__name__)


def apply_transition(
    application: JobApplication, target_status: ApplicationStatus, now: str
) -> Optional[StatusHistoryEntry]:
    """
    Record a validated status change on the application.

    A target equal to the current status is an idempotent no-op: nothing is
    appended and None is returned.

    Args:
        application: The aggregate to mutate
        target_status: Status already confirmed legal by the caller
        now: ISO 8601 UTC timestamp for the new entry

    Returns:
        The appended StatusHistoryEntry, or None for a no-op
    """
    target_status = ApplicationStatus(target_status)

    if target_status == application.current_status:
        logger.debug(
            "Application %s already in '%s'; nothing appended",
            application.id,
            target_status.value,
        )
        return None

    entry = StatusHistoryEntry(status=target_status, changed_at=now)
    application.history.append(entry)
    application.current_status = target_status
    return entry


def can_undo(application: JobApplication) -> bool:
    """Whether undo_last would succeed (the initial entry is never removed)."""
    return len(application.history) > 1


def undo_last(application: JobApplication) -> StatusHistoryEntry:
    """
    Revert the most recent status change.

    Single step only; repeated calls walk back one entry at a time until only
    the initial Applied entry is left.

    Args:
        application: The aggregate to mutate

    Returns:
        The removed StatusHistoryEntry

    Raises:
        ToolError: UNDO_NOT_ALLOWED when only the initial entry remains; the
            application is left unchanged
    """
    if not can_undo(application):
        raise create_undo_not_allowed_error(
            current_status=application.current_status.value,
            history_length=len(application.history),
        )

    removed = application.history.pop()
    application.current_status = application.history[-1].status
    return removed
