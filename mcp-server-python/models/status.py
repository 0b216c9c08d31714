"""
Centralized, type-safe status definitions for the AppTrack pipeline.

This module is the single source of truth for the application status values
used across the engine, the record store and the MCP tools.

``ApplicationStatus`` inherits from ``(str, Enum)`` so that members compare
equal to their display strings and serialize naturally to JSON at API
boundaries.
"""

from enum import Enum
from typing import Optional


class ApplicationStatus(str, Enum):
    """Enum for the hiring-pipeline stages an application can be in.

    Progression order (rank):
        Applied(1) < Screening Interview(2) < Mid-stage Interview(3)
        < Final Interview(4) < Offer(5)

    Rejected and Ghosted are outcomes outside the progression order; their
    ranks (6, 7) only give listings a stable ascending order.
    """

    APPLIED = "Applied"
    SCREENING_INTERVIEW = "Screening Interview"
    MID_STAGE_INTERVIEW = "Mid-stage Interview"
    FINAL_INTERVIEW = "Final Interview"
    OFFER = "Offer"
    REJECTED = "Rejected"
    GHOSTED = "Ghosted"


STATUS_RANK = {
    ApplicationStatus.APPLIED: 1,
    ApplicationStatus.SCREENING_INTERVIEW: 2,
    ApplicationStatus.MID_STAGE_INTERVIEW: 3,
    ApplicationStatus.FINAL_INTERVIEW: 4,
    ApplicationStatus.OFFER: 5,
    ApplicationStatus.REJECTED: 6,
    ApplicationStatus.GHOSTED: 7,
}

# Active interview stages with a strict forward ordering
PROGRESSION_STATUSES = frozenset(
    {
        ApplicationStatus.SCREENING_INTERVIEW,
        ApplicationStatus.MID_STAGE_INTERVIEW,
        ApplicationStatus.FINAL_INTERVIEW,
    }
)

# Resolved outcomes; mutually convertible but closed to everything else
DEFINITIVE_END_STATES = frozenset({ApplicationStatus.OFFER, ApplicationStatus.REJECTED})

# Reachable from anywhere in the pipeline
EXIT_STATUSES = frozenset(
    {ApplicationStatus.OFFER, ApplicationStatus.REJECTED, ApplicationStatus.GHOSTED}
)

INITIAL_STATUS = ApplicationStatus.APPLIED


def rank_of(status: ApplicationStatus) -> int:
    """Return the ordering rank of a status."""
    return STATUS_RANK[status]


def sorted_by_rank(statuses) -> list:
    """Return statuses ordered by ascending rank."""
    return sorted(statuses, key=rank_of)


def all_statuses() -> list:
    """Return every status in ascending rank order."""
    return sorted_by_rank(ApplicationStatus)


def parse_status(value) -> Optional[ApplicationStatus]:
    """
    Coerce a raw value into an ApplicationStatus.

    Accepts enum members and exact (case-sensitive) display strings.

    Returns:
        The matching ApplicationStatus, or None when the value is unrecognized
    """
    if isinstance(value, ApplicationStatus):
        return value
    if not isinstance(value, str):
        return None
    try:
        return ApplicationStatus(value)
    except ValueError:
        return None
