"""
Domain model for a tracked job application and its status history.

``JobApplication`` is the aggregate root: it owns the ordered status history
and exposes the current status. The history is mutated only through
``utils.status_ledger``; everything else treats the aggregate as read-only.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

from pydantic import BaseModel, ConfigDict, model_validator

from models.status import INITIAL_STATUS, ApplicationStatus
from schemas.application import ApplicationRecord


class StatusHistoryEntry(BaseModel):
    """One immutable ledger entry: the status entered and when."""

    model_config = ConfigDict(frozen=True)

    status: ApplicationStatus
    changed_at: str


class JobApplication(BaseModel):
    """
    Aggregate root for one application.

    Invariants (checked on construction):
    - history is never empty and starts with an Applied entry
    - current_status equals the status of the last history entry
    """

    id: Optional[int] = None
    company: str
    role: str
    notes: Optional[str] = None
    job_posting_url: Optional[str] = None
    date_applied: str
    current_status: ApplicationStatus
    history: List[StatusHistoryEntry]
    updated_at: Optional[str] = None

    @model_validator(mode="after")
    def check_history_invariants(self) -> "JobApplication":
        if not self.history:
            raise ValueError("status history cannot be empty")
        if self.history[0].status != INITIAL_STATUS:
            raise ValueError(
                f"status history must start with '{INITIAL_STATUS.value}', "
                f"got '{self.history[0].status.value}'"
            )
        if self.history[-1].status != self.current_status:
            raise ValueError(
                f"current_status '{self.current_status.value}' does not match last history "
                f"entry '{self.history[-1].status.value}'"
            )
        return self

    @classmethod
    def new(
        cls,
        company: str,
        role: str,
        date_applied: str,
        notes: Optional[str] = None,
        job_posting_url: Optional[str] = None,
        application_id: Optional[int] = None,
    ) -> "JobApplication":
        """Create a fresh application with the single initial Applied entry."""
        return cls(
            id=application_id,
            company=company,
            role=role,
            notes=notes,
            job_posting_url=job_posting_url,
            date_applied=date_applied,
            current_status=INITIAL_STATUS,
            history=[StatusHistoryEntry(status=INITIAL_STATUS, changed_at=date_applied)],
        )

    @property
    def history_length(self) -> int:
        return len(self.history)


def from_rows(
    application_row: Mapping[str, Any], history_rows: Sequence[Mapping[str, Any]]
) -> JobApplication:
    """
    Build the aggregate from an applications row and its ordered history rows.

    Args:
        application_row: Row with id, company, role, notes, job_posting_url,
            date_applied, status, updated_at
        history_rows: Rows with status, changed_at in append order

    Returns:
        JobApplication instance

    Raises:
        pydantic.ValidationError: If the stored rows violate the history invariants
    """
    return JobApplication(
        id=application_row["id"],
        company=application_row["company"],
        role=application_row["role"],
        notes=application_row["notes"],
        job_posting_url=application_row["job_posting_url"],
        date_applied=application_row["date_applied"],
        current_status=application_row["status"],
        history=[
            StatusHistoryEntry(status=row["status"], changed_at=row["changed_at"])
            for row in history_rows
        ],
        updated_at=application_row["updated_at"],
    )


def to_application_schema(application: JobApplication) -> Dict[str, Any]:
    """
    Map the aggregate to the stable output schema returned by the tools.

    Adds ``can_undo`` so callers can enable or disable an undo control
    without computing history length themselves.
    """
    return ApplicationRecord(
        id=application.id,
        company=application.company,
        role=application.role,
        notes=application.notes,
        job_posting_url=application.job_posting_url,
        date_applied=application.date_applied,
        current_status=application.current_status.value,
        history=[
            {"status": entry.status.value, "changed_at": entry.changed_at}
            for entry in application.history
        ],
        can_undo=application.history_length > 1,
        updated_at=application.updated_at,
    ).model_dump()
