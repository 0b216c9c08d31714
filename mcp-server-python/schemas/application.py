"""Pydantic schemas for application records shared by the MCP tools."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, field_validator

from schemas.common import StrictResponse


class ApplicationIdMixin(BaseModel):
    """Reusable application_id field validation."""

    application_id: int

    @field_validator("application_id")
    @classmethod
    def validate_application_id(cls, value: int) -> int:
        if value < 1:
            raise ValueError(f"{value} must be a positive integer (>= 1)")
        return value


class StatusHistoryRecord(StrictResponse):
    """One status history entry as returned to callers."""

    status: str
    changed_at: str


class ApplicationRecord(StrictResponse):
    """Application schema returned by every tool that yields a record."""

    id: Optional[int] = None
    company: str
    role: str
    notes: Optional[str] = None
    job_posting_url: Optional[str] = None
    date_applied: str
    current_status: str
    history: list[StatusHistoryRecord]
    can_undo: bool
    updated_at: Optional[str] = None
