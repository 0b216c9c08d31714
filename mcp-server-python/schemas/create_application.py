"""Pydantic schemas for create_application tool."""

from __future__ import annotations

from typing import Optional

from pydantic import field_validator

from schemas.application import ApplicationRecord
from schemas.common import (
    DbPathMixin,
    StrictIgnoreRequest,
    StrictResponse,
    validate_required_text,
)
from utils.validation import (
    MAX_COMPANY_LENGTH,
    MAX_NOTES_LENGTH,
    MAX_ROLE_LENGTH,
    MAX_URL_LENGTH,
)


class CreateApplicationRequest(DbPathMixin, StrictIgnoreRequest):
    """Request schema for create_application."""

    company: str
    role: str
    job_posting_url: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("company")
    @classmethod
    def validate_company(cls, value: str) -> str:
        return validate_required_text(value, "company", MAX_COMPANY_LENGTH)

    @field_validator("role")
    @classmethod
    def validate_role(cls, value: str) -> str:
        return validate_required_text(value, "role", MAX_ROLE_LENGTH)

    @field_validator("job_posting_url")
    @classmethod
    def validate_job_posting_url(cls, value: Optional[str]) -> Optional[str]:
        """Blank URLs are stored as NULL; anything else must look like http(s)."""
        if value is None or not value.strip():
            return None
        value = value.strip()
        if len(value) > MAX_URL_LENGTH:
            raise ValueError(f"length {len(value)} exceeds maximum of {MAX_URL_LENGTH}")
        if not value.lower().startswith(("http://", "https://")):
            raise ValueError("must start with http:// or https://")
        return value

    @field_validator("notes")
    @classmethod
    def validate_notes(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and len(value) > MAX_NOTES_LENGTH:
            raise ValueError(f"length {len(value)} exceeds maximum of {MAX_NOTES_LENGTH}")
        return value


class CreateApplicationResponse(StrictResponse):
    """Response schema for create_application."""

    action: str
    application: ApplicationRecord
