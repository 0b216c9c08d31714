"""Pydantic schemas for update_application_notes tool."""

from __future__ import annotations

from typing import Optional

from pydantic import field_validator

from schemas.application import ApplicationIdMixin, ApplicationRecord
from schemas.common import DbPathMixin, StrictIgnoreRequest, StrictResponse
from utils.validation import MAX_NOTES_LENGTH


class UpdateApplicationNotesRequest(ApplicationIdMixin, DbPathMixin, StrictIgnoreRequest):
    """Request schema for update_application_notes. ``notes=None`` clears them."""

    notes: Optional[str] = None

    @field_validator("notes")
    @classmethod
    def validate_notes(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and len(value) > MAX_NOTES_LENGTH:
            raise ValueError(f"length {len(value)} exceeds maximum of {MAX_NOTES_LENGTH}")
        return value


class UpdateApplicationNotesResponse(StrictResponse):
    """Response schema for update_application_notes."""

    application: ApplicationRecord
