"""Pydantic schemas for undo_status_change tool."""

from __future__ import annotations

from schemas.application import ApplicationIdMixin, ApplicationRecord, StatusHistoryRecord
from schemas.common import DbPathMixin, StrictIgnoreRequest, StrictResponse


class UndoStatusChangeRequest(ApplicationIdMixin, DbPathMixin, StrictIgnoreRequest):
    """Request schema for undo_status_change."""


class UndoStatusChangeResponse(StrictResponse):
    """Response schema for undo_status_change."""

    application_id: int
    previous_status: str
    restored_status: str
    removed_entry: StatusHistoryRecord
    application: ApplicationRecord
