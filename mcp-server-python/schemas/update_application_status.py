"""Pydantic schemas for update_application_status tool."""

from __future__ import annotations

from typing import Optional

from schemas.application import ApplicationIdMixin, ApplicationRecord
from schemas.common import DbPathMixin, StrictIgnoreRequest, StrictResponse


class UpdateApplicationStatusRequest(ApplicationIdMixin, DbPathMixin, StrictIgnoreRequest):
    """Request schema for update_application_status."""

    target_status: str
    dry_run: bool = False


class UpdateApplicationStatusResponse(StrictResponse):
    """Response schema for update_application_status."""

    application_id: int
    previous_status: str
    target_status: str
    action: str
    success: bool
    dry_run: bool
    application: Optional[ApplicationRecord] = None
