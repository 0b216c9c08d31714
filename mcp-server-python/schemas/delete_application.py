"""Pydantic schemas for delete_application tool."""

from __future__ import annotations

from schemas.application import ApplicationIdMixin
from schemas.common import DbPathMixin, StrictIgnoreRequest, StrictResponse


class DeleteApplicationRequest(ApplicationIdMixin, DbPathMixin, StrictIgnoreRequest):
    """Request schema for delete_application."""


class DeleteApplicationResponse(StrictResponse):
    """Response schema for delete_application."""

    application_id: int
    deleted: bool
