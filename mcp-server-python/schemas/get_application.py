"""Pydantic schemas for get_application tool."""

from __future__ import annotations

from schemas.application import ApplicationIdMixin, ApplicationRecord
from schemas.common import DbPathMixin, StrictIgnoreRequest, StrictResponse


class GetApplicationRequest(ApplicationIdMixin, DbPathMixin, StrictIgnoreRequest):
    """Request schema for get_application."""


class GetApplicationResponse(StrictResponse):
    """Response schema for get_application."""

    application: ApplicationRecord
