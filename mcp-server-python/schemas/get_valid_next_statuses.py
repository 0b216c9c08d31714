"""Pydantic schemas for get_valid_next_statuses tool."""

from __future__ import annotations

from typing import Optional

from pydantic import model_validator

from schemas.common import DbPathMixin, StrictIgnoreRequest, StrictResponse


class GetValidNextStatusesRequest(DbPathMixin, StrictIgnoreRequest):
    """Request schema for get_valid_next_statuses.

    Exactly one of ``application_id`` (look the current status up) or
    ``current_status`` (evaluate a status directly) must be provided.
    """

    application_id: Optional[int] = None
    current_status: Optional[str] = None

    @model_validator(mode="after")
    def require_exactly_one_source(self) -> "GetValidNextStatusesRequest":
        if (self.application_id is None) == (self.current_status is None):
            raise ValueError("provide exactly one of 'application_id' or 'current_status'")
        if self.application_id is not None and self.application_id < 1:
            raise ValueError(
                f"Invalid application_id: {self.application_id} must be a positive integer (>= 1)"
            )
        return self


class GetValidNextStatusesResponse(StrictResponse):
    """Response schema for get_valid_next_statuses."""

    application_id: Optional[int] = None
    current_status: str
    valid_next_statuses: list[str]
    can_undo: Optional[bool] = None
