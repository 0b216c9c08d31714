"""Pydantic schemas for list_applications tool."""

from __future__ import annotations

import re
from typing import Optional

from pydantic import field_validator

from schemas.application import ApplicationRecord
from schemas.common import DbPathMixin, StrictIgnoreRequest, StrictResponse
from utils.validation import MAX_LIMIT, MIN_LIMIT

_BASE64_PATTERN = re.compile(r"^[A-Za-z0-9+/=]+$")


class ListApplicationsRequest(DbPathMixin, StrictIgnoreRequest):
    """Request schema for list_applications.

    ``limit`` stays None when omitted; the tool substitutes the configured
    default page size.
    """

    limit: Optional[int] = None
    cursor: Optional[str] = None
    status: Optional[str] = None

    @field_validator("limit")
    @classmethod
    def validate_limit(cls, value: Optional[int]) -> Optional[int]:
        """Validate limit range."""
        if value is None:
            return None
        if value < MIN_LIMIT:
            raise ValueError(f"{value} is below minimum of {MIN_LIMIT}")
        if value > MAX_LIMIT:
            raise ValueError(f"{value} exceeds maximum of {MAX_LIMIT}")
        return value

    @field_validator("cursor")
    @classmethod
    def validate_cursor(cls, value: Optional[str]) -> Optional[str]:
        """Validate cursor format if provided."""
        if value is None:
            return None
        if not value.strip():
            raise ValueError("cannot be empty")
        if not _BASE64_PATTERN.match(value):
            raise ValueError("must be a valid base64 string")
        return value


class ListApplicationsResponse(StrictResponse):
    """Success response schema for list_applications."""

    applications: list[ApplicationRecord]
    count: int
    has_more: bool
    next_cursor: Optional[str] = None
