"""Shared Pydantic schemas for the response envelope and pagination."""
from __future__ import annotations

import math
from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field

from farmer_social.db.time import as_utc

# SQLite hands timestamps back naive; responses always carry the UTC offset.
UTCDateTime = Annotated[datetime, AfterValidator(as_utc)]


class Envelope(BaseModel):
    """Base for every response body: ``{"success": true, ...}``."""

    success: bool = Field(True, description="False only on error responses")


class MessageResponse(Envelope):
    message: str


class Pagination(BaseModel):
    """Page metadata returned by list endpoints."""

    current_page: int
    total_pages: int
    total: int
    has_more: bool

    @classmethod
    def build(cls, *, page: int, limit: int, total: int) -> Pagination:
        return cls(
            current_page=page,
            total_pages=math.ceil(total / limit) if limit else 0,
            total=total,
            has_more=page * limit < total,
        )


class ErrorResponse(BaseModel):
    """Shape of every failure body."""

    success: bool = False
    error: str = Field(..., description="Error kind, e.g. ValidationError")
    message: str
    errors: list[str] | None = None
    detail: str | None = None
