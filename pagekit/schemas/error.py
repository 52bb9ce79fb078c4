"""Error envelope schemas returned by the pagekit exception handlers."""

from __future__ import annotations

from pydantic import BaseModel


class ErrorDetail(BaseModel):
    """Issue attached to one request key (query parameter or body field)."""

    key: str
    issue: str


class ErrorBody(BaseModel):
    code: str
    message: str
    details: list[ErrorDetail] | None = None


class ErrorResponse(BaseModel):
    """Top-level API error response envelope."""

    error: ErrorBody
