"""Pydantic schemas for page windows and paged response envelopes."""

from __future__ import annotations

from typing import Generic
from typing import TypeVar

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

T = TypeVar("T")


class Pagination(BaseModel):
    """Offset/limit window read from a request."""

    model_config = ConfigDict(frozen=True)

    offset: int = Field(default=0, ge=0)
    limit: int = Field(default=0, ge=0)


class Pageable(BaseModel, Generic[T]):
    """Paged response envelope.

    ``total`` is the size of the whole result set, not of ``data``. An
    unparametrized ``Pageable`` holds whatever a JSON decode produced in
    ``data``; ``Pageable[list[Item]]`` validates the items up front.
    """

    limit: int
    offset: int
    total: int
    data: T = None  # type: ignore[assignment]
