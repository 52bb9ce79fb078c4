"""Shared FastAPI dependencies."""

from __future__ import annotations

from fastapi import Request

from pagekit.schemas.pagination import Pagination
from pagekit.services.pagination import parse_pagination


def get_pagination(request: Request) -> Pagination:
    """Dependency: read offset and limit from the request query string."""
    return parse_pagination(request.query_params)
