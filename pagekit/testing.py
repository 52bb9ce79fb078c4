"""Fake envelopes for tests of code that consumes paged label responses."""

from __future__ import annotations

from typing import Any

from pagekit.schemas.pagination import Pageable

MOCK_LIMIT = 999999


def mock_pageable_label(*labels: str) -> Pageable[Any]:
    """Return an untyped envelope shaped like a JSON-decoded label page."""
    data = [{"label": value} for value in labels]
    return Pageable(offset=0, limit=MOCK_LIMIT, total=len(data), data=data)
