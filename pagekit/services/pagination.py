"""Pagination parsing and paged envelope helpers."""

from __future__ import annotations

from collections.abc import Mapping
from collections.abc import Sequence
import re
from typing import Any
from typing import TypeVar

from pydantic import TypeAdapter
from pydantic import ValidationError
from pydantic_core import to_json

from pagekit.core.config import get_pagination_settings
from pagekit.core.errors import BadRequestValueError
from pagekit.schemas.pagination import Pageable
from pagekit.schemas.pagination import Pagination

ItemT = TypeVar("ItemT")

OFFSET_KEY = "offset"
LIMIT_KEY = "limit"

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
MAX_INT64 = 2**63 - 1
MIN_INT64 = -(2**63)


class PageableDecodeError(ValueError):
    """Raised when a pageable payload cannot be turned into typed items."""


def default_pagination() -> Pagination:
    """Return the default window (offset 0, limit 500 unless configured)."""
    settings = get_pagination_settings()
    return Pagination(offset=settings.default_offset, limit=settings.default_limit)


def _first_value(query: Mapping[str, str], key: str) -> str | None:
    getlist = getattr(query, "getlist", None)
    if getlist is None:
        return query.get(key)
    values = getlist(key)
    return values[0] if values else None


def _parse_non_negative(query: Mapping[str, str], key: str, default: int) -> int:
    raw = _first_value(query, key)
    if raw is None:
        return default
    if not _INTEGER_RE.fullmatch(raw):
        raise BadRequestValueError(key, err=f"invalid syntax for integer: {raw!r}")
    value = int(raw)
    if value > MAX_INT64 or value < MIN_INT64:
        raise BadRequestValueError(key, err=f"value {raw!r} out of range for integer")
    if value < 0:
        raise BadRequestValueError(key, err=f"{key} ({value}) cannot be negative")
    return value


def parse_pagination(query: Mapping[str, str]) -> Pagination:
    """Read the page window from URL query parameters.

    Missing keys fall back to the defaults; present keys must hold a
    non-negative integer.

    Raises:
        BadRequestValueError: if offset or limit is not a non-negative integer.
    """
    defaults = default_pagination()
    offset = _parse_non_negative(query, OFFSET_KEY, defaults.offset)
    limit = _parse_non_negative(query, LIMIT_KEY, defaults.limit)
    return Pagination(offset=offset, limit=limit)


def build_pageable(page: Pagination, total: int, data: Sequence[ItemT]) -> Pageable[list[ItemT]]:
    """Wrap one page of items and the full result-set size in an envelope."""
    return Pageable(limit=page.limit, offset=page.offset, total=total, data=list(data))


def pageable_to_list(pageable: Pageable[Any], item_type: type[ItemT]) -> list[ItemT]:
    """Validate the untyped ``data`` of a decoded envelope into ``item_type`` items.

    Items are checked with strict JSON semantics, so ``"1"`` is not an ``int``.

    Raises:
        PageableDecodeError: if ``data`` is not a list or an item does not
            validate as ``item_type``.
    """
    if not isinstance(pageable.data, list):
        raise PageableDecodeError("unable to cast data field of pageable to a list")

    adapter = TypeAdapter(item_type)
    items: list[ItemT] = []
    for value in pageable.data:
        try:
            items.append(adapter.validate_json(to_json(value), strict=True))
        except ValidationError as exc:
            raise PageableDecodeError(f"unable to decode JSON elements for {_type_name(item_type)} datatype") from exc
    return items


def parse_pageable(raw: str | bytes, item_type: type[ItemT]) -> Pageable[list[ItemT]]:
    """Decode a JSON envelope straight into typed items.

    Raises:
        PageableDecodeError: if the document is not a valid envelope of
            ``item_type`` items.
    """
    try:
        return Pageable[list[item_type]].model_validate_json(raw, strict=True)
    except ValidationError as exc:
        raise PageableDecodeError(f"unable to decode pageable of {_type_name(item_type)} datatype") from exc


def _type_name(item_type: Any) -> str:
    return getattr(item_type, "__name__", repr(item_type))
