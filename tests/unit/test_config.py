"""Unit tests for environment-driven settings."""

from __future__ import annotations

from collections.abc import Generator

import pytest

from pagekit.core.config import DEFAULT_DATABASE_URL
from pagekit.core.config import get_pagination_settings
from pagekit.core.config import redact_database_url
from pagekit.services.pagination import default_pagination
from pagekit.services.pagination import parse_pagination


@pytest.fixture(autouse=True)
def fresh_settings() -> Generator[None, None, None]:
    get_pagination_settings.cache_clear()
    yield
    get_pagination_settings.cache_clear()


def test_defaults_without_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PAGEKIT_DEFAULT_OFFSET", raising=False)
    monkeypatch.delenv("PAGEKIT_DEFAULT_LIMIT", raising=False)
    monkeypatch.delenv("PAGEKIT_DATABASE_URL", raising=False)

    settings = get_pagination_settings()

    assert settings.default_offset == 0
    assert settings.default_limit == 500
    assert settings.database_url == DEFAULT_DATABASE_URL


def test_environment_overrides_pagination_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PAGEKIT_DEFAULT_OFFSET", "5")
    monkeypatch.setenv("PAGEKIT_DEFAULT_LIMIT", "50")

    assert default_pagination().offset == 5
    assert default_pagination().limit == 50
    assert parse_pagination({"offset": "1"}).limit == 50


def test_safe_for_logging_hides_database_password(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PAGEKIT_DATABASE_URL", "postgresql+psycopg://app:s3cret@db:5432/pagekit")

    logged = get_pagination_settings().safe_for_logging()

    assert "s3cret" not in logged["database_url"]
    assert logged["default_limit"] == 500


def test_redact_database_url_without_password() -> None:
    url = "postgresql+psycopg://app@db:5432/pagekit"

    assert redact_database_url(url) == url


def test_redact_database_url_keeps_sqlite_target() -> None:
    redacted = redact_database_url("sqlite+pysqlite:///:memory:")

    assert redacted.startswith("sqlite+pysqlite:///")
    assert "memory" in redacted


@pytest.mark.parametrize("name", ["PAGEKIT_DEFAULT_OFFSET", "PAGEKIT_DEFAULT_LIMIT"])
def test_negative_environment_defaults_are_rejected(monkeypatch: pytest.MonkeyPatch, name: str) -> None:
    monkeypatch.setenv(name, "-1")

    with pytest.raises(ValueError, match=name):
        get_pagination_settings()
