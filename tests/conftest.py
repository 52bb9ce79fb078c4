"""Shared pytest fixtures for pagekit test suites."""

from collections.abc import Generator
import os
from pathlib import Path
import sys

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

TEST_DATABASE_URL = "sqlite+pysqlite:///:memory:"

os.environ.setdefault("PAGEKIT_DATABASE_URL", TEST_DATABASE_URL)


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """Provide a fresh in-memory database with every pagekit table created."""
    from pagekit.db import models as _models  # noqa: F401
    from pagekit.db.base import Base

    test_engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, class_=Session)


@pytest.fixture
def session(session_factory: sessionmaker) -> Generator[Session, None, None]:
    with session_factory() as db_session:
        yield db_session


@pytest.fixture
def client(session_factory: sessionmaker) -> Generator[TestClient, None, None]:
    """Provide an API test client bound to the in-memory database."""
    from pagekit.db.base import get_db_session
    from pagekit.main import app

    def _get_test_session() -> Generator[Session, None, None]:
        db_session = session_factory()
        try:
            yield db_session
        finally:
            db_session.close()

    app.dependency_overrides[get_db_session] = _get_test_session
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
