"""Integration tests for nullable wrappers stored in SQLAlchemy columns."""

from __future__ import annotations

from datetime import datetime
from datetime import timezone

import pytest
from sqlalchemy import Column
from sqlalchemy import Integer
from sqlalchemy import MetaData
from sqlalchemy import Table
from sqlalchemy import insert
from sqlalchemy import select
from sqlalchemy import text
from sqlalchemy.engine import Engine

from pagekit.db.types import JSONNullFloat64Type
from pagekit.db.types import JSONNullInt64Type
from pagekit.db.types import NullBoolType
from pagekit.db.types import NullEmptyStringType
from pagekit.db.types import NullFloatType
from pagekit.db.types import NullIntType
from pagekit.db.types import NullStringType
from pagekit.db.types import NullTimeType
from pagekit.types.nullable import JSONNullFloat64
from pagekit.types.nullable import JSONNullInt64
from pagekit.types.nullable import NullBool
from pagekit.types.nullable import NullEmptyString
from pagekit.types.nullable import NullFloat
from pagekit.types.nullable import NullInt
from pagekit.types.nullable import NullString
from pagekit.types.nullable import NullTime

metadata = MetaData()

samples = Table(
    "samples",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("flag", NullBoolType()),
    Column("count", NullIntType()),
    Column("ratio", NullFloatType()),
    Column("name", NullStringType()),
    Column("note", NullEmptyStringType()),
    Column("seen_at", NullTimeType()),
    Column("raw_count", JSONNullInt64Type()),
    Column("raw_ratio", JSONNullFloat64Type()),
)


@pytest.fixture
def sample_engine(engine: Engine) -> Engine:
    metadata.create_all(engine)
    return engine


def _insert_and_read(engine: Engine, **values):
    with engine.begin() as conn:
        conn.execute(insert(samples).values(id=1, **values))
    with engine.connect() as conn:
        return conn.execute(select(samples).where(samples.c.id == 1)).one()


def test_null_columns_scan_as_invalid_wrappers(sample_engine: Engine) -> None:
    row = _insert_and_read(sample_engine)

    assert row.flag == NullBool()
    assert row.count == NullInt()
    assert row.ratio == NullFloat()
    assert row.name == NullString()
    assert row.note == NullEmptyString()
    assert row.seen_at == NullTime()
    assert row.raw_count == JSONNullInt64()
    assert row.raw_ratio == JSONNullFloat64()


def test_present_values_scan_as_valid_wrappers(sample_engine: Engine) -> None:
    row = _insert_and_read(
        sample_engine,
        flag=NullBool.of(True),
        count=NullInt.of(7),
        ratio=NullFloat.of(1.23456),
        name=NullString.of("abc"),
        note=NullEmptyString.of("n"),
        raw_count=JSONNullInt64.of(3),
        raw_ratio=JSONNullFloat64.of(0.5),
    )

    assert row.flag == NullBool.of(True)
    assert row.count == NullInt.of(7)
    assert row.ratio == NullFloat.of(1.2345)
    assert row.name == NullString.of("abc")
    assert row.note == NullEmptyString.of("n")
    assert row.raw_count == JSONNullInt64.of(3)
    assert row.raw_ratio == JSONNullFloat64.of(0.5)


def test_zero_and_empty_values_collapse_on_scan(sample_engine: Engine) -> None:
    row = _insert_and_read(
        sample_engine,
        count=NullInt.of(0),
        ratio=NullFloat.of(0.0),
        name=NullString.of(""),
        note=NullEmptyString.of(""),
        raw_count=JSONNullInt64.of(0),
    )

    assert not row.count.valid
    assert not row.ratio.valid
    assert not row.name.valid
    assert row.note == NullEmptyString.of("")
    assert row.raw_count == JSONNullInt64.of(0)


def test_invalid_wrappers_are_stored_as_null(sample_engine: Engine) -> None:
    _insert_and_read(sample_engine, count=NullInt(value=5, valid=False), name=NullString())

    with sample_engine.connect() as conn:
        raw = conn.execute(text("SELECT count, name FROM samples WHERE id = 1")).one()

    assert raw == (None, None)


def test_naive_timestamps_scan_as_utc_midnight(sample_engine: Engine) -> None:
    row = _insert_and_read(sample_engine, seen_at=NullTime.of(datetime(2024, 3, 5, 13, 45)))

    assert row.seen_at == NullTime.of(datetime(2024, 3, 5, tzinfo=timezone.utc))
