"""SQLAlchemy column types storing nullable wrappers.

Result values go through the wrapper's ``scan`` and bound parameters are
unwrapped to the plain value, or NULL when the wrapper is not valid.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import BigInteger
from sqlalchemy import Boolean
from sqlalchemy import DateTime
from sqlalchemy import Float
from sqlalchemy import Text
from sqlalchemy.engine import Dialect
from sqlalchemy.types import TypeDecorator

from pagekit.types.nullable import JSONNullFloat64
from pagekit.types.nullable import JSONNullInt64
from pagekit.types.nullable import NullBool
from pagekit.types.nullable import NullEmptyString
from pagekit.types.nullable import NullFloat
from pagekit.types.nullable import NullInt
from pagekit.types.nullable import NullString
from pagekit.types.nullable import NullTime


class _NullableType(TypeDecorator):
    cache_ok = True
    wrapper: Any = None

    def process_bind_param(self, value: Any, dialect: Dialect) -> Any:
        if value is None:
            return None
        if isinstance(value, self.wrapper):
            return value.value if value.valid else None
        return value

    def process_result_value(self, value: Any, dialect: Dialect) -> Any:
        return self.wrapper.scan(value)


class NullBoolType(_NullableType):
    impl = Boolean
    wrapper = NullBool


class NullIntType(_NullableType):
    impl = BigInteger
    wrapper = NullInt


class NullFloatType(_NullableType):
    impl = Float
    wrapper = NullFloat


class NullStringType(_NullableType):
    impl = Text
    wrapper = NullString


class NullEmptyStringType(_NullableType):
    impl = Text
    wrapper = NullEmptyString


class NullTimeType(_NullableType):
    impl = DateTime(timezone=True)
    wrapper = NullTime


class JSONNullInt64Type(_NullableType):
    impl = BigInteger
    wrapper = JSONNullInt64


class JSONNullFloat64Type(_NullableType):
    impl = Float
    wrapper = JSONNullFloat64
