"""Nullable scalar wrappers shared by JSON payloads and database rows.

Each wrapper is a frozen ``(value, valid)`` pair. ``valid`` is the only source
of truth for presence: when it is false the wrapper is null whatever ``value``
holds. ``NullInt``, ``NullFloat`` and ``NullString`` additionally render a
present zero or empty value as JSON ``null`` and scan it from the database as
null; ``NullEmptyString`` keeps the empty string as a real value.

Wrappers plug into pydantic models as field types and into SQLAlchemy columns
through the decorators in ``pagekit.db.types``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from datetime import datetime
from datetime import timezone
from decimal import Decimal
import json
import math
import re
import struct
from typing import Any
from typing import ClassVar

from pydantic import GetCoreSchemaHandler
from pydantic import GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import core_schema

MAX_INT32 = 2**31 - 1
MIN_INT32 = -(2**31)
MAX_FLOAT32 = 3.4028234663852886e38
FLOAT_SCAN_DECIMALS = 4
ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)

_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")
_RFC3339_RE = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:\d{2})")
_TRUE_STRINGS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_STRINGS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def _scan_int(value: Any, target: str) -> int:
    if isinstance(value, (bytes, bytearray)):
        value = value.decode()
    if isinstance(value, str):
        return int(value)
    if isinstance(value, int):
        return int(value)
    if isinstance(value, (float, Decimal)):
        if value != int(value):
            raise ValueError(f"converting {value!r} to {target}: value is not integral")
        return int(value)
    raise ValueError(f"unsupported scan, storing {type(value).__name__} into {target}")


def _scan_float(value: Any, target: str) -> float:
    if isinstance(value, (bytes, bytearray)):
        value = value.decode()
    if isinstance(value, (str, int, float, Decimal)):
        return float(value)
    raise ValueError(f"unsupported scan, storing {type(value).__name__} into {target}")


def _scan_text(value: Any, target: str) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return value.decode()
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    raise ValueError(f"unsupported scan, storing {type(value).__name__} into {target}")


def _is_number(data: Any) -> bool:
    return isinstance(data, (int, float)) and not isinstance(data, bool)


class _Nullable:
    """JSON and pydantic plumbing shared by every wrapper."""

    json_schema: ClassVar[dict[str, Any]] = {}

    valid: bool

    @classmethod
    def of(cls, value: Any):
        """Build a valid wrapper around ``value``."""
        return cls(value=value, valid=True)

    @classmethod
    def decode(cls, data: Any):
        """Build the wrapper from an already-parsed JSON value."""
        raise NotImplementedError

    def encode(self) -> Any:
        """Return the JSON-compatible value of the wrapper."""
        raise NotImplementedError

    @classmethod
    def scan(cls, value: Any):
        """Build the wrapper from a raw database column value."""
        raise NotImplementedError

    @classmethod
    def from_json(cls, raw: str | bytes):
        return cls.decode(json.loads(raw))

    def to_json(self) -> str:
        return json.dumps(self.encode())

    @classmethod
    def _validate(cls, data: Any):
        if isinstance(data, cls):
            return data
        return cls.decode(data)

    @staticmethod
    def _serialize(wrapper: _Nullable) -> Any:
        return wrapper.encode()

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: GetCoreSchemaHandler) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(cls._serialize),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls,
        schema: core_schema.CoreSchema,
        handler: GetJsonSchemaHandler,
    ) -> JsonSchemaValue:
        return dict(cls.json_schema)


@dataclass(frozen=True)
class NullBool(_Nullable):
    """Nullable boolean."""

    json_schema: ClassVar[dict[str, Any]] = {"type": ["boolean", "null"]}

    value: bool = False
    valid: bool = False

    @classmethod
    def decode(cls, data: Any) -> NullBool:
        if data is None:
            return cls()
        if isinstance(data, bool):
            return cls.of(data)
        raise ValueError(f"cannot decode {data!r} into NullBool")

    def encode(self) -> bool | None:
        if not self.valid:
            return None
        return self.value

    @classmethod
    def scan(cls, value: Any) -> NullBool:
        if value is None:
            return cls()
        if isinstance(value, bool):
            return cls.of(value)
        if isinstance(value, int) and value in (0, 1):
            return cls.of(bool(value))
        if isinstance(value, (bytes, bytearray)):
            value = value.decode()
        if isinstance(value, str):
            if value in _TRUE_STRINGS:
                return cls.of(True)
            if value in _FALSE_STRINGS:
                return cls.of(False)
        raise ValueError(f"converting {value!r} to NullBool: invalid syntax")

    def is_empty(self) -> bool:
        """Return True when the wrapper is null or false."""
        return not self.valid or not self.value

    def map_to_bool(self) -> bool | None:
        if not self.valid:
            return None
        return self.value

    def map_for_request(self) -> int | None:
        """Return 1/0 for outgoing requests that expect integer booleans."""
        if not self.valid:
            return None
        return 1 if self.value else 0


@dataclass(frozen=True)
class NullInt(_Nullable):
    """Nullable integer; zero is rendered and scanned as null."""

    json_schema: ClassVar[dict[str, Any]] = {"type": ["integer", "null"]}

    value: int = 0
    valid: bool = False

    @classmethod
    def decode(cls, data: Any) -> NullInt:
        if data is None:
            return cls()
        if not _is_number(data):
            raise ValueError(f"cannot decode {data!r} into NullInt")
        if isinstance(data, float) and not math.isfinite(data):
            raise ValueError(f"cannot decode {data!r} into NullInt")
        return cls.of(int(data))

    def encode(self) -> int | None:
        if not self.valid or self.value == 0:
            return None
        return self.value

    @classmethod
    def scan(cls, value: Any) -> NullInt:
        if value is None:
            return cls()
        number = _scan_int(value, "NullInt")
        return cls(value=number, valid=number != 0)

    def is_empty(self) -> bool:
        return not self.valid or self.value == 0

    def map_to_int64(self) -> int | None:
        if not self.valid:
            return None
        return self.value

    def map_to_int32(self) -> int | None:
        """Return the value when it fits in 32 bits.

        Raises:
            ValueError: if the value is outside the int32 range.
        """
        if not self.valid:
            return None
        if self.value > MAX_INT32 or self.value < MIN_INT32:
            raise ValueError(f"could not convert NullInt to int32, value {self.value} out of range")
        return self.value


@dataclass(frozen=True)
class NullFloat(_Nullable):
    """Nullable float; zero is rendered and scanned as null.

    Scanned values are truncated to four decimals and NaN is scanned as null.
    """

    json_schema: ClassVar[dict[str, Any]] = {"type": ["number", "null"]}

    value: float = 0.0
    valid: bool = False

    @classmethod
    def decode(cls, data: Any) -> NullFloat:
        if data is None:
            return cls()
        if not _is_number(data):
            raise ValueError(f"cannot decode {data!r} into NullFloat")
        return cls.of(float(data))

    def encode(self) -> float | None:
        if not self.valid or self.value == 0.0:
            return None
        return self.value

    @classmethod
    def scan(cls, value: Any) -> NullFloat:
        if value is None:
            return cls()
        number = _scan_float(value, "NullFloat")
        if math.isnan(number):
            return cls()
        if math.isinf(number):
            return cls.of(number)
        scale = 10**FLOAT_SCAN_DECIMALS
        number = math.trunc(number * scale) / scale
        return cls(value=number, valid=number != 0)

    def is_empty(self) -> bool:
        return not self.valid or self.value == 0

    def map_to_float64(self) -> float | None:
        if not self.valid:
            return None
        return self.value

    def map_to_float32(self) -> float | None:
        """Return the value rounded to single precision.

        Raises:
            ValueError: if the value does not fit in a float32.
        """
        if not self.valid:
            return None
        if abs(self.value) > MAX_FLOAT32:
            raise ValueError(f"could not convert NullFloat to float32, value {self.value:f} too high")
        return struct.unpack("f", struct.pack("f", self.value))[0]


@dataclass(frozen=True)
class NullString(_Nullable):
    """Nullable string; the empty string is rendered and scanned as null."""

    json_schema: ClassVar[dict[str, Any]] = {"type": ["string", "null"]}

    value: str = ""
    valid: bool = False

    @classmethod
    def from_json(cls, raw: str | bytes) -> NullString:
        if not raw:
            return cls()
        return cls.decode(json.loads(raw))

    @classmethod
    def decode(cls, data: Any) -> NullString:
        if data is None:
            return cls()
        if not isinstance(data, str):
            raise ValueError(f"cannot decode {data!r} into NullString")
        return cls.of(data)

    def encode(self) -> str | None:
        if not self.valid or self.value == "":
            return None
        return self.value

    @classmethod
    def scan(cls, value: Any) -> NullString:
        if value is None:
            return cls()
        text = _scan_text(value, "NullString")
        return cls(value=text, valid=text != "")

    def is_empty(self) -> bool:
        return not self.valid or self.value == ""

    def map_to_string(self) -> str | None:
        if not self.valid:
            return None
        return self.value


@dataclass(frozen=True)
class NullEmptyString(_Nullable):
    """Nullable string where the empty string is a valid value.

    A null wrapper is rendered as ``""`` and JSON ``null`` decodes to a valid
    empty string.
    """

    json_schema: ClassVar[dict[str, Any]] = {"type": "string"}

    value: str = ""
    valid: bool = False

    @classmethod
    def decode(cls, data: Any) -> NullEmptyString:
        if data is None:
            return cls.of("")
        if not isinstance(data, str):
            raise ValueError(f"cannot decode {data!r} into NullEmptyString")
        return cls.of(data)

    def encode(self) -> str:
        if not self.valid:
            return ""
        return self.value

    @classmethod
    def scan(cls, value: Any) -> NullEmptyString:
        if value is None:
            return cls()
        return cls.of(_scan_text(value, "NullEmptyString"))

    def map_to_string(self) -> str | None:
        if not self.valid:
            return None
        return self.value


def _parse_date(text: str) -> datetime | None:
    if not _DATE_RE.fullmatch(text):
        return None
    try:
        day = date.fromisoformat(text)
    except ValueError:
        return None
    return datetime(day.year, day.month, day.day, tzinfo=timezone.utc)


def _parse_rfc3339(text: str) -> datetime | None:
    if not _RFC3339_RE.fullmatch(text):
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def format_rfc3339(value: datetime) -> str:
    """Format ``value`` as RFC3339 with second precision; naive means UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.isoformat(timespec="seconds")
    if text.endswith("+00:00"):
        return text[: -len("+00:00")] + "Z"
    return text


@dataclass(frozen=True)
class NullTime(_Nullable):
    """Nullable timestamp serialized as a ``YYYY-MM-DD`` date.

    Decoding accepts ``YYYY-MM-DD`` (UTC) and falls back to RFC3339; naive
    datetimes are taken as UTC. Scanning keeps timestamps whose zone is named
    ``UTC`` as they are and truncates every other value, naive ones and other
    zero-offset zones included, to midnight UTC of the same calendar day. The
    zero time counts as null.
    """

    json_schema: ClassVar[dict[str, Any]] = {"type": ["string", "null"], "format": "date"}

    value: datetime = ZERO_TIME
    valid: bool = False

    @classmethod
    def decode(cls, data: Any) -> NullTime:
        if data is None:
            return cls()
        if isinstance(data, datetime):
            if data.tzinfo is None:
                data = data.replace(tzinfo=timezone.utc)
            return cls.of(data)
        if isinstance(data, str):
            parsed = _parse_date(data) or _parse_rfc3339(data)
            if parsed is not None:
                return cls.of(parsed)
        raise ValueError(f"cannot parse {data!r} as YYYY-MM-DD or RFC3339")

    def encode(self) -> str | None:
        if not self.valid or self.is_zero():
            return None
        return self.value.date().isoformat()

    @classmethod
    def scan(cls, value: Any) -> NullTime:
        if value is None:
            return cls()
        if isinstance(value, datetime):
            if value.tzinfo is not None and value.tzname() == "UTC":
                moment = value.astimezone(timezone.utc)
            else:
                moment = datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
        elif isinstance(value, date):
            moment = datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
        else:
            raise ValueError(f"unsupported scan, storing {type(value).__name__} into NullTime")
        return cls(value=moment, valid=moment != ZERO_TIME)

    def is_zero(self) -> bool:
        return self.value == ZERO_TIME

    def map_to_string(self) -> str | None:
        """Return the RFC3339 rendering of the timestamp, or None when null."""
        if not self.valid:
            return None
        return format_rfc3339(self.value)

    def after_or_equal(self, other: NullTime) -> bool:
        """Return True if this time is equal to or after ``other``.

        A non-zero time is never after a zero one.
        """
        if not self.is_zero() and other.is_zero():
            return False
        return self.value >= other.value

    def before_or_equal(self, other: NullTime) -> bool:
        """Return True if this time is equal to or before ``other``.

        A zero time is never before a non-zero one, and a non-zero time is
        always before a zero one.
        """
        if self.is_zero() and not other.is_zero():
            return False
        if not self.is_zero() and other.is_zero():
            return True
        return self.value <= other.value


@dataclass(frozen=True)
class JSONNullInt64(_Nullable):
    """Nullable integer without the zero-as-null convention."""

    json_schema: ClassVar[dict[str, Any]] = {"type": ["integer", "null"]}

    value: int = 0
    valid: bool = False

    @classmethod
    def decode(cls, data: Any) -> JSONNullInt64:
        if data is None:
            return cls()
        if not isinstance(data, int) or isinstance(data, bool):
            raise ValueError(f"cannot decode {data!r} into JSONNullInt64")
        return cls.of(data)

    def encode(self) -> int | None:
        if not self.valid:
            return None
        return self.value

    @classmethod
    def scan(cls, value: Any) -> JSONNullInt64:
        if value is None:
            return cls()
        return cls.of(_scan_int(value, "JSONNullInt64"))

    def map_for_request(self) -> int | None:
        return self.encode()


@dataclass(frozen=True)
class JSONNullFloat64(_Nullable):
    """Nullable float without the zero-as-null convention."""

    json_schema: ClassVar[dict[str, Any]] = {"type": ["number", "null"]}

    value: float = 0.0
    valid: bool = False

    @classmethod
    def decode(cls, data: Any) -> JSONNullFloat64:
        if data is None:
            return cls()
        if not _is_number(data):
            raise ValueError(f"cannot decode {data!r} into JSONNullFloat64")
        return cls.of(float(data))

    def encode(self) -> float | None:
        if not self.valid:
            return None
        return self.value

    @classmethod
    def scan(cls, value: Any) -> JSONNullFloat64:
        if value is None:
            return cls()
        return cls.of(_scan_float(value, "JSONNullFloat64"))

    def map_for_request(self) -> float | None:
        return self.encode()
