"""
Tagged scalar values.

Every value that ends up in generated SQL goes through SqlValue: the tag
decides how it is bound as a driver parameter and how it is rendered as a
literal in diagnostic SQL text.
"""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from math import isfinite
from typing import Any

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class SqlType(str, Enum):
    TEXT = "TEXT"
    INTEGER = "INTEGER"
    FLOAT = "FLOAT"
    NULL = "NULL"
    TIMESTAMP = "TIMESTAMP"


def escape_string(s: str) -> str:
    """Escape a string for use inside a single-quoted SQL literal."""
    return str(s).replace("'", "''")


def now_timestamp() -> str:
    """Local time as YYYY-MM-DD HH:MM:SS."""
    return dt.datetime.now().strftime(TIMESTAMP_FORMAT)


@dataclass(frozen=True)
class SqlValue:
    type: SqlType
    value: Any = None

    @classmethod
    def text(cls, s: str) -> "SqlValue":
        return cls(SqlType.TEXT, str(s))

    @classmethod
    def integer(cls, n: int) -> "SqlValue":
        return cls(SqlType.INTEGER, int(n))

    @classmethod
    def real(cls, x: float) -> "SqlValue":
        x = float(x)
        if not isfinite(x):
            raise ValueError(f"non-finite float cannot be stored: {x!r}")
        return cls(SqlType.FLOAT, x)

    @classmethod
    def null(cls) -> "SqlValue":
        return cls(SqlType.NULL, None)

    @classmethod
    def timestamp(cls, ts: dt.datetime) -> "SqlValue":
        return cls(SqlType.TIMESTAMP, ts)

    @classmethod
    def of(cls, v: Any) -> "SqlValue":
        if isinstance(v, SqlValue):
            return v
        if v is None:
            return cls.null()
        # bool before int: bool is an int subclass
        if isinstance(v, bool):
            return cls.integer(1 if v else 0)
        if isinstance(v, int):
            return cls.integer(v)
        if isinstance(v, float):
            return cls.real(v)
        if isinstance(v, dt.datetime):
            return cls.timestamp(v)
        if isinstance(v, dt.date):
            return cls.text(v.isoformat())
        if isinstance(v, (str, Decimal)):
            return cls.text(str(v))
        raise TypeError(f"unsupported SQL value type: {type(v).__name__}")

    @property
    def is_null(self) -> bool:
        return self.type is SqlType.NULL

    @property
    def param(self) -> Any:
        """Value handed to the driver for placeholder binding."""
        if self.type is SqlType.TIMESTAMP:
            return self.value.strftime(TIMESTAMP_FORMAT)
        return self.value

    def literal(self) -> str:
        """SQL literal text for this value."""
        if self.type is SqlType.NULL:
            return "NULL"
        if self.type is SqlType.INTEGER:
            return str(self.value)
        if self.type is SqlType.FLOAT:
            return repr(self.value)
        return "'" + escape_string(self.param) + "'"
