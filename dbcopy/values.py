"""
dbcopy/values.py

Convert source values into what the destination driver accepts for a column.
"""

import json
import uuid
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal

from dbcopy.dialects import Dialect

TRUE_STRINGS = ("true", "1", "t", "yes", "y", "on")
FALSE_STRINGS = ("false", "0", "f", "no", "n", "off")
SQLITE_DATETIME_FORMATS = ("%Y-%m-%d %H:%M:%S.%f", "%Y-%m-%d %H:%M:%S")


def _base_type(col_type: str) -> str:
    return col_type.split("(")[0].strip().upper()


def parse_datetime(val: str) -> datetime:
    """Parse sqlite's stored datetime text, falling back to ISO-8601."""
    for fmt in SQLITE_DATETIME_FORMATS:
        try:
            return datetime.strptime(val, fmt)
        except ValueError:
            continue
    return datetime.fromisoformat(val.replace("Z", "+00:00"))


def _whole_number(val) -> int:
    """``int(val)`` for whole numbers; fractions are rejected, not truncated."""
    if isinstance(val, Decimal):
        if not val.is_finite() or val != val.to_integral_value():
            raise ValueError(f"Not a whole number: {val!r}")
        return int(val)
    number = float(val)
    if not number.is_integer():
        raise ValueError(f"Not a whole number: {val!r}")
    return int(number)


def _to_postgres(val, col_type: str):
    if col_type == "BOOLEAN":
        if isinstance(val, bool):
            return val
        if isinstance(val, (int, float, Decimal)):
            return bool(val)
        text = str(val).strip().lower()
        if text in TRUE_STRINGS:
            return True
        if text in FALSE_STRINGS:
            return False
        raise ValueError(f"Not a boolean: {val!r}")

    if col_type in ("INTEGER", "BIGINT", "SMALLINT"):
        if isinstance(val, bool):
            return int(val)
        if isinstance(val, int):
            return val
        if isinstance(val, str):
            val = val.strip()
            try:
                return int(val)
            except ValueError:
                pass
        return _whole_number(val)

    if col_type in ("DOUBLE PRECISION", "REAL"):
        return float(val)

    if col_type in ("NUMERIC", "DECIMAL"):
        if isinstance(val, Decimal):
            return val
        return Decimal(str(val))

    if col_type.startswith("TIMESTAMP"):
        if isinstance(val, datetime):
            return val
        if isinstance(val, date):
            return datetime(val.year, val.month, val.day)
        if isinstance(val, (int, float)):
            # epoch seconds are UTC; stored naive like sqlite's own datetime text
            return datetime.fromtimestamp(val, tz=timezone.utc).replace(tzinfo=None)
        return parse_datetime(str(val))

    if col_type == "BYTEA":
        if isinstance(val, (bytes, bytearray, memoryview)):
            return bytes(val)
        return str(val).encode("utf-8")

    if col_type in ("TEXT", "VARCHAR", "CHAR", "CHARACTER", "CHARACTER VARYING"):
        if isinstance(val, str):
            return val
        if isinstance(val, (bytes, bytearray, memoryview)):
            return bytes(val).decode("utf-8")
        if isinstance(val, datetime):
            return val.isoformat(sep=" ")
        return str(val)

    return val


def _to_sqlite(val):
    if isinstance(val, datetime):
        return val.isoformat(sep=" ")
    if isinstance(val, (date, time)):
        return val.isoformat()
    if isinstance(val, Decimal):
        return float(val)
    if isinstance(val, (dict, list)):
        return json.dumps(val)
    if isinstance(val, (uuid.UUID, timedelta)):
        return str(val)
    if isinstance(val, (memoryview, bytearray)):
        return bytes(val)
    return val


def convert_value(val, col_type: str, target: Dialect):
    """
    Convert ``val`` for a ``col_type`` column of a ``target`` database.

    Raises ``ValueError``/``TypeError`` when the value has no sensible form
    in that column.
    """
    if val is None:
        return None
    if target == Dialect.POSTGRES:
        return _to_postgres(val, _base_type(col_type))
    return _to_sqlite(val)


def convert_row(row, col_types, target: Dialect) -> tuple:
    return tuple(convert_value(v, t, target) for v, t in zip(row, col_types))
