"""
dbcopy/type_map.py

Best-effort column type translation between SQLite and PostgreSQL.
"""

from dbcopy.dialects import Dialect

FALLBACK_TYPE = "TEXT"

# Checked in order: the first entry contained in the declared type wins.
SQLITE_TO_POSTGRES = [
    ("INTEGER", "INTEGER"),
    ("REAL", "DOUBLE PRECISION"),
    ("TEXT", "TEXT"),
    ("BLOB", "BYTEA"),
    ("BOOLEAN", "BOOLEAN"),
    ("DATETIME", "TIMESTAMP"),
    ("NUMERIC", "NUMERIC"),
]

# Second pass over declared types that missed the table above, following
# sqlite's own type affinity rules.
SQLITE_AFFINITY_TO_POSTGRES = [
    ("INT", "INTEGER"),
    ("CHAR", "TEXT"),
    ("CLOB", "TEXT"),
    ("FLOA", "DOUBLE PRECISION"),
    ("DOUB", "DOUBLE PRECISION"),
    ("BOOL", "BOOLEAN"),
    ("DATE", "TIMESTAMP"),
    ("TIME", "TIMESTAMP"),
    ("DEC", "NUMERIC"),
]

POSTGRES_TO_SQLITE = {
    "BIGINT": "INTEGER",
    "INTEGER": "INTEGER",
    "SMALLINT": "INTEGER",
    "DOUBLE PRECISION": "REAL",
    "REAL": "REAL",
    "NUMERIC": "REAL",
    "DECIMAL": "REAL",
    "TEXT": "TEXT",
    "VARCHAR": "TEXT",
    "CHAR": "TEXT",
    "CHARACTER": "TEXT",
    "CHARACTER VARYING": "TEXT",
    "BYTEA": "BLOB",
    "BOOLEAN": "BOOLEAN",
    "TIMESTAMP": "DATETIME",
    "TIMESTAMP WITHOUT TIME ZONE": "DATETIME",
    "TIMESTAMP WITH TIME ZONE": "DATETIME",
}


def _match_substring(native_type: str, table) -> str:
    for needle, target in table:
        if needle in native_type:
            return target
    return None


def map_type(native_type: str, source: Dialect, target: Dialect) -> str:
    """Translate ``native_type`` from the ``source`` dialect into ``target``."""
    native = (native_type or "").strip().upper()

    if source == target:
        return native

    if source == Dialect.SQLITE and target == Dialect.POSTGRES:
        return (
            _match_substring(native, SQLITE_TO_POSTGRES)
            or _match_substring(native, SQLITE_AFFINITY_TO_POSTGRES)
            or FALLBACK_TYPE
        )

    if source == Dialect.POSTGRES and target == Dialect.SQLITE:
        return POSTGRES_TO_SQLITE.get(native, FALLBACK_TYPE)

    raise ValueError(f"Unsupported type conversion: {source} -> {target}")
