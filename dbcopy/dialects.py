"""
dbcopy/dialects.py

Classify endpoint descriptors and turn them into SQLAlchemy URLs.
"""

import enum

from sqlalchemy.engine import make_url

POSTGRES_PREFIXES = ("postgres://", "postgresql://", "postgresql+asyncpg://")
SQLITE_URL_PREFIX = "sqlite:///"


class Dialect(str, enum.Enum):
    SQLITE = "sqlite"
    POSTGRES = "postgres"


def classify(descriptor: str) -> Dialect:
    """Postgres for a postgres URI, SQLite (a file path) for anything else."""
    if descriptor.startswith(POSTGRES_PREFIXES):
        return Dialect.POSTGRES
    return Dialect.SQLITE


def sqlite_path(descriptor: str) -> str:
    if descriptor.startswith(SQLITE_URL_PREFIX):
        return descriptor[len(SQLITE_URL_PREFIX):]
    return descriptor


def sqlite_url(descriptor: str, readonly: bool = False) -> str:
    path = sqlite_path(descriptor)
    if readonly:
        # URI form so sqlite refuses to create a missing file
        return f"sqlite:///file:{path}?mode=ro&uri=true"
    return f"sqlite:///{path}"


def postgres_url(descriptor: str):
    """
    Return ``(url, connect_args)`` for the asyncpg driver.

    libpq's ``sslmode`` is not understood by asyncpg, so it is moved into the
    ``ssl`` connect argument, which takes the same mode names.
    """
    for prefix in POSTGRES_PREFIXES:
        if descriptor.startswith(prefix):
            rest = descriptor[len(prefix):]
            break
    else:
        raise ValueError(f"Not a PostgreSQL descriptor: {descriptor!r}")

    url = make_url(f"postgresql+asyncpg://{rest}")
    connect_args = {}
    sslmode = url.query.get("sslmode")
    if sslmode is not None:
        connect_args["ssl"] = sslmode
        url = url.difference_update_query(["sslmode"])
    return url, connect_args


def mask_descriptor(descriptor: str) -> str:
    """Hide the password of a URI descriptor; file paths are returned as-is."""
    masked = descriptor
    if "@" in descriptor and "//" in descriptor:
        scheme, _, remainder = descriptor.partition("//")
        auth, _, host = remainder.rpartition("@")
        if ":" in auth:
            user = auth.split(":")[0]
            masked = f"{scheme}//{user}:****@{host}"
    return masked
