"""
dbcopy/sample.py

Build a SQLite database with a ``sample_users`` table for trying out copies.
"""

import logging
from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    create_engine,
    true,
)

from dbcopy.dialects import sqlite_url

LOG = logging.getLogger(__name__)

SAMPLE_TABLE = "sample_users"
SAMPLE_BATCH_SIZE = 100

metadata = MetaData()

sample_users = Table(
    SAMPLE_TABLE,
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(255), nullable=False),
    Column("email", String(255), nullable=False, unique=True),
    Column("age", Integer, nullable=False),
    Column("active", Boolean, nullable=False, server_default=true()),
    Column("created_at", DateTime, nullable=False),
    Column("updated_at", DateTime, nullable=False),
)


def sample_rows(count: int):
    now = datetime.now()
    for i in range(count):
        yield {
            "name": f"User {i + 1}",
            "email": f"user{i + 1}@example.com",
            "age": 20 + (i % 40),
            "active": i % 2 == 0,
            "created_at": now,
            "updated_at": now,
        }


def create_sample_data(db_path: str, count: int) -> int:
    """(Re)create ``sample_users`` in ``db_path`` with ``count`` rows."""
    if count < 0:
        raise ValueError(f"Record count must not be negative, got {count}")

    engine = create_engine(sqlite_url(db_path), echo=False)
    try:
        metadata.drop_all(engine, tables=[sample_users])
        metadata.create_all(engine, tables=[sample_users])

        batch = []
        inserted = 0
        with engine.begin() as conn:
            for row in sample_rows(count):
                batch.append(row)
                if len(batch) >= SAMPLE_BATCH_SIZE:
                    conn.execute(sample_users.insert(), batch)
                    inserted += len(batch)
                    batch = []
            if batch:
                conn.execute(sample_users.insert(), batch)
                inserted += len(batch)
    finally:
        engine.dispose()

    LOG.info("Created %s with %d records in %s", SAMPLE_TABLE, inserted, db_path)
    return inserted
