import asyncio
import typing as t
from contextlib import aclosing

import pytest
from click.testing import CliRunner
from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError

from dbcopy.backends import SQLiteBackend

USERS_DDL = """
CREATE TABLE "{table}" (
    id INTEGER NOT NULL PRIMARY KEY,
    name VARCHAR(255) NOT NULL,
    score REAL,
    active BOOLEAN NOT NULL,
    avatar BLOB,
    created_at DATETIME
)
"""


def run(coro):
    return asyncio.run(coro)


def execute_sqlite(path: str, statement: str, params: t.Optional[list] = None) -> None:
    engine = create_engine(f"sqlite:///{path}")
    try:
        with engine.begin() as conn:
            conn.execute(text(statement), params)
    finally:
        engine.dispose()


def fetch_sqlite(path: str, sql: str) -> list:
    engine = create_engine(f"sqlite:///{path}")
    try:
        with engine.connect() as conn:
            return [tuple(row) for row in conn.execute(text(sql))]
    finally:
        engine.dispose()


def user_rows(count: int) -> list:
    return [
        {
            "id": i + 1,
            "name": f"User {i + 1}",
            "score": i * 1.5,
            "active": i % 2,
            "avatar": bytes([i % 256]) * 3,
            "created_at": f"2024-01-{(i % 28) + 1:02d} 12:00:00.000000",
        }
        for i in range(count)
    ]


def create_users_db(path: str, count: int, table: str = "users") -> str:
    execute_sqlite(path, USERS_DDL.format(table=table))
    if count:
        execute_sqlite(
            path,
            f'INSERT INTO "{table}" '
            "(id, name, score, active, avatar, created_at) "
            "VALUES (:id, :name, :score, :active, :avatar, :created_at)",
            params=user_rows(count),
        )
    return path


class RecordingSQLiteBackend(SQLiteBackend):
    """SQLite backend that remembers every insert call and DDL statement."""

    def __init__(self, descriptor: str):
        super().__init__(descriptor)
        self.insert_sizes: t.List[int] = []
        self.ddl: t.List[str] = []

    async def create_table(self, ddl: str):
        self.ddl.append(ddl)
        await super().create_table(ddl)

    async def insert_batch(self, table, columns, rows):
        self.insert_sizes.append(len(rows))
        await super().insert_batch(table, columns, rows)


class FailingSQLiteBackend(RecordingSQLiteBackend):
    """Rejects the ``fail_on``-th insert call after really inserting the earlier ones."""

    def __init__(self, descriptor: str, fail_on: int):
        super().__init__(descriptor)
        self.fail_on = fail_on

    async def insert_batch(self, table, columns, rows):
        if len(self.insert_sizes) + 1 == self.fail_on:
            self.insert_sizes.append(len(rows))
            raise OperationalError("INSERT", {}, Exception("injected failure"))
        await super().insert_batch(table, columns, rows)


class UncommittableSQLiteBackend(RecordingSQLiteBackend):
    """Inserts normally but refuses to commit."""

    async def commit(self):
        raise OperationalError("COMMIT", {}, Exception("injected failure"))


class UnstartableSQLiteBackend(RecordingSQLiteBackend):
    """Refuses to open the copy transaction."""

    async def begin(self):
        raise OperationalError("BEGIN", {}, Exception("injected failure"))


class BrokenReadSQLiteBackend(SQLiteBackend):
    """
    Source that fails mid-read: ``fail_after`` partitions are yielded before
    the read raises. ``fail_count`` makes the row count fail instead.
    """

    def __init__(self, descriptor: str, fail_after: int = 1, fail_count: bool = False):
        super().__init__(descriptor)
        self.fail_after = fail_after
        self.fail_count = fail_count

    async def count_rows(self, table):
        if self.fail_count:
            raise OperationalError("SELECT COUNT(*)", {}, Exception("injected failure"))
        return await super().count_rows(table)

    async def iter_batches(self, table, columns, size):
        async with aclosing(super().iter_batches(table, columns, size)) as batches:
            sent = 0
            async for rows in batches:
                if sent == self.fail_after:
                    raise OperationalError("SELECT", {}, Exception("injected failure"))
                sent += 1
                yield rows


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def users_db(tmp_path) -> str:
    return create_users_db(str(tmp_path / "source.db"), 25)


@pytest.fixture
def dest_path(tmp_path) -> str:
    return str(tmp_path / "dest.db")
