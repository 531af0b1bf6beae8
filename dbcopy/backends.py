"""
dbcopy/backends.py

One backend per supported database. A backend owns the single live
connection used for its endpoint and answers catalog, read and write calls
for the copy engine.

SQLite runs on a synchronous engine and PostgreSQL on an asyncpg engine; both
expose the same ``async`` methods so the engine can drive either side.
"""

import logging
from typing import AsyncIterator, List

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.ext.asyncio import create_async_engine

from dbcopy.dialects import (
    Dialect,
    classify,
    mask_descriptor,
    postgres_url,
    sqlite_url,
)
from dbcopy.schema import (
    ColumnDescriptor,
    bind_params,
    build_count,
    build_insert,
    build_select,
)
from dbcopy.type_map import map_type

LOG = logging.getLogger(__name__)

POSTGRES_SCHEMA_SQL = """
SELECT
    c.column_name,
    c.data_type,
    c.is_nullable,
    pk.column_name IS NOT NULL AS is_primary
FROM information_schema.columns c
LEFT JOIN (
    SELECT kcu.column_name
    FROM information_schema.table_constraints tc
    JOIN information_schema.key_column_usage kcu
        ON tc.constraint_name = kcu.constraint_name
        AND tc.table_schema = kcu.table_schema
        AND tc.table_name = kcu.table_name
    WHERE tc.constraint_type = 'PRIMARY KEY'
        AND tc.table_schema = current_schema()
        AND tc.table_name = :t
) pk ON pk.column_name = c.column_name
WHERE c.table_schema = current_schema()
    AND c.table_name = :t
ORDER BY c.ordinal_position
"""


class Backend:
    """Capabilities the copy engine needs from an endpoint."""

    dialect: Dialect = None

    def __init__(self, descriptor: str):
        self.descriptor = descriptor
        self.engine = None
        self.conn = None
        self._tx = None

    @property
    def masked(self) -> str:
        return mask_descriptor(self.descriptor)

    async def connect(self, readonly: bool = False):
        raise NotImplementedError

    async def close(self):
        raise NotImplementedError

    async def get_schema(self, table: str, target: Dialect) -> List[ColumnDescriptor]:
        """
        Columns of ``table`` in ordinal order, types already translated for
        ``target``. Returns an empty list when the table does not exist.
        """
        raise NotImplementedError

    async def table_exists(self, table: str) -> bool:
        raise NotImplementedError

    async def create_table(self, ddl: str):
        raise NotImplementedError

    async def count_rows(self, table: str) -> int:
        raise NotImplementedError

    def iter_batches(self, table: str, columns: List[str], size: int) -> AsyncIterator[list]:
        """Yield lists of at most ``size`` row tuples, columns in given order."""
        raise NotImplementedError

    async def begin(self):
        raise NotImplementedError

    async def insert_batch(self, table: str, columns: List[str], rows: list):
        raise NotImplementedError

    async def commit(self):
        raise NotImplementedError

    async def rollback(self):
        raise NotImplementedError


class SQLiteBackend(Backend):
    dialect = Dialect.SQLITE

    async def connect(self, readonly: bool = False):
        self.engine = create_engine(sqlite_url(self.descriptor, readonly), echo=False)
        self.conn = self.engine.connect()
        LOG.info("Connected to SQLite %s%s", self.descriptor, " (read-only)" if readonly else "")

    async def close(self):
        if self.conn is not None:
            self.conn.close()
            self.conn = None
        if self.engine is not None:
            self.engine.dispose()
            self.engine = None

    async def get_schema(self, table: str, target: Dialect) -> List[ColumnDescriptor]:
        with self.conn.begin():
            # PRAGMA does not accept bind parameters
            rows = self.conn.execute(text(f"PRAGMA table_info({quote_pragma(table)})")).fetchall()
        # cid, name, type, notnull, dflt_value, pk
        return [
            ColumnDescriptor(
                name=row[1],
                native_type=map_type(row[2], self.dialect, target),
                nullable=row[3] == 0,
                is_primary_key=row[5] > 0,
            )
            for row in rows
        ]

    async def table_exists(self, table: str) -> bool:
        with self.conn.begin():
            return inspect(self.conn).has_table(table)

    async def create_table(self, ddl: str):
        LOG.debug("Executing DDL on %s:\n%s", self.descriptor, ddl)
        with self.conn.begin():
            self.conn.execute(text(ddl))

    async def count_rows(self, table: str) -> int:
        with self.conn.begin():
            return self.conn.execute(text(build_count(table))).scalar_one()

    async def iter_batches(self, table: str, columns: List[str], size: int):
        with self.conn.begin():
            result = self.conn.execute(text(build_select(table, columns)))
            for partition in result.partitions(size):
                yield [tuple(row) for row in partition]

    async def begin(self):
        self._tx = self.conn.begin()

    async def insert_batch(self, table: str, columns: List[str], rows: list):
        self.conn.execute(text(build_insert(table, columns)), bind_params(rows))

    async def commit(self):
        tx, self._tx = self._tx, None
        tx.commit()

    async def rollback(self):
        tx, self._tx = self._tx, None
        if tx is not None and tx.is_active:
            tx.rollback()


class PostgresBackend(Backend):
    dialect = Dialect.POSTGRES

    async def connect(self, readonly: bool = False):
        url, connect_args = postgres_url(self.descriptor)
        self.engine = create_async_engine(
            url, connect_args=connect_args, pool_pre_ping=True, echo=False
        )
        self.conn = await self.engine.connect()
        LOG.info("Connected to PostgreSQL %s", self.masked)

    async def close(self):
        if self.conn is not None:
            await self.conn.close()
            self.conn = None
        if self.engine is not None:
            await self.engine.dispose()
            self.engine = None

    async def get_schema(self, table: str, target: Dialect) -> List[ColumnDescriptor]:
        async with self.conn.begin():
            result = await self.conn.execute(text(POSTGRES_SCHEMA_SQL), {"t": table})
            rows = result.fetchall()
        return [
            ColumnDescriptor(
                name=row[0],
                native_type=map_type(row[1], self.dialect, target),
                nullable=row[2] == "YES",
                is_primary_key=bool(row[3]),
            )
            for row in rows
        ]

    async def table_exists(self, table: str) -> bool:
        async with self.conn.begin():
            return await self.conn.run_sync(
                lambda sync_conn: inspect(sync_conn).has_table(table)
            )

    async def create_table(self, ddl: str):
        LOG.debug("Executing DDL on %s:\n%s", self.masked, ddl)
        async with self.conn.begin():
            await self.conn.execute(text(ddl))

    async def count_rows(self, table: str) -> int:
        async with self.conn.begin():
            result = await self.conn.execute(text(build_count(table)))
            return result.scalar_one()

    async def iter_batches(self, table: str, columns: List[str], size: int):
        async with self.conn.begin():
            result = await self.conn.stream(text(build_select(table, columns)))
            async for partition in result.partitions(size):
                yield [tuple(row) for row in partition]

    async def begin(self):
        self._tx = await self.conn.begin()

    async def insert_batch(self, table: str, columns: List[str], rows: list):
        await self.conn.execute(text(build_insert(table, columns)), bind_params(rows))

    async def commit(self):
        tx, self._tx = self._tx, None
        await tx.commit()

    async def rollback(self):
        tx, self._tx = self._tx, None
        if tx is not None and tx.is_active:
            await tx.rollback()


BACKENDS = {
    Dialect.SQLITE: SQLiteBackend,
    Dialect.POSTGRES: PostgresBackend,
}


def quote_pragma(table: str) -> str:
    return "'" + table.replace("'", "''") + "'"


def backend_for(descriptor: str) -> Backend:
    """Pick the backend class for ``descriptor`` without connecting."""
    return BACKENDS[classify(descriptor)](descriptor)
