"""
dbcopy/schema.py

Column descriptors and the SQL text built from them.
"""

from dataclasses import dataclass
from typing import List


@dataclass
class ColumnDescriptor:
    name: str
    native_type: str
    nullable: bool = True
    is_primary_key: bool = False


def quote_ident(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


def build_create_table(table: str, columns: List[ColumnDescriptor]) -> str:
    """
    Build the CREATE TABLE statement for ``columns`` in their given order.

    A single key column is tagged inline. A composite key is emitted as one
    table-level ``PRIMARY KEY (...)`` clause instead, since tagging several
    columns is rejected by both sqlite and postgres.
    """
    if not columns:
        raise ValueError(f"Cannot create table {table!r} without columns")

    pk_cols = [c.name for c in columns if c.is_primary_key]
    inline_pk = len(pk_cols) == 1

    defs = []
    for col in columns:
        definition = f"{quote_ident(col.name)} {col.native_type}"
        if col.is_primary_key and inline_pk:
            definition += " PRIMARY KEY"
        if not col.nullable:
            definition += " NOT NULL"
        defs.append(definition)

    if len(pk_cols) > 1:
        defs.append(f"PRIMARY KEY ({', '.join(quote_ident(c) for c in pk_cols)})")

    return f"CREATE TABLE {quote_ident(table)} (\n  " + ",\n  ".join(defs) + "\n);"


def build_select(table: str, columns: List[str]) -> str:
    col_list = ", ".join(quote_ident(c) for c in columns)
    return f"SELECT {col_list} FROM {quote_ident(table)}"


def build_count(table: str) -> str:
    return f"SELECT COUNT(*) FROM {quote_ident(table)}"


def build_insert(table: str, columns: List[str]) -> str:
    """INSERT with positional bind names, so any column name is safe."""
    placeholders = ", ".join(f":p{i}" for i in range(len(columns)))
    col_list = ", ".join(quote_ident(c) for c in columns)
    return f"INSERT INTO {quote_ident(table)} ({col_list}) VALUES ({placeholders})"


def bind_params(rows) -> List[dict]:
    """Turn ordered row tuples into parameter dicts for :func:`build_insert`."""
    return [{f"p{i}": v for i, v in enumerate(row)} for row in rows]
