import pytest

from dbcopy.schema import (
    ColumnDescriptor,
    bind_params,
    build_count,
    build_create_table,
    build_insert,
    build_select,
    quote_ident,
)


def test_create_table_single_primary_key():
    columns = [
        ColumnDescriptor("id", "INTEGER", nullable=False, is_primary_key=True),
        ColumnDescriptor("name", "TEXT", nullable=False),
        ColumnDescriptor("score", "DOUBLE PRECISION"),
    ]
    assert build_create_table("users", columns) == (
        'CREATE TABLE "users" (\n'
        '  "id" INTEGER PRIMARY KEY NOT NULL,\n'
        '  "name" TEXT NOT NULL,\n'
        '  "score" DOUBLE PRECISION\n'
        ");"
    )


def test_create_table_composite_primary_key_is_table_level():
    columns = [
        ColumnDescriptor("order_id", "INTEGER", nullable=False, is_primary_key=True),
        ColumnDescriptor("line", "INTEGER", nullable=False, is_primary_key=True),
        ColumnDescriptor("sku", "TEXT"),
    ]
    ddl = build_create_table("order_lines", columns)
    assert ddl.count("PRIMARY KEY") == 1
    assert '"order_id" INTEGER NOT NULL,' in ddl
    assert '"line" INTEGER NOT NULL,' in ddl
    assert ddl.endswith('  PRIMARY KEY ("order_id", "line")\n);')


def test_create_table_without_primary_key():
    ddl = build_create_table("log", [ColumnDescriptor("msg", "TEXT")])
    assert ddl == 'CREATE TABLE "log" (\n  "msg" TEXT\n);'


def test_create_table_requires_columns():
    with pytest.raises(ValueError):
        build_create_table("empty", [])


def test_quote_ident_escapes_quotes():
    assert quote_ident("odd\"name") == '"odd""name"'
    assert quote_ident("Mixed Case") == '"Mixed Case"'


def test_select_keeps_column_order():
    assert build_select("users", ["b", "a"]) == 'SELECT "b", "a" FROM "users"'
    assert build_count("users") == 'SELECT COUNT(*) FROM "users"'


def test_insert_uses_positional_binds():
    assert build_insert("users", ["id", "first name"]) == (
        'INSERT INTO "users" ("id", "first name") VALUES (:p0, :p1)'
    )
    assert bind_params([(1, "a"), (2, None)]) == [{"p0": 1, "p1": "a"}, {"p0": 2, "p1": None}]
