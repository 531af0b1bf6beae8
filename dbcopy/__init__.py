"""
dbcopy

Copy a table between SQLite and PostgreSQL databases, translating its schema.
"""

from dbcopy.copier import CopyJob, TableCopier, copy_table
from dbcopy.dialects import Dialect, classify
from dbcopy.errors import (
    CommitError,
    ConfigError,
    CopyError,
    EndpointConnectionError,
    InsertError,
    IntrospectionError,
    ReadError,
    SchemaError,
)
from dbcopy.schema import ColumnDescriptor, build_create_table
from dbcopy.type_map import map_type

__version__ = "0.1.0"

__all__ = [
    "ColumnDescriptor",
    "CommitError",
    "ConfigError",
    "CopyError",
    "CopyJob",
    "Dialect",
    "EndpointConnectionError",
    "InsertError",
    "IntrospectionError",
    "ReadError",
    "SchemaError",
    "TableCopier",
    "build_create_table",
    "classify",
    "copy_table",
    "map_type",
]
