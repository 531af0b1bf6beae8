"""
dbcopy/errors.py

Failures raised by the copy pipeline. Every stage wraps the driver error it
caught, so ``__cause__`` always holds the original exception.
"""


class ConfigError(ValueError):
    """Invalid job parameters or job file."""


class CopyError(Exception):
    """Base class for anything that aborts a copy job."""

    def __init__(self, message: str, table: str = None):
        super().__init__(message)
        self.table = table


class EndpointConnectionError(CopyError):
    """Source or destination could not be opened."""

    def __init__(self, message: str, endpoint: str, descriptor: str, table: str = None):
        super().__init__(message, table)
        self.endpoint = endpoint
        self.descriptor = descriptor


class IntrospectionError(CopyError):
    """Catalog query failed or the table is missing from the source."""


class SchemaError(CopyError):
    """CREATE TABLE was rejected by the destination."""


class ReadError(CopyError):
    """Source rows could not be read."""


class InsertError(CopyError):
    """A batch was rejected; ``start``/``end`` are 1-based and inclusive."""

    def __init__(self, message: str, start: int, end: int, table: str = None):
        super().__init__(message, table)
        self.start = start
        self.end = end


class CommitError(CopyError):
    """The destination refused to commit the copy transaction."""
