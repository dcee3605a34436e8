from __future__ import annotations


class DatabaseError(Exception):
    """Base class for everything raised by dbwrap."""


class DatabaseConnectionError(DatabaseError):
    """The connection could not be opened. Callers treat this as fatal."""


class ConnectionClosedError(DatabaseError):
    def __init__(self, msg: str = "connection already closed"):
        super().__init__(msg)


class QueryError(DatabaseError):
    """A statement failed. Carries the SQL text and the driver message."""

    def __init__(self, sql: str, error: str):
        self.sql = sql
        self.error = error
        super().__init__(f"SQL Error - Query: {sql} - Error: {error}")


class FatalQueryError(QueryError):
    """Failure on the execute path (select/insert/update/delete).

    The data layer only raises it; the top-level handler decides to abort.
    """

    def __init__(self, sql: str, error: str):
        super().__init__(sql, error)
        self.args = (f"Query Failed! SQL: {sql} - Error: {error}",)


class ValueNotFoundError(DatabaseError, LookupError):
    def __init__(self, table: str, wheres: dict | None, column: str, reason: str = "no matching row"):
        self.table = table
        self.wheres = dict(wheres or {})
        self.column = column
        super().__init__(f"{table}.{column}: {reason} for {self.wheres!r}")
