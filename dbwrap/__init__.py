"""Thin query-building and execution wrapper around a single SQLite connection."""
from __future__ import annotations

from .db import Database, get_conn, get_db_path, open_database
from .errors import (
    ConnectionClosedError,
    DatabaseConnectionError,
    DatabaseError,
    FatalQueryError,
    QueryError,
    ValueNotFoundError,
)

__version__ = "0.1.0"

__all__ = [
    "Database",
    "get_conn",
    "get_db_path",
    "open_database",
    "DatabaseError",
    "DatabaseConnectionError",
    "ConnectionClosedError",
    "QueryError",
    "FatalQueryError",
    "ValueNotFoundError",
]
