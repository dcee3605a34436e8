from __future__ import annotations

# dbwrap/db.py
import logging
import os
import sqlite3
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Mapping, Optional, Union

import yaml

from .errors import (
    ConnectionClosedError,
    DatabaseConnectionError,
    FatalQueryError,
    QueryError,
    ValueNotFoundError,
)
from .repository import sql_builder
from .repository.results import MutationResult, RowSet
from .repository.sql_builder import Statement
from .repository.values import SqlValue, escape_string, now_timestamp

logger = logging.getLogger(__name__)

# DB path resolution order:
# 1) env DBWRAP_DB_PATH (highest priority)
# 2) config.yaml test_db_path (when running under test)
# 3) config.yaml db_path
# 4) fallback: dbwrap.db in the project root
_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
_ROOT_DB = os.path.join(_PROJECT_ROOT, "dbwrap.db")
MEMORY = ":memory:"


def _read_config_yaml() -> dict:
    cfg_path = os.path.join(_PROJECT_ROOT, "config.yaml")
    if not os.path.exists(cfg_path):
        return {}
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("ignoring unreadable config %s: %s", cfg_path, e)
        return {}
    if not isinstance(cfg, dict):
        return {}
    out = {}
    for k in ("db_path", "test_db_path"):
        v = cfg.get(k)
        if isinstance(v, str) and v.strip():
            out[k] = v.strip()
    return out


def get_db_path(db_path: str | None = None) -> str:
    if db_path:
        path = db_path
    else:
        env_path = os.environ.get("DBWRAP_DB_PATH")
        cfg = _read_config_yaml()
        is_test = (os.environ.get("APP_ENV") == "test") or (os.environ.get("PYTEST_CURRENT_TEST") is not None)
        if env_path:
            path = env_path
        elif is_test and cfg.get("test_db_path"):
            path = cfg["test_db_path"]
        elif cfg.get("db_path"):
            path = cfg["db_path"]
        else:
            path = _ROOT_DB

    if path != MEMORY:
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    return path


def _connect(path: str) -> sqlite3.Connection:
    try:
        conn = sqlite3.connect(path, check_same_thread=False, isolation_level=None)
    except sqlite3.Error as e:
        logger.error("connection to %s failed: %s", path, e)
        raise DatabaseConnectionError(f"Connection Error: {path}: {e}") from e
    try:
        conn.execute("PRAGMA encoding = 'UTF-8';")
        conn.execute("PRAGMA foreign_keys = ON;")
    except sqlite3.Error as e:
        conn.close()
        raise DatabaseConnectionError(f"Connection Error: {path}: {e}") from e
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_conn(db_path: str | None = None) -> Iterator[sqlite3.Connection]:
    """
    Raw SQLite connection for schema work and test fixtures.
    Autocommit mode, foreign_keys on, row_factory sqlite3.Row.
    """
    conn = _connect(get_db_path(db_path))
    try:
        yield conn
    finally:
        conn.close()


Wheres = Optional[Mapping[str, Any]]


class Database:
    """
    One live SQLite connection plus CRUD helpers built on generated SQL.

    Values always go through SqlValue and are bound as parameters; table and
    column names are embedded verbatim. `execute`/`query` and the
    `extra_conditions` of `select_join2` take raw SQL the caller vouches for.

    Not safe to share across threads: `insert_id()` is connection-wide state.
    """

    def __init__(self, db_path: str | None = None):
        self.path = get_db_path(db_path)
        self._conn: Optional[sqlite3.Connection] = _connect(self.path)
        self._last_insert_id: Optional[int] = None
        logger.debug("opened %s", self.path)

    # ---------------- lifecycle ----------------

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            logger.debug("closed %s", self.path)

    @property
    def closed(self) -> bool:
        return self._conn is None

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _live(self) -> sqlite3.Connection:
        if self._conn is None:
            raise ConnectionClosedError()
        return self._conn

    # ---------------- raw execution ----------------

    def _run(self, sql: str, params, err_cls) -> sqlite3.Cursor:
        conn = self._live()
        logger.debug("SQL: %s params=%r", sql, params)
        try:
            cur = conn.execute(sql, params)
        except sqlite3.Error as e:
            logger.error("query failed: %s - %s", sql, e)
            raise err_cls(sql, str(e)) from e
        if cur.description is None:
            self._last_insert_id = cur.lastrowid
        return cur

    @staticmethod
    def _wrap(cur: sqlite3.Cursor, sql: str) -> Union[RowSet, MutationResult]:
        if cur.description is not None:
            return RowSet.from_cursor(cur, sql)
        # lastrowid is connection-wide; only an INSERT/REPLACE owns it
        head = sql.lstrip().split(None, 1)[0].upper() if sql.strip() else ""
        insert_id = cur.lastrowid if head in ("INSERT", "REPLACE") and cur.rowcount > 0 else None
        return MutationResult(rowcount=cur.rowcount, insert_id=insert_id, sql=sql)

    def execute(self, sql: str, params=()) -> Union[RowSet, MutationResult]:
        """Run SQL as given. No escaping here. Failure raises FatalQueryError."""
        cur = self._run(sql, params, FatalQueryError)
        return self._wrap(cur, sql)

    def query(self, sql: str, params=()) -> Union[RowSet, MutationResult]:
        """Like execute, but failure raises the recoverable QueryError."""
        cur = self._run(sql, params, QueryError)
        return self._wrap(cur, sql)

    def executescript(self, script: str) -> None:
        """Run a multi-statement SQL script (schema files, DDL). No parameters."""
        conn = self._live()
        logger.debug("SQL script: %d chars", len(script))
        try:
            conn.executescript(script)
        except sqlite3.Error as e:
            logger.error("script failed: %s", e)
            raise FatalQueryError(script, str(e)) from e

    def run(self, stmt: Statement) -> Union[RowSet, MutationResult]:
        """Execute a built statement with its values bound as parameters."""
        return self.execute(stmt.sql, stmt.params)

    # ---------------- select ----------------

    def select(self, table: str, wheres: Wheres = None, order_by: str = "",
               order_asc: bool = True) -> RowSet:
        return self.run(sql_builder.build_select(table, wheres, order_by, order_asc))

    def get_row(self, table: str, wheres: Wheres = None) -> Optional[Dict[str, Any]]:
        return self.select(table, wheres).first()

    def get_row_by_id(self, table: str, id: Any) -> Optional[Dict[str, Any]]:
        return self.get_row(table, {"id": id})

    def get_value(self, table: str, wheres: Wheres, column: str) -> Any:
        row = self.get_row(table, wheres)
        if row is None:
            raise ValueNotFoundError(table, wheres, column)
        if column not in row:
            raise ValueNotFoundError(table, wheres, column, reason="no such column")
        return row[column]

    def select_join2(self, table1: str, table2: str, ons, wheres: Wheres = None,
                     order_by: str = "", order_asc: bool = True,
                     extra_conditions: str = "", join_type: str = "INNER") -> RowSet:
        stmt = sql_builder.build_select_join2(
            table1, table2, ons, wheres, order_by, order_asc, extra_conditions, join_type
        )
        return self.run(stmt)

    # ---------------- mutations ----------------

    def insert(self, table: str, values: Mapping[str, Any]) -> MutationResult:
        stmt = sql_builder.build_insert(table, values)
        cur = self._run(stmt.sql, stmt.params, FatalQueryError)
        return MutationResult(rowcount=cur.rowcount, insert_id=cur.lastrowid, sql=stmt.sql)

    def insert_id(self) -> Optional[int]:
        """Row id of the most recent insert on this connection."""
        return self._last_insert_id

    def update(self, table: str, values: Mapping[str, Any],
               wheres: Mapping[str, Any]) -> Optional[MutationResult]:
        stmt = sql_builder.build_update(table, values, wheres)
        if stmt is None:
            logger.warning("refusing UPDATE %s with empty %s", table, "values" if not values else "where map")
            return None
        return self.run(stmt)

    def delete(self, table: str, wheres: Mapping[str, Any]) -> Optional[MutationResult]:
        stmt = sql_builder.build_delete(table, wheres)
        if stmt is None:
            logger.warning("refusing DELETE FROM %s with empty where map", table)
            return None
        return self.run(stmt)

    # ---------------- transactions ----------------

    def start_transaction(self) -> None:
        self.query("BEGIN")

    def commit(self) -> None:
        self.query("COMMIT")

    def rollback(self) -> None:
        self.query("ROLLBACK")

    @property
    def in_transaction(self) -> bool:
        return self._live().in_transaction

    # ---------------- helpers ----------------

    def escape(self, value: Any) -> str:
        """Escape a value for a single-quoted literal (no quotes added)."""
        self._live()
        v = SqlValue.of(value)
        return "" if v.is_null else escape_string(v.param)

    @staticmethod
    def now() -> str:
        return now_timestamp()

    # ---------------- settings & logs ----------------

    def get_setting(self, skey: str) -> Any:
        return self.get_value("settings", {"skey": skey}, "sval")

    def log(self, title: str, content: str = "") -> MutationResult:
        return self.insert("logs", {"title": title, "content": content, "log_time": self.now()})


@contextmanager
def open_database(db_path: str | None = None) -> Iterator[Database]:
    db = Database(db_path)
    try:
        yield db
    finally:
        db.close()
