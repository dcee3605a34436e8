"""
Append-only `logs` table: schema and search.

Writing goes through Database.log(); rows are never updated or deleted here.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from .db import Database

DDL = """
CREATE TABLE IF NOT EXISTS logs (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  title TEXT NOT NULL,
  content TEXT NOT NULL,
  log_time DATETIME NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_logs_time ON logs(log_time);
"""


def ensure_log_schema(db: Database):
    db.executescript(DDL)


def write_log(db: Database, title: str, content: str = "") -> int:
    return db.log(title, content).insert_id


def search_logs(db: Database, q: Optional[str], ts_from: Optional[str], ts_to: Optional[str],
                page: int, size: int) -> Tuple[int, List[Dict[str, Any]]]:
    where = []
    params = {}
    if q:
        where.append("(title LIKE :q OR content LIKE :q)")
        params["q"] = f"%{q}%"
    if ts_from:
        where.append("log_time >= :from")
        params["from"] = ts_from
    if ts_to:
        where.append("log_time <= :to")
        params["to"] = ts_to
    wh = " WHERE " + " AND ".join(where) if where else ""
    sql = f"SELECT * FROM logs{wh} ORDER BY log_time DESC, id DESC LIMIT :limit OFFSET :offset"
    count_sql = f"SELECT COUNT(1) AS cnt FROM logs{wh}"
    total = db.execute(count_sql, params).first()["cnt"]
    rows = db.execute(sql, {**params, "limit": size, "offset": (page - 1) * size})
    return total, list(rows)
