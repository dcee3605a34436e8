# dbwrap/services/settings_svc.py
from __future__ import annotations

from typing import Any, Dict

from ..db import Database

DDL = """
CREATE TABLE IF NOT EXISTS settings (
  skey TEXT NOT NULL UNIQUE,
  sval TEXT NOT NULL DEFAULT ''
);
"""


def ensure_settings_schema(db: Database):
    db.executescript(DDL)


def get_setting(db: Database, skey: str) -> Any:
    """Raises ValueNotFoundError when the key is absent."""
    return db.get_setting(skey)


def set_setting(db: Database, skey: str, sval: Any) -> None:
    """Upsert; last write wins."""
    db.execute(
        "INSERT INTO settings(skey, sval) VALUES (?, ?) "
        "ON CONFLICT(skey) DO UPDATE SET sval=excluded.sval",
        (skey, "" if sval is None else str(sval)),
    )


def update_settings(db: Database, upd: dict) -> list[str]:
    updated = []
    for k, v in upd.items():
        set_setting(db, k, v)
        updated.append(k)
    return updated


def list_settings(db: Database) -> Dict[str, str]:
    return {r["skey"]: r["sval"] for r in db.select("settings", order_by="skey")}
