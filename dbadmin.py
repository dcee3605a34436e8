#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
dbwrap admin script (SQLite)

Commands:
  init                Create the settings and logs tables from schema.sql
  sql                 Run a raw SQL statement (no escaping, use with caution)
  select              SELECT * FROM a table with optional col=value filters
  get-setting         Print a value from the settings table
  set-setting         Upsert a value into the settings table
  log                 Append an entry to the logs table
  logs                Show the newest log entries
  serve               Start the FastAPI admin app with uvicorn

Notes:
- The database path comes from --db, else DBWRAP_DB_PATH, else config.yaml, else ./dbwrap.db.
- Connection failures and failed statements are fatal here: the script logs them and exits 1.
"""

import argparse
import logging
import os
import sys

import pandas as pd

from dbwrap.db import Database, open_database
from dbwrap.errors import DatabaseConnectionError, FatalQueryError, QueryError, ValueNotFoundError
from dbwrap.logs import search_logs
from dbwrap.repository.results import RowSet
from dbwrap.services.settings_svc import set_setting

logger = logging.getLogger("dbadmin")


# ---------------- helpers ----------------

def parse_filters(items):
    """["a=1", "b=x"] -> {"a": "1", "b": "x"}, order kept."""
    out = {}
    for item in items or []:
        if "=" not in item:
            raise SystemExit(f"bad filter (expected col=value): {item}")
        k, v = item.split("=", 1)
        out[k.strip()] = v
    return out


def print_result(res):
    if isinstance(res, RowSet):
        if len(res):
            with pd.option_context("display.max_columns", None, "display.width", 200):
                print(res.to_frame().to_string(index=False))
        else:
            print("(empty)")
    else:
        msg = f"OK, {res.rowcount} row(s) affected"
        if res.insert_id:
            msg += f", insert id {res.insert_id}"
        print(msg)


# ---------------- commands ----------------

def cmd_init(db: Database, args):
    schema_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), "schema.sql")
    with open(schema_path, "r", encoding="utf-8") as f:
        db.executescript(f.read())
    print("DB initialized:", db.path)


def cmd_sql(db: Database, args):
    print_result(db.execute(args.statement))


def cmd_select(db: Database, args):
    res = db.select(args.table, parse_filters(args.where), args.order_by or "", not args.desc)
    print_result(res)


def cmd_get_setting(db: Database, args):
    try:
        print(db.get_setting(args.key))
    except ValueNotFoundError:
        print(f"setting not found: {args.key}", file=sys.stderr)
        return 2


def cmd_set_setting(db: Database, args):
    set_setting(db, args.key, args.value)
    db.log("SETTING_SET", f"{args.key}={args.value}")
    print("Setting saved.")


def cmd_log(db: Database, args):
    res = db.log(args.title, args.content or "")
    print("Logged, id", res.insert_id)


def cmd_logs(db: Database, args):
    total, items = search_logs(db, args.query, None, None, 1, args.limit)
    print_result(RowSet(["id", "log_time", "title", "content"], items))
    print(f"({len(items)} of {total})")


def cmd_serve(args):
    import uvicorn

    if args.db:
        os.environ["DBWRAP_DB_PATH"] = args.db
    uvicorn.run("dbwrap.api:app", host=args.host, port=args.port)


def main(argv=None):
    parser = argparse.ArgumentParser(description="dbwrap admin (SQLite)")
    parser.add_argument("--db", default=None, help="SQLite file path")
    parser.add_argument("-v", "--verbose", action="store_true", help="log every SQL statement")
    sub = parser.add_subparsers()

    p_init = sub.add_parser("init", help="create settings/logs tables")
    p_init.set_defaults(func=cmd_init)

    p_sql = sub.add_parser("sql", help="run a raw SQL statement")
    p_sql.add_argument("statement")
    p_sql.set_defaults(func=cmd_sql)

    p_sel = sub.add_parser("select", help="select rows from a table")
    p_sel.add_argument("table")
    p_sel.add_argument("--where", action="append", help="col=value, repeatable (AND)")
    p_sel.add_argument("--order-by", required=False)
    p_sel.add_argument("--desc", action="store_true")
    p_sel.set_defaults(func=cmd_select)

    p_get = sub.add_parser("get-setting", help="print a setting")
    p_get.add_argument("key")
    p_get.set_defaults(func=cmd_get_setting)

    p_set = sub.add_parser("set-setting", help="save a setting")
    p_set.add_argument("key")
    p_set.add_argument("value")
    p_set.set_defaults(func=cmd_set_setting)

    p_log = sub.add_parser("log", help="append a log entry")
    p_log.add_argument("title")
    p_log.add_argument("content", nargs="?", default="")
    p_log.set_defaults(func=cmd_log)

    p_logs = sub.add_parser("logs", help="show newest log entries")
    p_logs.add_argument("--query", required=False)
    p_logs.add_argument("--limit", type=int, default=20)
    p_logs.set_defaults(func=cmd_logs)

    p_srv = sub.add_parser("serve", help="run the admin API")
    p_srv.add_argument("--host", default="127.0.0.1")
    p_srv.add_argument("--port", type=int, default=8000)
    p_srv.set_defaults(func=cmd_serve, no_db=True)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if not hasattr(args, "func"):
        parser.print_help()
        return 0
    if getattr(args, "no_db", False):
        return args.func(args) or 0

    try:
        with open_database(args.db) as db:
            return args.func(db, args) or 0
    except (DatabaseConnectionError, FatalQueryError) as e:
        logger.critical("%s", e)
        return 1
    except QueryError as e:
        logger.error("%s", e)
        return 2


if __name__ == "__main__":
    sys.exit(main())
