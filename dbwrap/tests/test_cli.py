from __future__ import annotations

import dbadmin
from dbwrap.db import open_database


def test_set_get_setting(tmp_db_path, capsys):
    assert dbadmin.main(["--db", tmp_db_path, "set-setting", "mode", "batch"]) == 0
    assert dbadmin.main(["--db", tmp_db_path, "get-setting", "mode"]) == 0
    out = capsys.readouterr().out
    assert out.strip().splitlines()[-1] == "batch"


def test_get_missing_setting_exit_code(tmp_db_path, capsys):
    assert dbadmin.main(["--db", tmp_db_path, "get-setting", "nope"]) == 2
    assert "setting not found" in capsys.readouterr().err


def test_log_and_logs(tmp_db_path, capsys):
    assert dbadmin.main(["--db", tmp_db_path, "log", "cron", "done"]) == 0
    assert dbadmin.main(["--db", tmp_db_path, "logs"]) == 0
    out = capsys.readouterr().out
    assert "cron" in out
    assert "(1 of 1)" in out


def test_select_with_filters(tmp_db_path, capsys):
    with open_database(tmp_db_path) as db:
        db.insert("customers", {"name": "Ann", "city": "Oslo"})
        db.insert("customers", {"name": "Bob", "city": "Rome"})
    assert dbadmin.main(["--db", tmp_db_path, "select", "customers", "--where", "city=Rome"]) == 0
    out = capsys.readouterr().out
    assert "Bob" in out and "Ann" not in out


def test_bad_sql_is_fatal_exit_1(tmp_db_path):
    assert dbadmin.main(["--db", tmp_db_path, "sql", "SELEC broken"]) == 1


def test_init_is_idempotent(tmp_db_path, capsys):
    assert dbadmin.main(["--db", tmp_db_path, "init"]) == 0
    assert "DB initialized" in capsys.readouterr().out
