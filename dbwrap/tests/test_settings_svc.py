from __future__ import annotations

import pytest

from dbwrap.errors import ValueNotFoundError
from dbwrap.services import settings_svc


def test_get_setting_missing_key_raises_lookup(db):
    with pytest.raises(ValueNotFoundError):
        db.get_setting("missing_key")
    with pytest.raises(LookupError):
        settings_svc.get_setting(db, "missing_key")


def test_set_and_get_setting(db):
    settings_svc.set_setting(db, "site_name", "Übersicht")
    assert db.get_setting("site_name") == "Übersicht"


def test_last_write_wins(db):
    settings_svc.set_setting(db, "k", "1")
    settings_svc.set_setting(db, "k", "2")
    assert db.get_setting("k") == "2"
    assert len(db.select("settings", {"skey": "k"})) == 1


def test_update_and_list(db):
    updated = settings_svc.update_settings(db, {"b": 2, "a": None})
    assert updated == ["b", "a"]
    assert settings_svc.list_settings(db) == {"a": "", "b": "2"}


def test_ensure_schema_is_idempotent(db):
    settings_svc.ensure_settings_schema(db)
    settings_svc.ensure_settings_schema(db)
    settings_svc.set_setting(db, "x", "y")
    assert db.get_setting("x") == "y"
