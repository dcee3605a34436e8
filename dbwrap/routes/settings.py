from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..db import Database
from ..errors import QueryError, ValueNotFoundError
from ..services.settings_svc import get_setting, list_settings, update_settings
from .deps import get_db

router = APIRouter()


@router.get("/api/settings/get")
def api_settings_get(key: str, db: Database = Depends(get_db)):
    try:
        return {"key": key, "value": get_setting(db, key)}
    except ValueNotFoundError:
        raise HTTPException(status_code=404, detail=f"setting not found: {key}")


@router.get("/api/settings/list")
def api_settings_list(db: Database = Depends(get_db)):
    return list_settings(db)


class SettingsUpdateBody(BaseModel):
    updates: dict


@router.post("/api/settings/update")
def api_settings_update(body: SettingsUpdateBody, db: Database = Depends(get_db)):
    try:
        db.start_transaction()
        updated_keys = update_settings(db, body.updates)
        db.commit()
    except QueryError as e:
        if db.in_transaction:
            db.rollback()
        db.log("SETTINGS_UPDATE", f"ERROR {e}")
        raise HTTPException(status_code=400, detail=str(e))
    db.log("SETTINGS_UPDATE", ",".join(updated_keys))
    return {"message": "ok", "updated": updated_keys}
