from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..db import Database
from ..logs import search_logs, write_log
from .deps import get_db

router = APIRouter()


@router.get("/api/logs/search")
def api_logs_search(
    page: int = 1,
    size: int = 20,
    query: str | None = None,
    ts_from: str | None = None,
    ts_to: str | None = None,
    db: Database = Depends(get_db),
):
    total, items = search_logs(db, query, ts_from, ts_to, page, size)
    return {"total": total, "items": items}


class LogAppendBody(BaseModel):
    title: str
    content: str = ""


@router.post("/api/logs/append", status_code=201)
def api_logs_append(body: LogAppendBody, db: Database = Depends(get_db)):
    return {"message": "ok", "id": write_log(db, body.title, body.content)}
