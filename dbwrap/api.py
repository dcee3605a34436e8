"""
FastAPI admin app over the settings and logs tables.
Run with `uvicorn dbwrap.api:app` or `python dbadmin.py serve`.
"""
from __future__ import annotations


from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from . import __version__
from .db import open_database
from .errors import DatabaseError
from .logs import ensure_log_schema
from .services.settings_svc import ensure_settings_schema


app = FastAPI(title="dbwrap-admin-api", version=__version__)


@app.on_event("startup")
def on_startup():
    with open_database() as db:
        ensure_settings_schema(db)
        ensure_log_schema(db)


@app.exception_handler(DatabaseError)
def database_error_handler(request: Request, exc: DatabaseError):
    return JSONResponse(status_code=500, content={"detail": str(exc)})


from .routes import base as base_routes
from .routes import settings as settings_routes
from .routes import logs as logs_routes

app.include_router(base_routes.router)
app.include_router(settings_routes.router)
app.include_router(logs_routes.router)
