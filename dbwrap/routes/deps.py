from __future__ import annotations

from typing import Iterator

from ..db import Database


def get_db() -> Iterator[Database]:
    """One connection per request, closed when the response is done."""
    db = Database()
    try:
        yield db
    finally:
        db.close()
