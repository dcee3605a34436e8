from __future__ import annotations

from dataclasses import dataclass, field
from collections.abc import Sequence
from typing import Any, Dict, Iterator, List, Optional

import pandas as pd


class RowSet(Sequence):
    """
    Rows of a SELECT/JOIN, each a dict keyed by column name.

    When a join returns two columns with the same name the dict keeps the
    last one; `records` keeps every column positionally.
    """

    def __init__(self, columns: Sequence[str], rows: List[Dict[str, Any]], sql: str = "",
                 records: Optional[List[tuple]] = None):
        self.columns = list(columns)
        self.rows = rows
        self.sql = sql
        self.records = records

    @classmethod
    def from_cursor(cls, cur, sql: str = "") -> "RowSet":
        columns = [d[0] for d in cur.description]
        records = [tuple(r) for r in cur.fetchall()]
        return cls(columns, [dict(zip(columns, r)) for r in records], sql, records)

    def __getitem__(self, i):
        return self.rows[i]

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return iter(self.rows)

    def __eq__(self, other) -> bool:
        if isinstance(other, RowSet):
            return self.columns == other.columns and self.rows == other.rows
        return self.rows == other

    def __repr__(self) -> str:
        return f"RowSet(columns={self.columns!r}, rows={len(self.rows)})"

    def first(self) -> Optional[Dict[str, Any]]:
        return self.rows[0] if self.rows else None

    def to_frame(self) -> pd.DataFrame:
        if self.records is not None:
            return pd.DataFrame(self.records, columns=self.columns)
        return pd.DataFrame(self.rows, columns=self.columns)


@dataclass
class MutationResult:
    """Outcome of INSERT/UPDATE/DELETE or any raw statement returning no rows."""
    rowcount: int
    insert_id: Optional[int] = None
    sql: str = field(default="", compare=False)

    def __bool__(self) -> bool:
        # a statement that ran is a success even when it touched zero rows
        return True
