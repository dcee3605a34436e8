"""
SQL statement construction.

Table and column names are embedded verbatim and must never come from
untrusted input. Values are always carried as SqlValue parts: the executed
SQL binds them through `?` placeholders, and `Statement.render()` inlines
them as escaped literals.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple, Union

from .values import SqlValue

Part = Union[str, SqlValue]

JOIN_KINDS = (
    "INNER",
    "LEFT",
    "LEFT OUTER",
    "RIGHT",
    "RIGHT OUTER",
    "FULL",
    "FULL OUTER",
    "CROSS",
)


@dataclass(frozen=True)
class Statement:
    parts: Tuple[Part, ...]

    @property
    def sql(self) -> str:
        return "".join("?" if isinstance(p, SqlValue) else p for p in self.parts)

    @property
    def values(self) -> Tuple[SqlValue, ...]:
        return tuple(p for p in self.parts if isinstance(p, SqlValue))

    @property
    def params(self) -> tuple:
        return tuple(v.param for v in self.values)

    def render(self) -> str:
        return "".join(p.literal() if isinstance(p, SqlValue) else p for p in self.parts)

    def __str__(self) -> str:
        return self.render()


def _assignments(values: Mapping[str, Any], sep: str, null_as_is: bool) -> list:
    parts: list = []
    for i, (col, raw) in enumerate(values.items()):
        if i:
            parts.append(sep)
        v = SqlValue.of(raw)
        if null_as_is and v.is_null:
            parts.append(f"{col} IS NULL")
        else:
            parts.extend([f"{col}=", v])
    return parts


def where_parts(wheres: Optional[Mapping[str, Any]]) -> list:
    """` WHERE a=? AND b=?` in map order; nothing for an empty map."""
    if not wheres:
        return []
    return [" WHERE "] + _assignments(wheres, " AND ", null_as_is=True)


def order_parts(order_by: str = "", order_asc: bool = True) -> list:
    if not order_by:
        return []
    return [f" ORDER BY {order_by}" + ("" if order_asc else " DESC")]


def build_select(table: str, wheres: Optional[Mapping[str, Any]] = None,
                 order_by: str = "", order_asc: bool = True) -> Statement:
    parts: list = [f"SELECT * FROM {table}"]
    parts += where_parts(wheres)
    parts += order_parts(order_by, order_asc)
    return Statement(tuple(parts))


def _join_pair(ons) -> Tuple[str, str]:
    if isinstance(ons, Mapping):
        items = list(ons.items())
        if len(items) != 1:
            raise ValueError(f"join needs exactly one ON column pair, got {len(items)}")
        return items[0]
    pair = tuple(ons)
    if len(pair) != 2:
        raise ValueError(f"join needs exactly one ON column pair, got {ons!r}")
    return pair[0], pair[1]


def normalize_join_kind(join_type: str) -> str:
    kind = " ".join(join_type.upper().split())
    if kind.endswith(" JOIN"):
        kind = kind[: -len(" JOIN")]
    elif kind == "JOIN":
        kind = "INNER"
    if kind not in JOIN_KINDS:
        raise ValueError(f"unsupported join kind: {join_type!r}")
    return kind


def build_select_join2(table1: str, table2: str, ons, wheres: Optional[Mapping[str, Any]] = None,
                       order_by: str = "", order_asc: bool = True, extra_conditions: str = "",
                       join_type: str = "INNER") -> Statement:
    """
    SELECT * FROM t1 <kind> JOIN t2 ON t1.a = t2.b [WHERE ...] <extra> [ORDER BY ...]

    `ons` is a one-entry mapping {t1_column: t2_column} or a 2-tuple.
    `extra_conditions` is raw SQL appended verbatim after the WHERE clause.
    """
    col1, col2 = _join_pair(ons)
    kind = normalize_join_kind(join_type)
    parts: list = [f"SELECT * FROM {table1} {kind} JOIN {table2} ON {table1}.{col1} = {table2}.{col2}"]
    parts += where_parts(wheres)
    extra = (extra_conditions or "").strip()
    if extra:
        parts.append(" " + extra)
    parts += order_parts(order_by, order_asc)
    return Statement(tuple(parts))


def build_insert(table: str, values: Mapping[str, Any]) -> Statement:
    if not values:
        raise ValueError(f"insert into {table} needs at least one column")
    parts: list = [f"INSERT INTO {table} ({','.join(values.keys())}) VALUES ("]
    for i, raw in enumerate(values.values()):
        if i:
            parts.append(",")
        parts.append(SqlValue.of(raw))
    parts.append(")")
    return Statement(tuple(parts))


def build_update(table: str, values: Mapping[str, Any],
                 wheres: Mapping[str, Any]) -> Optional[Statement]:
    """None when either map is empty: an unconditional UPDATE is never built."""
    if not values or not wheres:
        return None
    parts: list = [f"UPDATE {table} SET "]
    parts += _assignments(values, ",", null_as_is=False)
    parts += where_parts(wheres)
    return Statement(tuple(parts))


def build_delete(table: str, wheres: Mapping[str, Any]) -> Optional[Statement]:
    """None for an empty where map: DELETE without a predicate is never built."""
    if not wheres:
        return None
    parts: list = [f"DELETE FROM {table}"]
    parts += where_parts(wheres)
    return Statement(tuple(parts))
