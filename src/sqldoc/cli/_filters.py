"""CLI filter parsing: option values to conditions and fragments."""

from __future__ import annotations

import json
import shlex
from typing import Any

from sqldoc.filters import (
    Comparison,
    Condition,
    Logical,
    compile_condition,
    desc,
    field,
    limit,
    order_by,
)
from sqldoc.fragments import Fragment, FragmentBuilder, sql

# Map CLI operator tokens to condition operators
_OP_MAP: dict[str, str] = {
    "eq": "==",
    "ne": "!=",
    "gt": ">",
    "gte": ">=",
    "lt": "<",
    "lte": "<=",
    "in": "IN",
    "like": "LIKE",
    "is_null": "IS_NULL",
    "not_null": "IS_NOT_NULL",
}

_NO_VALUE_OPS = ("IS_NULL", "IS_NOT_NULL")


def parse_filter_arg(raw: str) -> tuple[str, str, str]:
    """Split one ``--filter`` value into (PATH, OP, VALUE_JSON).

    Only ``is_null`` and ``not_null`` may omit the value.
    """
    tokens = shlex.split(raw)
    if len(tokens) == 2:
        if _OP_MAP.get(tokens[1]) not in _NO_VALUE_OPS:
            raise ValueError(f"Invalid filter '{raw}': operator '{tokens[1]}' needs a VALUE_JSON")
        return tokens[0], tokens[1], "null"
    if len(tokens) != 3:
        raise ValueError(f"Invalid filter '{raw}': expected 'PATH OP VALUE_JSON'")
    return tokens[0], tokens[1], tokens[2]


def parse_cli_filters(triples: list[tuple[str, str, str]]) -> Condition | None:
    """Parse (PATH, OP, VALUE_JSON) triples into a condition.

    Multiple filters are AND-combined. Paths may be written with or without
    the leading ``$``.
    """
    if not triples:
        return None

    exprs: list[Condition] = []
    for path, op_token, value_json in triples:
        op = _OP_MAP.get(op_token)
        if op is None:
            raise ValueError(
                f"Unknown filter operator '{op_token}'. "
                f"Valid operators: {', '.join(sorted(_OP_MAP.keys()))}"
            )
        ref = field(path.removeprefix("$"))

        value: Any = None
        if op not in _NO_VALUE_OPS:
            value = json.loads(value_json)
            if op == "IN" and not isinstance(value, list):
                raise ValueError(f"Operator 'in' needs a JSON array, got {value_json}")
        exprs.append(Comparison(ref.path, op, value))

    if len(exprs) == 1:
        return exprs[0]
    return Logical(op="AND", children=exprs)


def build_fragments(
    *,
    where_sql: str | None = None,
    where_args: list[str] | None = None,
    filters: list[str] | None = None,
    id: str | None = None,
    order: str | None = None,
    descending: bool = False,
    max_rows: int | None = None,
) -> list[Fragment]:
    """Turn the shared query options of document commands into fragments.

    ``--where`` takes a ``$path`` condition with ``?`` holes filled from the
    JSON-decoded ``--arg`` values; ``--filter`` triples and ``--id`` are
    AND-combined with it.
    """
    conds: list[Fragment] = []
    if where_sql:
        values = [json.loads(a) for a in where_args or []]
        conds.append(sql(where_sql, *values))
    elif where_args:
        raise ValueError("--arg requires --where")

    cond = parse_cli_filters([parse_filter_arg(f) for f in filters or []])
    if cond is not None:
        conds.append(compile_condition(cond))
    if id is not None:
        conds.append(sql("$id = ?", id))

    frags: list[Fragment] = []
    if conds:
        b = FragmentBuilder().text("where ")
        for i, c in enumerate(conds):
            if i:
                b.text(" AND ")
            b.text("(").fragment(c).text(")")
        frags.append(b.build())
    if order:
        key = order.removeprefix("$")
        frags.append(order_by(desc(key) if descending else key))
    if max_rows is not None:
        frags.append(limit(max_rows))
    return frags
