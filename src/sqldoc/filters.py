"""Condition expressions and clause helpers that compile to fragments.

Usage: table.all(where((field("age") > 42) & field("name").startswith("r")), limit(10))
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field as dc_field
from typing import Any

from sqldoc.fragments import Fragment, FragmentBuilder

# Segments are limited to what the $path shorthand can express.
_SEGMENT_RE = re.compile(r"^[A-Za-z_]+$")


def _validate_segment(segment: str) -> None:
    """Validate a single path segment (identifier)."""
    if not _SEGMENT_RE.match(segment):
        raise ValueError(f"Invalid path segment '{segment}': must match [A-Za-z_]+")


def _validate_path(path: str) -> None:
    """Validate a dotted path (one or more segments)."""
    if not path:
        raise ValueError("Path must not be empty")
    for segment in path.split("."):
        _validate_segment(segment)


NULL_EQ_ERROR = "Use .is_null() instead of == None in sqldoc conditions."
NULL_NE_ERROR = "Use .is_not_null() instead of != None in sqldoc conditions."

_SQL_OPS = {"==": "=", "!=": "!=", ">": ">", ">=": ">=", "<": "<", "<=": "<="}


class Condition:
    """Base class for condition expressions."""

    def __and__(self, other: Condition) -> Logical:
        return Logical(op="AND", children=[self, other])

    def __or__(self, other: Condition) -> Logical:
        return Logical(op="OR", children=[self, other])

    def __invert__(self) -> Logical:
        return Logical(op="NOT", children=[self])


@dataclass
class Comparison(Condition):
    """A comparison between a document path and a value."""

    path: str
    op: str  # "==", "!=", ">", ">=", "<", "<=", "LIKE", "IN", "IS_NULL", "IS_NOT_NULL"
    value: Any = None


@dataclass
class Logical(Condition):
    """A logical combination of conditions."""

    op: str  # "AND", "OR", "NOT"
    children: list[Condition] = dc_field(default_factory=list)


class FieldRef:
    """Reference to a document path; comparisons build Condition objects.

    Usage: field("address.city") == "Tatooine"
    """

    def __init__(self, path: str) -> None:
        _validate_path(path)
        self.path = path

    def __repr__(self) -> str:
        return f"FieldRef({self.path!r})"

    def __eq__(self, other: object) -> Comparison:  # type: ignore[override]
        if other is None:
            raise TypeError(NULL_EQ_ERROR)
        return Comparison(self.path, "==", other)

    def __ne__(self, other: object) -> Comparison:  # type: ignore[override]
        if other is None:
            raise TypeError(NULL_NE_ERROR)
        return Comparison(self.path, "!=", other)

    def __gt__(self, other: Any) -> Comparison:
        return Comparison(self.path, ">", other)

    def __ge__(self, other: Any) -> Comparison:
        return Comparison(self.path, ">=", other)

    def __lt__(self, other: Any) -> Comparison:
        return Comparison(self.path, "<", other)

    def __le__(self, other: Any) -> Comparison:
        return Comparison(self.path, "<=", other)

    def startswith(self, prefix: str) -> Comparison:
        return Comparison(self.path, "LIKE", f"{prefix}%")

    def endswith(self, suffix: str) -> Comparison:
        return Comparison(self.path, "LIKE", f"%{suffix}")

    def contains(self, substring: str) -> Comparison:
        return Comparison(self.path, "LIKE", f"%{substring}%")

    def in_(self, values: list[Any]) -> Comparison:
        return Comparison(self.path, "IN", list(values))

    def is_null(self) -> Comparison:
        return Comparison(self.path, "IS_NULL")

    def is_not_null(self) -> Comparison:
        return Comparison(self.path, "IS_NOT_NULL")

    def __getitem__(self, segment: str) -> FieldRef:
        """Navigate into a nested object by one segment."""
        _validate_segment(segment)
        return FieldRef(f"{self.path}.{segment}")


def field(path: str) -> FieldRef:
    """Create a reference to a document path for building conditions."""
    return FieldRef(path)


def _compile(expr: Condition, b: FragmentBuilder) -> None:
    if isinstance(expr, Comparison):
        col = f"${expr.path}"
        op = expr.op
        if op == "IS_NULL":
            b.text(f"{col} IS NULL")
        elif op == "IS_NOT_NULL":
            b.text(f"{col} IS NOT NULL")
        elif op == "IN":
            if not expr.value:
                # x IN () is never true
                b.text("0")
                return
            b.text(f"{col} IN (").values(expr.value).text(")")
        elif op == "LIKE":
            b.text(f"{col} LIKE ").value(expr.value)
        else:
            b.text(f"{col} {_SQL_OPS[op]} ").value(expr.value)
    elif isinstance(expr, Logical):
        if expr.op == "NOT":
            b.text("NOT (")
            _compile(expr.children[0], b)
            b.text(")")
        elif expr.op in ("AND", "OR"):
            b.text("(")
            for i, child in enumerate(expr.children):
                if i:
                    b.text(f" {expr.op} ")
                _compile(child, b)
            b.text(")")
        else:
            raise ValueError(f"Unknown logical operator: {expr.op}")
    else:
        raise ValueError(f"Unknown condition type: {type(expr)}")


def compile_condition(expr: Condition) -> Fragment:
    """Compile a Condition tree into a fragment (without the ``where`` keyword)."""
    b = FragmentBuilder()
    _compile(expr, b)
    return b.build()


def where(expr: Condition | Fragment) -> Fragment:
    """Prefix a condition or fragment with ``where``."""
    frag = expr if isinstance(expr, Fragment) else compile_condition(expr)
    return FragmentBuilder().text("where ").fragment(frag).build()


@dataclass(frozen=True)
class OrderKey:
    path: str
    descending: bool = False


def asc(path: str) -> OrderKey:
    _validate_path(path)
    return OrderKey(path)


def desc(path: str) -> OrderKey:
    _validate_path(path)
    return OrderKey(path, descending=True)


def order_by(*keys: str | OrderKey) -> Fragment:
    """Build ``order by`` over document paths; plain strings sort ascending."""
    if not keys:
        raise ValueError("order_by() needs at least one key")
    b = FragmentBuilder().text("order by ")
    for i, key in enumerate(keys):
        k = key if isinstance(key, OrderKey) else asc(key)
        if i:
            b.text(", ")
        b.text(f"${k.path}" + (" desc" if k.descending else ""))
    return b.build()


def limit(n: int, offset: int | None = None) -> Fragment:
    """Build ``limit ?`` (and ``offset ?``) with bound values."""
    b = FragmentBuilder().text("limit ").value(int(n))
    if offset is not None:
        b.text(" offset ").value(int(offset))
    return b.build()
