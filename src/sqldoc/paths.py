"""Document path shorthand: ``$field`` and ``$nested.field``.

``to_data("where $age > ?")`` becomes ``where data->>'$.age' > ?``. The
rewrite is lexical. Single-quoted SQL string literals are copied through
unchanged, so ``'$name'`` inside a literal stays as written and output of
``to_data`` can be translated again without change.
"""

from __future__ import annotations

import re
from typing import Sequence

from sqldoc.cache import memoize

DATA_COLUMN = "data"

_SHORTHAND_RE = re.compile(r"'(?:[^']|'')*'|\$([A-Za-z_][A-Za-z_.]*)")


def extract_expr(path: str) -> str:
    """Return the SQLite extraction expression for a dotted document path."""
    return f"{DATA_COLUMN}->>'$.{path}'"


def _replace(match: re.Match[str]) -> str:
    path = match.group(1)
    if path is None:
        return match.group(0)
    return extract_expr(path)


@memoize
def to_data(expr: str) -> str:
    """Rewrite every ``$path`` token in ``expr`` into a JSON extraction."""
    return _SHORTHAND_RE.sub(_replace, expr)


@memoize
def translate_parts(parts: tuple[str, ...]) -> tuple[str, ...]:
    """Translate every literal segment of a template."""
    return tuple(to_data(p) for p in parts)


def path_for(path: str | Sequence[str]) -> str:
    """Build an extraction expression from ``"a.b"`` or ``["a", "b"]``."""
    if not isinstance(path, str):
        path = ".".join(path)
    return extract_expr(path)
