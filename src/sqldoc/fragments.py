"""Parameterized SQL fragments and statement assembly.

A :class:`Fragment` is literal SQL text split around ``?`` holes plus the
values for those holes. Literal segments go through the path translator;
values are only ever bound by the driver, never written into the text.

    >>> text, args = query_args("select json(data) from", "jedi",
    ...                         sql("where $age > ?", 42), sql("limit ?", 2))
    >>> text
    "select json(data) from jedi where data->>'$.age' > ? limit ?"
    >>> args
    [42, 2]
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Sequence

from sqldoc.errors import CompositionError
from sqldoc.paths import translate_parts

PLACEHOLDER = "?"


@dataclass(frozen=True)
class Fragment:
    """Translated literal segments interleaved with positional values."""

    parts: tuple[str, ...]
    values: tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        if len(self.parts) != len(self.values) + 1:
            raise CompositionError(
                f"Fragment has {len(self.parts)} literal segments for "
                f"{len(self.values)} values; expected {len(self.values) + 1}"
            )
        for part in self.parts:
            if PLACEHOLDER in part:
                raise CompositionError(
                    f"Literal segment must not contain '{PLACEHOLDER}': {part!r}"
                )

    @classmethod
    def from_parts(cls, parts: Sequence[str], values: Sequence[Any] = ()) -> Fragment:
        """Build a fragment from untranslated segments and their values."""
        return cls(translate_parts(tuple(parts)), tuple(values))

    @property
    def text(self) -> str:
        return PLACEHOLDER.join(self.parts)


def sql(template: str, *values: Any) -> Fragment:
    """Compose a fragment from a ``?``-holed template and its values.

    Raises CompositionError when the number of holes differs from the number
    of values.
    """
    parts = template.split(PLACEHOLDER)
    if len(parts) != len(values) + 1:
        raise CompositionError(
            f"Template has {len(parts) - 1} placeholders but {len(values)} values were given: "
            f"{template!r}"
        )
    return Fragment.from_parts(parts, values)


class FragmentBuilder:
    """Fluent builder for fragments assembled piece by piece.

    Usage: FragmentBuilder().text("where $age > ").value(42).build()
    """

    def __init__(self) -> None:
        self._parts: list[str] = [""]
        self._values: list[Any] = []

    def text(self, literal: str) -> FragmentBuilder:
        if PLACEHOLDER in literal:
            raise CompositionError(f"Literal text must not contain '{PLACEHOLDER}': {literal!r}")
        self._parts[-1] += literal
        return self

    def value(self, v: Any) -> FragmentBuilder:
        self._values.append(v)
        self._parts.append("")
        return self

    def values(self, vs: Iterable[Any], sep: str = ", ") -> FragmentBuilder:
        for i, v in enumerate(vs):
            if i:
                self.text(sep)
            self.value(v)
        return self

    def fragment(self, frag: Fragment) -> FragmentBuilder:
        """Append an already-built fragment."""
        self._parts[-1] += frag.parts[0]
        for v, p in zip(frag.values, frag.parts[1:]):
            self._values.append(v)
            self._parts.append(p)
        return self

    def build(self) -> Fragment:
        return Fragment.from_parts(self._parts, self._values)


@dataclass(frozen=True)
class Statement:
    """Final statement text and its flattened positional arguments."""

    text: str
    args: list[Any] = field(default_factory=list)

    def __iter__(self) -> Iterator[Any]:
        yield self.text
        yield self.args


def query_args(*items: str | Fragment) -> Statement:
    """Join raw strings and fragments into one statement.

    Raw strings are emitted as-is and contribute no arguments. Arguments keep
    the left-to-right order of their placeholders.
    """
    texts: list[str] = []
    args: list[Any] = []
    for item in items:
        if isinstance(item, str):
            texts.append(item)
        elif isinstance(item, Fragment):
            texts.append(item.text)
            args.extend(item.values)
        else:
            raise CompositionError(
                f"Statement items must be str or Fragment, got {type(item).__name__}"
            )
    return Statement(" ".join(texts), args)
