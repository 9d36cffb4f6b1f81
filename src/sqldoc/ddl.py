"""DDL and fixed statement text for document tables."""

from __future__ import annotations

import re

from sqldoc.cache import memoize
from sqldoc.paths import DATA_COLUMN

_NON_LETTERS_RE = re.compile(r"[^a-zA-Z]+")

# encoding -> (column type, encode function, merge-patch function)
ENCODINGS: dict[str, tuple[str, str, str]] = {
    "jsonb": ("blob", "jsonb", "jsonb_patch"),
    "json": ("text", "json", "json_patch"),
}


def _encoding(encoding: str) -> tuple[str, str, str]:
    try:
        return ENCODINGS[encoding]
    except KeyError:
        raise ValueError(f"Unknown document encoding '{encoding}'") from None


@memoize
def create_table(name: str, encoding: str = "jsonb") -> str:
    """SQL to create a table that stores JSON documents in a data column."""
    column_type = _encoding(encoding)[0]
    return f"create table if not exists {name} ({DATA_COLUMN} {column_type})"


@memoize
def expr_to_name(expr: str) -> str:
    return _NON_LETTERS_RE.sub("_", expr).removesuffix("_")


@memoize
def create_index(table: str, expr: str, *, name: str | None = None, unique: bool = False) -> str:
    """SQL to create an index over ``expr``.

    Without an explicit name the index is called ``<table>_<expr_to_name(expr)>``,
    so the same expression always maps to the same index.
    """
    index_name = name or f"{table}_{expr_to_name(expr)}"
    return "".join(
        [
            "create ",
            "unique " if unique else "",
            "index if not exists ",
            index_name,
            " on ",
            table,
            " (",
            expr,
            ")",
        ]
    )


@memoize
def insert_into(table: str, encoding: str = "jsonb") -> str:
    encode_fn = _encoding(encoding)[1]
    return f"insert into {table} ({DATA_COLUMN}) values ({encode_fn}(?))"


def encode_function(encoding: str) -> str:
    return _encoding(encoding)[1]


def patch_function(encoding: str) -> str:
    return _encoding(encoding)[2]
