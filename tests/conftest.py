"""Shared test fixtures for sqldoc tests."""

from __future__ import annotations

import sqlite3

import pytest

from sqldoc.config import SqldocConfig
from sqldoc.engine import supports_jsonb
from sqldoc.table import Table

# --- Test documents ---

JEDI = [
    {"id": "grogu", "name": "grogu", "age": 900},
    {"id": "luke", "name": "luke", "age": 42},
    {"id": "leia", "name": "leia", "age": 42},
    {"id": "rey", "name": "rey", "age": 50},
    {"id": "finn", "name": "finn", "age": 32},
]


def names(docs: list[dict]) -> set[str]:
    return {d["name"] for d in docs}


# --- Fixtures ---


@pytest.fixture
def conn():
    """An in-memory SQLite connection."""
    c = sqlite3.connect(":memory:")
    yield c
    c.close()


@pytest.fixture(params=["jsonb", "json"])
def encoding(request):
    """Run table tests against both document encodings."""
    if request.param == "jsonb" and not supports_jsonb():
        pytest.skip("linked SQLite has no JSONB support")
    return request.param


@pytest.fixture
def jedi(conn, encoding):
    """An empty document table."""
    return Table(conn, "jedi", config=SqldocConfig(encoding=encoding))


@pytest.fixture
def seeded(jedi):
    """The jedi table with the five JEDI documents."""
    jedi.insert_many([dict(d) for d in JEDI])
    return jedi
