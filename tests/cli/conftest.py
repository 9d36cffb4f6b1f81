"""Shared fixtures for CLI tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from typer.testing import CliRunner

from sqldoc.cli import app
from sqldoc.engine import connect
from sqldoc.table import Table

# Reuse the documents from the main conftest
from tests.conftest import JEDI

if TYPE_CHECKING:
    from click.testing import Result


@pytest.fixture
def runner():
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def cli_db(tmp_path, monkeypatch):
    """A temp DB path, with sqldoc environment variables cleared."""
    for var in ("SQLDOC_DB", "SQLDOC_CONFIG", "SQLDOC_ENCODING", "SQLDOC_JOURNAL_MODE"):
        monkeypatch.delenv(var, raising=False)
    return str(tmp_path / "cli_test.db")


@pytest.fixture
def seeded_db(cli_db):
    """Create a DB with a jedi table holding the JEDI documents."""
    conn = connect(cli_db)
    Table(conn, "jedi").insert_many([dict(d) for d in JEDI])
    conn.close()
    return cli_db


def invoke(runner: CliRunner, args: list[str], db_path: str | None = None) -> "Result":
    """Invoke CLI with proper state setup."""
    if db_path:
        # Inject --db before subcommand
        args = ["--db", db_path] + args
    result = runner.invoke(app, args, catch_exceptions=False)
    return result
