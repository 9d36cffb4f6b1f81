"""CLI helpers for config resolution and table construction."""

from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from typing import Iterator

import typer

from sqldoc.cache import default_cache
from sqldoc.cli import _exitcodes as ec
from sqldoc.cli._output import print_error
from sqldoc.config import SqldocConfig, load_config
from sqldoc.engine import connect, list_tables
from sqldoc.errors import ConfigError
from sqldoc.table import Table


def resolve_config() -> SqldocConfig:
    """Build config from the --config file (if any) overlaid with environment."""
    from sqldoc.cli import state

    base = load_config(state.config) if state.config else SqldocConfig()
    config = SqldocConfig.from_env(base)
    default_cache.resize(config.cache_maxsize)
    return config


def open_connection(*, must_exist: bool = False, inspect: bool = False) -> sqlite3.Connection:
    """Open the database selected by --db.

    ``inspect`` leaves the journal mode of an existing file unchanged.
    """
    from sqldoc.cli import state

    if must_exist and state.db != ":memory:" and not os.path.exists(state.db):
        raise FileNotFoundError(f"Database not found: {state.db}")
    return connect(state.db, resolve_config(), set_journal_mode=not inspect)


@contextmanager
def table_session(table_name: str, *, must_exist: bool) -> Iterator[Table]:
    """Open the selected database and table, mapping failures to exit codes.

    With ``must_exist`` a missing database file or table exits instead of
    being created.
    """
    try:
        conn = open_connection(must_exist=must_exist)
    except FileNotFoundError as e:
        print_error(str(e))
        raise typer.Exit(ec.DATABASE_ERROR)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(ec.USAGE_ERROR)
    except sqlite3.Error as e:
        print_error(f"Cannot open database: {e}")
        raise typer.Exit(ec.DATABASE_ERROR)
    try:
        if must_exist and table_name not in list_tables(conn):
            print_error(f"Table '{table_name}' not found")
            raise typer.Exit(ec.NOT_FOUND)
        yield Table(conn, table_name, config=resolve_config())
    except typer.Exit:
        raise
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(ec.USAGE_ERROR)
    except sqlite3.Error as e:
        print_error(str(e))
        raise typer.Exit(ec.DATABASE_ERROR)
    except ValueError as e:
        # bad JSON, bad filters and composition errors
        print_error(str(e))
        raise typer.Exit(ec.USAGE_ERROR)
    except OSError as e:
        print_error(str(e))
        raise typer.Exit(ec.GENERAL_ERROR)
    finally:
        conn.close()
