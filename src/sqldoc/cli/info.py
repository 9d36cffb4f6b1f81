"""sqldoc info: show database status and document tables."""

from __future__ import annotations

import os
import sqlite3
from typing import Any

import typer

from sqldoc.cache import default_cache
from sqldoc.cli import _exitcodes as ec
from sqldoc.cli._output import print_error, print_object
from sqldoc.cli._storage import open_connection
from sqldoc.engine import list_indexes, list_tables, supports_jsonb
from sqldoc.errors import ConfigError


def info_cmd(
    stats: bool = typer.Option(False, "--stats", help="Show document counts per table"),
) -> None:
    """Show database status, engine capabilities and tables."""
    from sqldoc.cli import state

    json_mode = state.json_output
    try:
        conn = open_connection(must_exist=True, inspect=True)
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
        tables = list_tables(conn)
        data: dict[str, Any] = {
            "db_path": state.db,
            "sqlite_version": sqlite3.sqlite_version,
            "jsonb_supported": supports_jsonb(),
            "tables": tables,
        }
        if os.path.exists(state.db):
            data["file_size_bytes"] = os.path.getsize(state.db)
        if stats:
            data["document_counts"] = {
                t: int(conn.execute(f'SELECT count(*) FROM "{t}"').fetchone()[0]) for t in tables
            }
            data["index_counts"] = {t: len(list_indexes(conn, t)) for t in tables}
            cache = default_cache.cache_info()
            data["memo_cache"] = {"hits": cache.hits, "misses": cache.misses, "size": cache.size}

        if json_mode:
            print_object(data, json_mode=True)
        else:
            print(f"Database: {data['db_path']}")
            jsonb = "yes" if data["jsonb_supported"] else "no"
            print(f"SQLite: {data['sqlite_version']} (jsonb: {jsonb})")
            print(f"Tables: {', '.join(tables) if tables else '(none)'}")
            if stats:
                for t in tables:
                    print(
                        f"  {t}: {data['document_counts'][t]} documents, "
                        f"{data['index_counts'][t]} indexes"
                    )
    except sqlite3.Error as e:
        print_error(str(e))
        raise typer.Exit(ec.DATABASE_ERROR)
    finally:
        conn.close()
