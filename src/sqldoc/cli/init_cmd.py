"""sqldoc init: provision a document table and its indexes."""

from __future__ import annotations

from typing import Optional

import typer

from sqldoc.cli._output import print_object
from sqldoc.cli._storage import table_session


def init_cmd(
    table: str = typer.Argument(..., help="Table name"),
    index: Optional[list[str]] = typer.Option(
        None, "--index", help="Expression to index, e.g. '$age' (repeatable)"
    ),
    unique_index: Optional[list[str]] = typer.Option(
        None, "--unique-index", help="Expression to index uniquely (repeatable)"
    ),
) -> None:
    """Create TABLE (and the unique $id index) if missing, plus extra indexes."""
    from sqldoc.cli import state

    with table_session(table, must_exist=False) as t:
        created = [t.create_index(expr) for expr in index or []]
        created += [t.create_index(expr, unique=True) for expr in unique_index or []]
        data = {
            "db_path": state.db,
            "table": t.name,
            "encoding": t.encoding,
            "indexes": created,
            "status": "initialized",
        }
        print_object(data, json_mode=state.json_output)
