"""sqldoc index: create and list expression indexes on document tables."""

from __future__ import annotations

from typing import Optional

import typer

from sqldoc.cli._output import print_object, print_table
from sqldoc.cli._storage import table_session
from sqldoc.engine import list_indexes

app = typer.Typer(no_args_is_help=True)


@app.command(name="create")
def create_index_cmd(
    table: str = typer.Argument(..., help="Table name"),
    expr: str = typer.Argument(..., help="Indexed expression, e.g. '$age' or 'lower($name)'"),
    name: Optional[str] = typer.Option(None, "--name", help="Index name (derived if omitted)"),
    unique: bool = typer.Option(False, "--unique", help="Create a unique index"),
) -> None:
    """Create an index over a document expression."""
    from sqldoc.cli import state

    with table_session(table, must_exist=True) as t:
        ddl = t.create_index(expr, name=name, unique=unique)
        print_object({"table": table, "sql": ddl}, json_mode=state.json_output)


@app.command(name="list")
def list_indexes_cmd(
    table: str = typer.Argument(..., help="Table name"),
) -> None:
    """List indexes on a table."""
    from sqldoc.cli import state

    with table_session(table, must_exist=True) as t:
        indexes = list_indexes(t.conn, table)
        if not indexes and not state.json_output:
            print(f"No indexes on '{table}'")
            return
        rows = [[i["name"], i["unique"], i["sql"]] for i in indexes]
        print_table(["name", "unique", "sql"], rows, json_mode=state.json_output)
