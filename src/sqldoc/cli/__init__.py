"""sqldoc CLI: operator console for inspecting and editing document tables."""

from __future__ import annotations

import logging
from typing import Optional

import typer

from sqldoc.cli import docs, index, info, init_cmd

app = typer.Typer(
    name="sqldoc",
    help="sqldoc CLI: inspect and edit JSON document tables in SQLite.",
    no_args_is_help=True,
)


class _State:
    """Global CLI state shared across subcommands."""

    db: str = "sqldoc.db"
    config: str | None = None
    json_output: bool = False


state = _State()


def _version_callback(value: bool) -> None:
    if value:
        try:
            from importlib.metadata import version

            v = version("sqldoc")
        except Exception:
            v = "unknown"
        print(f"sqldoc {v}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    db: Optional[str] = typer.Option(
        None,
        "--db",
        envvar="SQLDOC_DB",
        help="SQLite database file path (default: sqldoc.db)",
    ),
    config: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        envvar="SQLDOC_CONFIG",
        help="YAML config file path",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output when supported"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log executed statements"),
    version: bool = typer.Option(
        False, "--version", help="Show version", is_eager=True, callback=_version_callback
    ),
) -> None:
    """Global options for all sqldoc commands."""
    state.db = db or "sqldoc.db"
    state.config = config
    state.json_output = json_output
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    if ctx.invoked_subcommand is None and not version:
        print(ctx.get_help())
        raise typer.Exit()


# Register subcommand groups
app.add_typer(index.app, name="index", help="Create and list document indexes")

# Register top-level commands
app.command(name="init")(init_cmd.init_cmd)
app.command(name="info")(info.info_cmd)
app.command(name="insert")(docs.insert_cmd)
app.command(name="get")(docs.get_cmd)
app.command(name="find")(docs.find_cmd)
app.command(name="count")(docs.count_cmd)
app.command(name="delete")(docs.delete_cmd)
app.command(name="patch")(docs.patch_cmd)
app.command(name="replace")(docs.replace_cmd)
app.command(name="explain")(docs.explain_cmd)


def main() -> None:
    """Entry point for the sqldoc CLI."""
    app()
