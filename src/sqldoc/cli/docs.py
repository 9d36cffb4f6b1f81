"""Document commands: insert, get, find, count, delete, patch, replace, explain."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import typer

from sqldoc.cli import _exitcodes as ec
from sqldoc.cli._filters import build_fragments
from sqldoc.cli._output import print_documents, print_error, print_object
from sqldoc.cli._storage import table_session
from sqldoc.documents import merge_patch
from sqldoc.fragments import Fragment

_WHERE_HELP = "Condition template using $path shorthand and ? holes"
_ARG_HELP = "JSON value for the next ? hole in --where (repeatable)"
_FILTER_HELP = "PATH OP VALUE_JSON, e.g. 'age gt 42' (repeatable)"


def _load_json(raw: str | None, file: str | None) -> Any:
    if file:
        return json.loads(Path(file).read_text(encoding="utf-8"))
    if raw is None:
        raise ValueError("Provide a JSON document argument or --file")
    return json.loads(raw)


def _object(value: Any, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"{what} must be a JSON object, got {type(value).__name__}")
    return value


def _selection(
    where_sql: str | None,
    where_args: list[str] | None,
    filters: list[str] | None,
    id: str | None,
    *,
    all_rows: bool,
) -> list[Fragment]:
    frags = build_fragments(where_sql=where_sql, where_args=where_args, filters=filters, id=id)
    if not frags and not all_rows:
        raise ValueError(
            "Refusing to touch every document without --all; add --id, --where or --filter"
        )
    return frags


def insert_cmd(
    table: str = typer.Argument(..., help="Table name"),
    doc: Optional[str] = typer.Argument(None, help="JSON object or array of objects"),
    file: Optional[str] = typer.Option(None, "--file", "-f", help="Read JSON from a file"),
) -> None:
    """Insert one document or an array of documents."""
    from sqldoc.cli import state

    with table_session(table, must_exist=False) as t:
        payload = _load_json(doc, file)
        if isinstance(payload, list):
            stored = t.insert_many([_object(d, "Each document") for d in payload])
        else:
            stored = [t.insert(_object(payload, "Document"))]
        print_documents(stored, json_mode=state.json_output)


def get_cmd(
    table: str = typer.Argument(..., help="Table name"),
    id: str = typer.Argument(..., help="Document id"),
) -> None:
    """Fetch one document by id."""
    from sqldoc.cli import state

    with table_session(table, must_exist=True) as t:
        found = t.get_by_id(id)
        if found is None:
            print_error(f"No document with id '{id}' in '{table}'")
            raise typer.Exit(ec.NOT_FOUND)
        print_documents([found], json_mode=state.json_output)


def find_cmd(
    table: str = typer.Argument(..., help="Table name"),
    where_sql: Optional[str] = typer.Option(None, "--where", help=_WHERE_HELP),
    where_args: Optional[list[str]] = typer.Option(None, "--arg", help=_ARG_HELP),
    filters: Optional[list[str]] = typer.Option(None, "--filter", help=_FILTER_HELP),
    order: Optional[str] = typer.Option(None, "--order-by", help="Document path to sort by"),
    descending: bool = typer.Option(False, "--desc", help="Sort descending"),
    max_rows: Optional[int] = typer.Option(None, "--limit", help="Max results"),
) -> None:
    """List documents matching the given conditions."""
    from sqldoc.cli import state

    with table_session(table, must_exist=True) as t:
        frags = build_fragments(
            where_sql=where_sql,
            where_args=where_args,
            filters=filters,
            order=order,
            descending=descending,
            max_rows=max_rows,
        )
        print_documents(t.all(*frags), json_mode=state.json_output)


def count_cmd(
    table: str = typer.Argument(..., help="Table name"),
    where_sql: Optional[str] = typer.Option(None, "--where", help=_WHERE_HELP),
    where_args: Optional[list[str]] = typer.Option(None, "--arg", help=_ARG_HELP),
    filters: Optional[list[str]] = typer.Option(None, "--filter", help=_FILTER_HELP),
) -> None:
    """Count documents matching the given conditions."""
    from sqldoc.cli import state

    with table_session(table, must_exist=True) as t:
        frags = build_fragments(where_sql=where_sql, where_args=where_args, filters=filters)
        n = t.count(*frags)
        if state.json_output:
            print_object({"table": table, "count": n}, json_mode=True)
        else:
            print(n)


def delete_cmd(
    table: str = typer.Argument(..., help="Table name"),
    id: Optional[str] = typer.Option(None, "--id", help="Document id"),
    where_sql: Optional[str] = typer.Option(None, "--where", help=_WHERE_HELP),
    where_args: Optional[list[str]] = typer.Option(None, "--arg", help=_ARG_HELP),
    filters: Optional[list[str]] = typer.Option(None, "--filter", help=_FILTER_HELP),
    all_rows: bool = typer.Option(False, "--all", help="Allow deleting every document"),
) -> None:
    """Delete matching documents."""
    from sqldoc.cli import state

    with table_session(table, must_exist=True) as t:
        frags = _selection(where_sql, where_args, filters, id, all_rows=all_rows)
        before = t.conn.total_changes
        t.delete(*frags)
        deleted = t.conn.total_changes - before
        print_object({"table": table, "deleted": deleted}, json_mode=state.json_output)


def patch_cmd(
    table: str = typer.Argument(..., help="Table name"),
    patch: str = typer.Argument(..., help="JSON merge patch object"),
    id: Optional[str] = typer.Option(None, "--id", help="Document id"),
    where_sql: Optional[str] = typer.Option(None, "--where", help=_WHERE_HELP),
    where_args: Optional[list[str]] = typer.Option(None, "--arg", help=_ARG_HELP),
    filters: Optional[list[str]] = typer.Option(None, "--filter", help=_FILTER_HELP),
    all_rows: bool = typer.Option(False, "--all", help="Allow patching every document"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show patched documents only"),
) -> None:
    """Merge-patch matching documents (null removes a key)."""
    from sqldoc.cli import state

    with table_session(table, must_exist=True) as t:
        doc = _object(json.loads(patch), "Patch")
        frags = _selection(where_sql, where_args, filters, id, all_rows=all_rows)
        if dry_run:
            preview = [merge_patch(d, doc) for d in t.all(*frags)]
            print_documents(preview, json_mode=state.json_output)
            return
        before = t.conn.total_changes
        t.patch(doc, *frags)
        patched = t.conn.total_changes - before
        print_object({"table": table, "patched": patched}, json_mode=state.json_output)


def replace_cmd(
    table: str = typer.Argument(..., help="Table name"),
    doc: str = typer.Argument(..., help="Replacement JSON object"),
    id: Optional[str] = typer.Option(None, "--id", help="Document id"),
    where_sql: Optional[str] = typer.Option(None, "--where", help=_WHERE_HELP),
    where_args: Optional[list[str]] = typer.Option(None, "--arg", help=_ARG_HELP),
    filters: Optional[list[str]] = typer.Option(None, "--filter", help=_FILTER_HELP),
    all_rows: bool = typer.Option(False, "--all", help="Allow replacing every document"),
) -> None:
    """Overwrite matching documents with DOC."""
    from sqldoc.cli import state

    with table_session(table, must_exist=True) as t:
        replacement = _object(json.loads(doc), "Document")
        frags = _selection(where_sql, where_args, filters, id, all_rows=all_rows)
        before = t.conn.total_changes
        t.replace(replacement, *frags)
        replaced = t.conn.total_changes - before
        print_object({"table": table, "replaced": replaced}, json_mode=state.json_output)


def explain_cmd(
    table: str = typer.Argument(..., help="Table name"),
    id: Optional[str] = typer.Option(None, "--id", help="Document id"),
    where_sql: Optional[str] = typer.Option(None, "--where", help=_WHERE_HELP),
    where_args: Optional[list[str]] = typer.Option(None, "--arg", help=_ARG_HELP),
    filters: Optional[list[str]] = typer.Option(None, "--filter", help=_FILTER_HELP),
) -> None:
    """Show the SQLite query plan for a find."""
    from sqldoc.cli import state

    with table_session(table, must_exist=True) as t:
        frags = build_fragments(where_sql=where_sql, where_args=where_args, filters=filters, id=id)
        plan = t.explain(*frags)
        if state.json_output:
            print_object({"table": table, "plan": plan}, json_mode=True)
        else:
            for line in plan:
                print(line)
