"""SQLite connection helpers and engine capability checks."""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Sequence

from sqldoc.config import SqldocConfig
from sqldoc.errors import ConfigError

logger = logging.getLogger(__name__)

JSONB_MIN_VERSION = (3, 45, 0)
JSON_ARROW_MIN_VERSION = (3, 38, 0)


def supports_jsonb(version: tuple[int, int, int] | None = None) -> bool:
    """Return True if the linked SQLite library has the JSONB functions."""
    return (version or sqlite3.sqlite_version_info) >= JSONB_MIN_VERSION


def resolve_encoding(config: SqldocConfig) -> str:
    """Map the configured encoding onto one the engine can execute."""
    if config.encoding == "auto":
        return "jsonb" if supports_jsonb() else "json"
    if config.encoding == "jsonb" and not supports_jsonb():
        raise ConfigError(
            "encoding",
            f"jsonb requires SQLite {'.'.join(map(str, JSONB_MIN_VERSION))}+, "
            f"linked version is {sqlite3.sqlite_version}",
        )
    return config.encoding


def connect(
    path: str, config: SqldocConfig | None = None, *, set_journal_mode: bool = True
) -> sqlite3.Connection:
    """Open a connection tuned for document tables.

    The connection runs in autocommit mode so each document operation is
    durable as soon as it returns. With ``set_journal_mode=False`` the file's
    journal mode is left as found, for read-only inspection.
    """
    config = config or SqldocConfig()
    if sqlite3.sqlite_version_info < JSON_ARROW_MIN_VERSION:
        logger.warning(
            "SQLite %s lacks the ->> operator; document queries will fail",
            sqlite3.sqlite_version,
        )
    conn = sqlite3.connect(path, isolation_level=None)
    if set_journal_mode and path != ":memory:":
        mode = conn.execute(f"PRAGMA journal_mode={config.journal_mode}").fetchone()[0]
        if str(mode).lower() != config.journal_mode.lower():
            logger.warning("journal_mode %s requested, engine kept %s", config.journal_mode, mode)
    conn.execute(f"PRAGMA busy_timeout={int(config.busy_timeout_ms)}")
    logger.debug("opened %s (sqlite %s)", path, sqlite3.sqlite_version)
    return conn


def query_plan(conn: sqlite3.Connection, text: str, args: Sequence[Any] = ()) -> list[str]:
    """Return the ``detail`` column of ``EXPLAIN QUERY PLAN`` for a statement."""
    rows = conn.execute(f"explain query plan {text}", list(args)).fetchall()
    return [str(r[3]) for r in rows]


def list_tables(conn: sqlite3.Connection) -> list[str]:
    rows = conn.execute(
        "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%' "
        "ORDER BY name"
    ).fetchall()
    return [str(r[0]) for r in rows]


def list_indexes(conn: sqlite3.Connection, table: str) -> list[dict[str, Any]]:
    """Return name, uniqueness and SQL for the indexes on ``table``."""
    rows = conn.execute(
        "SELECT name, sql FROM sqlite_master WHERE type = 'index' AND tbl_name = ? ORDER BY name",
        (table,),
    ).fetchall()
    out = []
    for name, ddl in rows:
        out.append(
            {
                "name": str(name),
                "unique": bool(ddl) and ddl.lower().startswith("create unique"),
                "sql": ddl,
            }
        )
    return out
