"""Table: JSON documents stored in a single SQLite column."""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Iterable, Iterator

from sqldoc import ddl
from sqldoc.config import SqldocConfig
from sqldoc.documents import Document, decode_document, encode_document, ensure_id
from sqldoc.engine import query_plan, resolve_encoding
from sqldoc.errors import CompositionError
from sqldoc.fragments import Fragment, Statement, query_args, sql
from sqldoc.paths import DATA_COLUMN, to_data

logger = logging.getLogger(__name__)


def _fragments(sqls: tuple[Any, ...]) -> tuple[Fragment, ...]:
    for s in sqls:
        if not isinstance(s, Fragment):
            raise CompositionError(
                f"Table operations take Fragment arguments, got {type(s).__name__}; "
                "build one with sql() or where()"
            )
    return sqls


class Table:
    """Access to a SQLite table storing JSON documents.

    Constructing a Table creates the table and a unique index on ``$id`` if
    they do not exist yet. The connection is borrowed: the Table never closes
    or commits it.
    """

    def __init__(
        self, conn: sqlite3.Connection, name: str, *, config: SqldocConfig | None = None
    ) -> None:
        self._conn = conn
        self._name = name
        self._config = config or SqldocConfig()
        self._encoding = resolve_encoding(self._config)
        self._encode_fn = ddl.encode_function(self._encoding)
        self._patch_fn = ddl.patch_function(self._encoding)

        conn.execute(ddl.create_table(name, self._encoding))
        conn.execute(ddl.create_index(name, to_data("$id"), unique=True))
        logger.debug("provisioned table %s (encoding=%s)", name, self._encoding)

    @property
    def conn(self) -> sqlite3.Connection:
        return self._conn

    db = conn

    @property
    def name(self) -> str:
        return self._name

    table = name

    @property
    def encoding(self) -> str:
        return self._encoding

    # --- Statement helpers ----------------------------------------------------------

    def _select(self, sqls: tuple[Any, ...]) -> Statement:
        return query_args(f"select json({DATA_COLUMN}) from", self._name, *_fragments(sqls))

    def _run(self, stmt: Statement) -> sqlite3.Cursor:
        logger.debug("execute %s [%d args]", stmt.text, len(stmt.args))
        return self._conn.execute(stmt.text, stmt.args)

    # --- Writes ---------------------------------------------------------------------

    def insert(self, doc: Document) -> Document:
        """Store ``doc`` and return it with ``id`` populated.

        An existing ``id`` is kept as is; a duplicate id fails with the engine's
        ``sqlite3.IntegrityError``.
        """
        doc = ensure_id(doc, self._config.id_factory)
        text = ddl.insert_into(self._name, self._encoding)
        logger.debug("execute %s [1 args]", text)
        self._conn.execute(text, (encode_document(doc),))
        return doc

    def insert_many(self, docs: Iterable[Document]) -> list[Document]:
        stored = [ensure_id(d, self._config.id_factory) for d in docs]
        text = ddl.insert_into(self._name, self._encoding)
        logger.debug("executemany %s [%d rows]", text, len(stored))
        self._conn.executemany(text, [(encode_document(d),) for d in stored])
        return stored

    def delete(self, *sqls: Fragment) -> None:
        self._run(query_args("delete from", self._name, *_fragments(sqls)))

    def patch(self, doc: Document, *sqls: Fragment) -> None:
        """Merge-patch ``doc`` into every matched document.

        ``None`` values remove keys; nested objects merge recursively.
        """
        self._run(
            query_args(
                "update",
                self._name,
                sql(
                    f"set {DATA_COLUMN} = {self._patch_fn}({DATA_COLUMN}, ?)",
                    encode_document(doc),
                ),
                *_fragments(sqls),
            )
        )

    def replace(self, doc: Document, *sqls: Fragment) -> None:
        """Overwrite every matched document with ``doc``."""
        self._run(
            query_args(
                "update",
                self._name,
                sql(f"set {DATA_COLUMN} = {self._encode_fn}(?)", encode_document(doc)),
                *_fragments(sqls),
            )
        )

    # --- Reads ----------------------------------------------------------------------

    def iter(self, *sqls: Fragment) -> Iterator[Document]:
        """Yield matching documents lazily from the cursor."""
        for (data,) in self._run(self._select(sqls)):
            yield decode_document(data)

    def all(self, *sqls: Fragment) -> list[Document]:
        return [decode_document(data) for (data,) in self._run(self._select(sqls)).fetchall()]

    def get(self, *sqls: Fragment) -> Document | None:
        docs = self.all(*sqls, sql("limit 1"))
        return docs[0] if docs else None

    def get_by_id(self, id: str) -> Document | None:
        return self.get(sql("where $id = ?", id))

    def count(self, *sqls: Fragment) -> int:
        stmt = query_args("select count(*) from", self._name, *_fragments(sqls))
        return int(self._run(stmt).fetchone()[0])

    # --- Indexes / diagnostics ------------------------------------------------------

    def create_index(self, expr: str, *, name: str | None = None, unique: bool = False) -> str:
        """Create an index over a ``$path`` expression; returns the DDL executed."""
        text = ddl.create_index(self._name, to_data(expr), name=name, unique=unique)
        logger.debug("execute %s", text)
        self._conn.execute(text)
        return text

    def explain(self, *sqls: Fragment) -> list[str]:
        """Return the query plan details for the select built from ``sqls``."""
        text, args = self._select(sqls)
        return query_plan(self._conn, text, args)

    def __repr__(self) -> str:
        return f"Table({self._name!r}, encoding={self._encoding!r})"
