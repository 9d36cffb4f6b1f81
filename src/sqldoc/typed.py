"""Typed access to a document table through pydantic models."""

from __future__ import annotations

import sqlite3
from typing import Any, Generic, Iterator, TypeVar

from pydantic import BaseModel

from sqldoc.config import SqldocConfig
from sqldoc.documents import ID_KEY, Document
from sqldoc.fragments import Fragment
from sqldoc.table import Table

M = TypeVar("M", bound=BaseModel)


class ModelTable(Generic[M]):
    """A Table whose documents are validated into ``model`` on the way out.

    The model should declare ``id: str | None = None`` so stored ids round-trip.
    Writes dump the model in JSON mode; reads use ``model_validate``.

    Usage:
        jedi = ModelTable(conn, "jedi", Jedi)
        yoda = jedi.insert(Jedi(name="yoda", age=900))
        jedi.all(where(field("age") > 42))
    """

    def __init__(
        self,
        conn: sqlite3.Connection,
        name: str,
        model: type[M],
        *,
        config: SqldocConfig | None = None,
    ) -> None:
        self.model = model
        self.table = Table(conn, name, config=config)

    def _dump(self, obj: M) -> Document:
        doc = obj.model_dump(mode="json")
        if doc.get(ID_KEY) is None:
            doc.pop(ID_KEY, None)
        return doc

    def _load(self, doc: Document | None) -> M | None:
        if doc is None:
            return None
        return self.model.model_validate(doc)

    def insert(self, obj: M) -> M:
        return self.model.model_validate(self.table.insert(self._dump(obj)))

    def insert_many(self, objs: list[M]) -> list[M]:
        stored = self.table.insert_many(self._dump(o) for o in objs)
        return [self.model.model_validate(d) for d in stored]

    def all(self, *sqls: Fragment) -> list[M]:
        return [self.model.model_validate(d) for d in self.table.all(*sqls)]

    def iter(self, *sqls: Fragment) -> Iterator[M]:
        for d in self.table.iter(*sqls):
            yield self.model.model_validate(d)

    def get(self, *sqls: Fragment) -> M | None:
        return self._load(self.table.get(*sqls))

    def get_by_id(self, id: str) -> M | None:
        return self._load(self.table.get_by_id(id))

    def count(self, *sqls: Fragment) -> int:
        return self.table.count(*sqls)

    def patch(self, partial: M | dict[str, Any], *sqls: Fragment) -> None:
        """Merge-patch the fields explicitly set on ``partial``."""
        if isinstance(partial, BaseModel):
            doc = partial.model_dump(mode="json", exclude_unset=True)
        else:
            doc = dict(partial)
        self.table.patch(doc, *sqls)

    def replace(self, obj: M, *sqls: Fragment) -> None:
        self.table.replace(self._dump(obj), *sqls)

    def delete(self, *sqls: Fragment) -> None:
        self.table.delete(*sqls)
