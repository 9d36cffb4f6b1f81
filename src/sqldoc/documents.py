"""Document values: JSON types, serialization, ids and merge-patch."""

from __future__ import annotations

import copy
import json
from typing import Any, Callable, Dict, List, Union

from uuid6 import uuid7

JSONScalar = Union[None, bool, int, float, str]
JSONValue = Union[JSONScalar, List["JSONValue"], Dict[str, "JSONValue"]]
Document = Dict[str, JSONValue]

ID_KEY = "id"


def new_id() -> str:
    """Return a new UUIDv7 string; later ids sort after earlier ones."""
    return str(uuid7())


def ensure_id(doc: Document, id_factory: Callable[[], str] = new_id) -> Document:
    """Return ``doc`` if it has an id, otherwise a copy with a fresh one."""
    if doc.get(ID_KEY):
        return doc
    return {**doc, ID_KEY: id_factory()}


def encode_document(doc: Any) -> str:
    """Serialize a document (or partial document) to compact JSON text."""
    return json.dumps(doc, separators=(",", ":"), allow_nan=False)


def decode_document(text: str | bytes) -> Document:
    return json.loads(text)


def merge_patch(target: JSONValue, patch: JSONValue) -> JSONValue:
    """Apply an RFC 7396 merge patch and return the merged value.

    Objects merge key by key, a ``None`` value removes the key, and any
    non-object patch replaces the target outright. Neither input is mutated.
    """
    if not isinstance(patch, dict):
        return copy.deepcopy(patch)
    result: dict[str, Any] = dict(target) if isinstance(target, dict) else {}
    for key, value in patch.items():
        if value is None:
            result.pop(key, None)
        else:
            result[key] = merge_patch(result.get(key), value)
    return result
