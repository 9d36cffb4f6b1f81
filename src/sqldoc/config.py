"""Configuration for sqldoc tables and connections."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Callable

import yaml

from sqldoc.documents import new_id
from sqldoc.errors import ConfigError

ENCODING_CHOICES = ("auto", "jsonb", "json")
JOURNAL_MODES = ("wal", "delete", "truncate", "persist", "memory", "off")

# file/env keys that map onto SqldocConfig fields
_FILE_KEYS = ("encoding", "journal_mode", "busy_timeout_ms", "cache_maxsize")


@dataclass
class SqldocConfig:
    """Configuration for document tables.

    ``encoding`` picks how documents are stored: ``jsonb`` (SQLite 3.45+),
    ``json`` text, or ``auto`` to use JSONB whenever the engine supports it.
    """

    encoding: str = "auto"
    id_factory: Callable[[], str] = field(default=new_id, repr=False)
    journal_mode: str = "wal"
    busy_timeout_ms: int = 5000
    cache_maxsize: int | None = None

    def __post_init__(self) -> None:
        for key in ("encoding", "journal_mode"):
            value = getattr(self, key)
            if not isinstance(value, str):
                raise ConfigError(key, f"expected a string, got {type(value).__name__}")
        # bool is an int subclass but never a valid count
        if not isinstance(self.busy_timeout_ms, int) or isinstance(self.busy_timeout_ms, bool):
            raise ConfigError(
                "busy_timeout_ms", f"expected an integer, got {self.busy_timeout_ms!r}"
            )
        if self.cache_maxsize is not None and (
            not isinstance(self.cache_maxsize, int) or isinstance(self.cache_maxsize, bool)
        ):
            raise ConfigError(
                "cache_maxsize", f"expected an integer or null, got {self.cache_maxsize!r}"
            )
        if not callable(self.id_factory):
            raise ConfigError("id_factory", "must be a zero-argument callable")
        if self.encoding not in ENCODING_CHOICES:
            raise ConfigError(
                "encoding", f"expected one of {ENCODING_CHOICES}, got {self.encoding!r}"
            )
        if self.journal_mode.lower() not in JOURNAL_MODES:
            raise ConfigError(
                "journal_mode", f"expected one of {JOURNAL_MODES}, got {self.journal_mode!r}"
            )
        if self.busy_timeout_ms < 0:
            raise ConfigError("busy_timeout_ms", "must not be negative")
        if self.cache_maxsize is not None and self.cache_maxsize < 1:
            raise ConfigError("cache_maxsize", "must be a positive integer or null")

    @classmethod
    def from_env(cls, base: SqldocConfig | None = None) -> SqldocConfig:
        """Overlay ``SQLDOC_*`` environment variables onto ``base``."""
        base = base or cls()
        overrides: dict[str, Any] = {}
        encoding = os.getenv("SQLDOC_ENCODING")
        if encoding:
            overrides["encoding"] = encoding.lower()
        journal_mode = os.getenv("SQLDOC_JOURNAL_MODE")
        if journal_mode:
            overrides["journal_mode"] = journal_mode.lower()
        busy = os.getenv("SQLDOC_BUSY_TIMEOUT_MS")
        if busy:
            try:
                overrides["busy_timeout_ms"] = int(busy)
            except ValueError:
                raise ConfigError("busy_timeout_ms", f"not an integer: {busy!r}") from None
        return replace(base, **overrides)


def load_config(path: str | os.PathLike[str]) -> SqldocConfig:
    """Load a YAML config file.

    The file holds a mapping with any of ``encoding``, ``journal_mode``,
    ``busy_timeout_ms`` and ``cache_maxsize``; unknown keys are rejected.
    """
    p = Path(path)
    if not p.exists():
        raise ConfigError("config", f"file not found: {p}")
    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError("config", f"invalid YAML in {p}: {e}") from e
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("config", f"expected a mapping in {p}, got {type(data).__name__}")

    unknown = sorted(set(data) - set(_FILE_KEYS))
    if unknown:
        raise ConfigError("config", f"unknown keys in {p}: {unknown}")

    known = {f.name for f in fields(SqldocConfig)}
    return SqldocConfig(**{k: v for k, v in data.items() if k in known})
