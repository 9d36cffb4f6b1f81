"""Structured error types for sqldoc.

Engine failures (``sqlite3.Error`` and its subclasses) are never wrapped: they
reach the caller exactly as the driver raised them.
"""

from __future__ import annotations


class SqldocError(Exception):
    """Base error for all sqldoc errors."""


class CompositionError(SqldocError, ValueError):
    """Raised when a query fragment or statement is malformed.

    This is a programming error: the number of template holes does not match
    the number of values, or something other than a fragment was passed where
    one is required.
    """


class ConfigError(SqldocError):
    """Raised when configuration values are invalid or unsupported."""

    def __init__(self, key: str, detail: str) -> None:
        self.key = key
        self.detail = detail
        super().__init__(f"Invalid configuration for '{key}': {detail}")
