"""Memoization for the pure string-building functions on the query path.

Entries are keyed by ``(function tag, canonical argument string)``. Only pure
functions may be memoized: results are returned from the cache without calling
the function again.

Lookups are plain dictionary reads, which are safe to run concurrently with a
writer. Population and the hit/miss counters are updated under a lock.
"""

from __future__ import annotations

import functools
import json
import threading
from dataclasses import dataclass
from typing import Any, Callable, TypeVar

F = TypeVar("F", bound=Callable[..., Any])

_MISSING = object()


@dataclass(frozen=True)
class CacheInfo:
    """Snapshot of cache statistics."""

    hits: int
    misses: int
    size: int
    maxsize: int | None


def canonical_args(args: tuple[Any, ...], kwargs: dict[str, Any]) -> str:
    """Stringify call arguments so that equal inputs map to the same key."""
    return json.dumps([list(args), kwargs], sort_keys=True, separators=(",", ":"), default=repr)


class MemoCache:
    """Process-wide mapping of ``(tag, args)`` to cached results.

    ``maxsize=None`` keeps every entry. With a bound, the oldest entry is
    evicted first.
    """

    def __init__(self, maxsize: int | None = None) -> None:
        if maxsize is not None and maxsize < 1:
            raise ValueError("maxsize must be a positive integer or None")
        self.maxsize = maxsize
        self._entries: dict[tuple[str, str], Any] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get_or_compute(self, tag: str, key: str, compute: Callable[[], Any]) -> Any:
        value = self._entries.get((tag, key), _MISSING)
        if value is not _MISSING:
            with self._lock:
                self._hits += 1
            return value
        result = compute()
        with self._lock:
            self._misses += 1
            existing = self._entries.get((tag, key), _MISSING)
            if existing is not _MISSING:
                return existing
            if self.maxsize is not None and len(self._entries) >= self.maxsize:
                oldest = next(iter(self._entries))
                del self._entries[oldest]
            self._entries[(tag, key)] = result
        return result

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, entry: object) -> bool:
        return entry in self._entries

    def resize(self, maxsize: int | None) -> None:
        """Change the bound, evicting the oldest entries if needed."""
        if maxsize is not None and maxsize < 1:
            raise ValueError("maxsize must be a positive integer or None")
        with self._lock:
            self.maxsize = maxsize
            if maxsize is not None:
                while len(self._entries) > maxsize:
                    del self._entries[next(iter(self._entries))]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    def cache_info(self) -> CacheInfo:
        return CacheInfo(
            hits=self._hits, misses=self._misses, size=len(self._entries), maxsize=self.maxsize
        )


default_cache = MemoCache()


def memoize(fn: F | None = None, *, cache: MemoCache | None = None) -> Any:
    """Decorate a pure function so repeated calls reuse the first result.

    Usable bare (``@memoize``) or with an explicit cache
    (``@memoize(cache=my_cache)``).
    """

    def decorate(func: F) -> F:
        tag = f"{func.__module__}.{func.__qualname__}"

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            target = cache if cache is not None else default_cache
            return target.get_or_compute(
                tag, canonical_args(args, kwargs), lambda: func(*args, **kwargs)
            )

        wrapper.cache_tag = tag  # type: ignore[attr-defined]
        return wrapper  # type: ignore[return-value]

    if fn is not None:
        return decorate(fn)
    return decorate
