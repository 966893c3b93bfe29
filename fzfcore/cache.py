"""Per-chunk cache of match results keyed by query string."""

from __future__ import annotations

import threading
from typing import Any, Optional, Sequence

from fzfcore.chunklist import QUERY_CACHE_MAX, Chunk


class ChunkCache:
    """Thread-safe map from (full chunk, query) to the results of that query."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._cache: dict[Chunk, dict[str, Sequence[Any]]] = {}

    def add(self, chunk: Chunk, key: str, results: Sequence[Any]) -> None:
        """Cache ``results`` unless the key is empty, the chunk not full or the list too long."""
        if not key or not chunk.is_full() or len(results) > QUERY_CACHE_MAX:
            return
        with self._lock:
            self._cache.setdefault(chunk, {})[key] = results

    def lookup(self, chunk: Chunk, key: str) -> Optional[Sequence[Any]]:
        """Return the results cached for exactly ``key``, or None."""
        if not key or not chunk.is_full():
            return None
        with self._lock:
            queries = self._cache.get(chunk)
            if queries is None:
                return None
            return queries.get(key)

    def search(self, chunk: Chunk, key: str) -> Optional[Sequence[Any]]:
        """Return the results cached for the longest prefix or suffix of ``key``, or None."""
        if not key or not chunk.is_full():
            return None
        with self._lock:
            queries = self._cache.get(chunk)
            if queries is None:
                return None
            for idx in range(1, len(key)):
                for part in (key[: len(key) - idx], key[idx:]):
                    if part in queries:
                        return queries[part]
        return None