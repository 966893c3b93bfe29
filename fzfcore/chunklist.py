"""Thread-safe list of fixed-size chunks of items, with immutable snapshots."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence

CHUNK_SIZE = 100
# Results of low-selectivity queries are not cached
QUERY_CACHE_MAX = CHUNK_SIZE // 5
MERGER_CACHE_MAX = 100_000
DEFAULT_HISTORY_MAX = 1000

ItemBuilder = Callable[[bytes], Optional[Any]]


@dataclass(eq=False)
class Chunk:
    """A block of at most CHUNK_SIZE items."""

    items: list[Any] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.items)

    def is_full(self) -> bool:
        """Return True if the chunk holds CHUNK_SIZE items."""
        return len(self.items) == CHUNK_SIZE


def count_items(chunks: Sequence[Chunk]) -> int:
    """Return the total number of items in a sequence of chunks."""
    if not chunks:
        return 0
    return CHUNK_SIZE * (len(chunks) - 1) + chunks[-1].count


class ChunkList:
    """Appends built items into chunks; the builder returns None to skip data."""

    def __init__(self, builder: ItemBuilder) -> None:
        self._builder = builder
        self._chunks: list[Chunk] = []
        self._lock = threading.Lock()

    @property
    def builder(self) -> ItemBuilder:
        return self._builder

    def push(self, data: bytes) -> bool:
        """Build an item from ``data`` and add it; return whether one was added."""
        with self._lock:
            if not self._chunks or self._chunks[-1].is_full():
                self._chunks.append(Chunk())
            item = self._builder(data)
            if item is None:
                return False
            self._chunks[-1].items.append(item)
            return True

    def clear(self) -> None:
        """Drop every chunk."""
        with self._lock:
            self._chunks = []

    def snapshot(self) -> tuple[list[Chunk], int]:
        """Return a copy of the chunks unaffected by later pushes, and the item count."""
        with self._lock:
            chunks = list(self._chunks)
            if chunks:
                chunks[-1] = Chunk(list(chunks[-1].items))
        return chunks, count_items(chunks)