"""Bounded answer cache keyed by normalized user text.

Eviction is FIFO by insertion order: get() never reorders entries, so a
frequently read answer still ages out once ``capacity`` newer answers have
been stored. In-memory and per instance; nothing survives the session.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from dataclasses import dataclass, field


def cache_key(clean_text: str) -> str:
    """Normalizes sanitized text into a cache key.

    Collapses runs of whitespace and casefolds, so "Find  PDFs" and
    "find pdfs" share an entry.
    """
    return " ".join(clean_text.split()).casefold()


@dataclass(frozen=True)
class CacheEntry:
    answer_text: str
    created_at: float = field(default_factory=time.time)


class ResponseCache:
    """Capacity-bounded key → answer store.

    Args:
        capacity: Maximum number of entries (at least 1).
    """

    def __init__(self, capacity: int = 50) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self._capacity = capacity
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()

    @property
    def capacity(self) -> int:
        return self._capacity

    def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        return entry.answer_text

    def get_entry(self, key: str) -> CacheEntry | None:
        return self._entries.get(key)

    def put(self, key: str, answer: str) -> None:
        """Stores an answer, evicting the oldest insertion when full.

        Re-putting an existing key replaces it and makes it the newest entry.
        """
        if key in self._entries:
            del self._entries[key]
        self._entries[key] = CacheEntry(answer_text=answer)
        while len(self._entries) > self._capacity:
            self._entries.popitem(last=False)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
