"""Process-local memoization of search pages and profile records.

Bounded LRU: reads refresh recency, writes past capacity evict the least
recently used key. Concurrent writers for the same key only duplicate work;
the last completed fetch wins.
"""

from __future__ import annotations

from collections import OrderedDict
from typing import Generic, TypeVar

from talentscout.settings import settings

V = TypeVar("V")


def search_page_cache_key(*, query: str, page: int) -> str:
    return f"users:{query}:page:{int(page)}"


def profile_cache_key(username: str) -> str:
    return f"profile:{username}"


class ResultCache(Generic[V]):
    def __init__(self, *, max_entries: int | None = None) -> None:
        configured = settings.result_cache_max_entries if max_entries is None else max_entries
        self._max_entries = max(int(configured), 1)
        self._entries: OrderedDict[str, V] = OrderedDict()

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def get(self, key: str) -> V | None:
        if key not in self._entries:
            return None
        self._entries.move_to_end(key)
        return self._entries[key]

    def put(self, key: str, value: V) -> None:
        self._entries[key] = value
        self._entries.move_to_end(key)
        while len(self._entries) > self._max_entries:
            self._entries.popitem(last=False)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
