"""In-memory collection store for tests and throwaway sessions."""

from __future__ import annotations

import copy
from typing import Any, Iterable


class InMemoryCollectionStore:
    """Dict-backed store; items are deep-copied on the way in and out."""

    def __init__(self, initial: dict[str, list[dict[str, Any]]] | None = None):
        self._collections: dict[str, list[dict[str, Any]]] = copy.deepcopy(initial or {})
        self.writes: list[str] = []

    def read_all(self, key: str) -> list[dict[str, Any]]:
        return copy.deepcopy(self._collections.get(key, []))

    def write_all(self, key: str, items: Iterable[dict[str, Any]]) -> None:
        self._collections[key] = copy.deepcopy(list(items))
        self.writes.append(key)


__all__ = ["InMemoryCollectionStore"]
