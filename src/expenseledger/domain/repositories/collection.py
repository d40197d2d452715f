"""Collection store protocol."""

from __future__ import annotations

from typing import Any, Iterable, Protocol

TRANSACTIONS_KEY = "transactions"
TRASH_KEY = "trash"


class CollectionStore(Protocol):
    """Read-all/write-all persistence for named, ordered collections."""

    def read_all(self, key: str) -> list[dict[str, Any]]:
        """Return the stored items, or an empty list when missing or unparsable."""
        ...

    def write_all(self, key: str, items: Iterable[dict[str, Any]]) -> None:
        """Replace the stored collection with ``items``."""
        ...
