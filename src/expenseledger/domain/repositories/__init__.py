"""Repository protocols."""

from .collection import TRANSACTIONS_KEY, TRASH_KEY, CollectionStore

__all__ = ["CollectionStore", "TRANSACTIONS_KEY", "TRASH_KEY"]
