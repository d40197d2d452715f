"""Ledger record types and SQLModel table exports."""

from .stored_collection import StoredCollection
from .transaction import (
    CATEGORY_COLORS,
    DEFAULT_CATEGORY,
    FALLBACK_COLOR,
    KNOWN_CATEGORIES,
    Transaction,
    TrashedTransaction,
    category_color,
    format_timestamp,
    new_transaction_id,
)

__all__ = [
    "CATEGORY_COLORS",
    "DEFAULT_CATEGORY",
    "FALLBACK_COLOR",
    "KNOWN_CATEGORIES",
    "StoredCollection",
    "Transaction",
    "TrashedTransaction",
    "category_color",
    "format_timestamp",
    "new_transaction_id",
]
