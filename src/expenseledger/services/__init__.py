"""Service layer for ledger storage, trash retention, queries and CSV."""

from .ledger_service import ExpenseLedger, ImportResult
from .ledger_store import LedgerStore
from .query import LedgerQuery, LedgerStats
from .trash import RETENTION_WINDOW, TrashManager

__all__ = [
    "ExpenseLedger",
    "ImportResult",
    "LedgerQuery",
    "LedgerStats",
    "LedgerStore",
    "RETENTION_WINDOW",
    "TrashManager",
]
