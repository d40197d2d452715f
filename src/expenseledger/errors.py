"""Exceptions surfaced to the user as transient notifications."""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for user-visible ledger failures."""


class ValidationError(LedgerError, ValueError):
    """Raised when an add or edit carries an invalid amount or date."""


class NoValidTransactionsError(LedgerError):
    """Raised when a CSV import accepts zero rows."""

    def __init__(self, skipped: int = 0) -> None:
        super().__init__("No valid transactions found in CSV")
        self.skipped = skipped


class NothingToExportError(LedgerError):
    """Raised when exporting an empty ledger."""

    def __init__(self) -> None:
        super().__init__("No transactions to export")


__all__ = [
    "LedgerError",
    "NoValidTransactionsError",
    "NothingToExportError",
    "ValidationError",
]
