"""Ledger facade used by the CLI and tests.

Every operation returns the data a presentation layer needs (records,
counts, stats); nothing here renders.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Optional

from ..clock import Clock
from ..domain.repositories import CollectionStore
from ..errors import NothingToExportError, NoValidTransactionsError
from ..logging_config import get_logger
from ..models.transaction import DEFAULT_CATEGORY, Transaction, TrashedTransaction
from . import csv_codec
from .ledger_store import LedgerStore
from .query import LedgerQuery, LedgerStats, compute_stats, filter_transactions
from .trash import TrashManager

logger = get_logger(__name__)


@dataclass(frozen=True)
class ImportResult:
    """Outcome of a CSV import that accepted at least one row."""

    imported: int
    skipped: int


class ExpenseLedger:
    """Ties the ledger store, trash, query engine and CSV codec together."""

    def __init__(self, backend: CollectionStore, *, clock: Clock):
        self.clock = clock
        self.store = LedgerStore(backend, clock=clock)
        self.trash_bin = TrashManager(backend, self.store, clock=clock)

    # Reads -----------------------------------------------------------------

    def list(self, query: Optional[LedgerQuery] = None) -> list[Transaction]:
        return filter_transactions(self.store.list(), query)

    def stats(self) -> LedgerStats:
        return compute_stats(self.store.list(), self.clock.today())

    def get(self, transaction_id: str) -> Optional[Transaction]:
        return self.store.get(transaction_id)

    def trash(self) -> list[TrashedTransaction]:
        return self.trash_bin.list()

    def trash_count(self) -> int:
        return self.trash_bin.count()

    def expiry_description(self, deleted_at: datetime) -> str:
        return self.trash_bin.expiry_description(deleted_at)

    # Ledger mutations ------------------------------------------------------

    def add(
        self,
        amount: Any,
        category: Optional[str] = DEFAULT_CATEGORY,
        note: Optional[str] = "",
        date: Any = None,
    ) -> Transaction:
        return self.store.add(amount, category=category, note=note, date=date)

    def update(self, transaction_id: str, **changes: Any) -> Optional[Transaction]:
        return self.store.update(transaction_id, **changes)

    def delete(self, transaction_id: str) -> Optional[TrashedTransaction]:
        """Soft-delete: the record moves to the trash."""

        return self.trash_bin.move_to_trash(transaction_id)

    # Trash -----------------------------------------------------------------

    def restore(self, transaction_id: str) -> Optional[Transaction]:
        return self.trash_bin.restore(transaction_id)

    def permanently_delete(self, transaction_id: str) -> bool:
        return self.trash_bin.permanently_delete(transaction_id)

    def restore_selected(self, ids: Iterable[str]) -> list[Transaction]:
        return self.trash_bin.restore_selected(ids)

    def delete_selected(self, ids: Iterable[str]) -> int:
        return self.trash_bin.delete_selected(ids)

    def empty_trash(self) -> int:
        return self.trash_bin.empty_trash()

    def sweep_expired(self) -> list[TrashedTransaction]:
        return self.trash_bin.sweep_expired()

    def delete_all_data(self) -> tuple[int, int]:
        """Wipe both the active set and the trash; returns (active, trashed) counts."""

        active = self.store.clear()
        trashed = self.trash_bin.clear()
        logger.info("Deleted all data", extra={"active": active, "trashed": trashed})
        return active, trashed

    # CSV -------------------------------------------------------------------

    def export_csv(self) -> str:
        records = self.store.list()
        if not records:
            raise NothingToExportError()
        return csv_codec.export_csv(records)

    def export_csv_file(self, output_path: Optional[Path] = None, *, directory: Path = Path(".")) -> Path:
        """Write the export; defaults to ``expenses_<today>.csv`` in ``directory``."""

        records = self.store.list()
        if not records:
            raise NothingToExportError()
        target = output_path or (directory / csv_codec.default_export_filename(self.clock.today()))
        csv_codec.write_csv(transactions=records, output_path=target)
        logger.info("Exported %d transactions to %s", len(records), target)
        return target

    def import_csv(self, text: str) -> ImportResult:
        """Append valid rows in file order; raises when none are valid."""

        parsed = csv_codec.parse_csv(
            text, id_factory=self.store.fresh_id, imported_at=self.clock.now()
        )
        if not parsed.records:
            logger.info("CSV import found no valid rows", extra={"skipped": parsed.skipped})
            raise NoValidTransactionsError(skipped=parsed.skipped)
        self.store.append_many(parsed.records)
        logger.info(
            "Imported %d transactions", len(parsed.records), extra={"skipped": parsed.skipped}
        )
        return ImportResult(imported=len(parsed.records), skipped=parsed.skipped)

    def import_csv_file(self, csv_path: Path) -> ImportResult:
        logger.info("Starting transaction import from: %s", csv_path)
        return self.import_csv(csv_codec.read_csv_file(csv_path))


__all__ = ["ExpenseLedger", "ImportResult"]
