"""Soft-delete bin with a fixed retention window.

Records move here from the :class:`LedgerStore` when deleted and either go
back (restore) or are purged, explicitly or once they outlive
``RETENTION_WINDOW``. Purged records are gone for good.
"""

from __future__ import annotations

import math
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Callable, Iterable, Optional

from ..clock import Clock
from ..domain.repositories import TRASH_KEY, CollectionStore
from ..logging_config import get_logger
from ..models.transaction import Transaction, TrashedTransaction
from .ledger_store import LedgerStore

logger = get_logger(__name__)

RETENTION_DAYS = 7
RETENTION_WINDOW = timedelta(days=RETENTION_DAYS)
_ONE_DAY = timedelta(days=1)


def describe_expiry(deleted_at: datetime, now: datetime) -> str:
    """Human text for the time left before a trashed record is purged.

    Days are rounded up, so 23 hours left still reads "Expires in 1 day".
    """

    remaining = RETENTION_WINDOW - (now - deleted_at)
    days = math.ceil(remaining / _ONE_DAY)
    if days <= 0:
        return "Expiring soon"
    if days == 1:
        return "Expires in 1 day"
    return f"Expires in {days} days"


def _unique(ids: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    ordered: list[str] = []
    for item in ids:
        if item not in seen:
            seen.add(item)
            ordered.append(item)
    return ordered


class TrashManager:
    """Owns the trash set and drives records between it and the ledger."""

    def __init__(self, backend: CollectionStore, ledger: LedgerStore, *, clock: Clock):
        self._backend = backend
        self._ledger = ledger
        self._clock = clock
        self._items: list[TrashedTransaction] = self._load()

    def _load(self) -> list[TrashedTransaction]:
        items: list[TrashedTransaction] = []
        for raw in self._backend.read_all(TRASH_KEY):
            try:
                items.append(TrashedTransaction.from_dict(raw))
            except (KeyError, TypeError, ValueError):
                logger.warning("Dropping malformed trash entry: %r", raw)
        return items

    def _persist(self) -> None:
        self._backend.write_all(TRASH_KEY, [item.to_dict() for item in self._items])

    def _find(self, transaction_id: str) -> Optional[TrashedTransaction]:
        for item in self._items:
            if item.id == transaction_id:
                return item
        return None

    def _commit(self, items: list[TrashedTransaction], ledger_step: Callable[[], object]) -> None:
        """Persist ``items`` as the trash set, then apply the ledger side.

        The trash is written first; if either write fails the previous trash
        set is put back, so a record never ends up stored in both collections.
        """

        previous = self._items
        self._items = items
        try:
            self._persist()
            ledger_step()
        except Exception:
            self._items = previous
            self._persist()
            raise

    def move_to_trash(self, transaction_id: str) -> Optional[TrashedTransaction]:
        """Soft-delete an active record; no-op when it is not active."""

        record = self._ledger.get(transaction_id)
        if record is None:
            logger.debug("Move ignored; transaction %s not found", transaction_id)
            return None
        item = record.trashed(self._clock.now())
        self._commit(self._items + [item], lambda: self._ledger.remove(transaction_id))
        logger.info("Moved transaction %s to trash", transaction_id)
        return replace(item)

    def restore(self, transaction_id: str) -> Optional[Transaction]:
        """Put a trashed record back at the front of the ledger."""

        item = self._find(transaction_id)
        if item is None:
            logger.debug("Restore ignored; %s not in trash", transaction_id)
            return None
        record = item.restored()
        remaining = [other for other in self._items if other is not item]
        self._commit(remaining, lambda: self._ledger.reinstate([record]))
        logger.info("Restored transaction %s", transaction_id)
        return replace(record)

    def permanently_delete(self, transaction_id: str) -> bool:
        item = self._find(transaction_id)
        if item is None:
            return False
        self._items.remove(item)
        self._persist()
        logger.info("Permanently deleted transaction %s", transaction_id)
        return True

    def restore_selected(self, ids: Iterable[str]) -> list[Transaction]:
        """Restore every listed id found in a snapshot of the trash."""

        snapshot = {item.id: item for item in self._items}
        targets = [snapshot[i] for i in _unique(ids) if i in snapshot]
        if not targets:
            return []
        target_ids = {item.id for item in targets}
        remaining = [item for item in self._items if item.id not in target_ids]
        restored = [item.restored() for item in targets]
        self._commit(remaining, lambda: self._ledger.reinstate(restored))
        logger.info("Restored %d transactions from trash", len(restored))
        return [replace(r) for r in restored]

    def delete_selected(self, ids: Iterable[str]) -> int:
        """Purge every listed id found in a snapshot of the trash."""

        snapshot = {item.id for item in self._items}
        target_ids = {i for i in _unique(ids) if i in snapshot}
        if not target_ids:
            return 0
        self._items = [item for item in self._items if item.id not in target_ids]
        self._persist()
        logger.info("Permanently deleted %d transactions", len(target_ids))
        return len(target_ids)

    def empty_trash(self) -> int:
        """Purge everything. Callers are expected to have asked the user first."""

        count = len(self._items)
        if not count:
            return 0
        self._items = []
        self._persist()
        logger.info("Emptied trash (%d transactions)", count)
        return count

    def sweep_expired(self) -> list[TrashedTransaction]:
        """Purge entries whose retention window has elapsed."""

        now = self._clock.now()
        expired = [item for item in self._items if now - item.deleted_at >= RETENTION_WINDOW]
        if not expired:
            return []
        expired_ids = {item.id for item in expired}
        self._items = [item for item in self._items if item.id not in expired_ids]
        self._persist()
        logger.info("Purged %d expired trash entries", len(expired))
        return expired

    def expiry_description(self, deleted_at: datetime) -> str:
        return describe_expiry(deleted_at, self._clock.now())

    def clear(self) -> int:
        count = len(self._items)
        self._items = []
        self._persist()
        return count

    def get(self, transaction_id: str) -> Optional[TrashedTransaction]:
        item = self._find(transaction_id)
        return replace(item) if item else None

    def list(self) -> list[TrashedTransaction]:
        return [replace(item) for item in self._items]

    def count(self) -> int:
        return len(self._items)


__all__ = ["RETENTION_DAYS", "RETENTION_WINDOW", "TrashManager", "describe_expiry"]
