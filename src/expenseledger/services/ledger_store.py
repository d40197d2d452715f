"""Authoritative store for active ledger records."""

from __future__ import annotations

import math
import re
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Callable, Iterable, Optional

from ..clock import Clock
from ..domain.repositories import TRANSACTIONS_KEY, CollectionStore
from ..errors import ValidationError
from ..logging_config import get_logger
from ..models.transaction import (
    DEFAULT_CATEGORY,
    Transaction,
    format_timestamp,
    new_transaction_id,
)

logger = get_logger(__name__)

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def coerce_amount(raw: Any) -> float:
    """Return ``raw`` as a positive finite float or raise ValidationError."""

    if raw is None or isinstance(raw, bool):
        raise ValidationError("Please enter a valid amount")
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            raise ValidationError("Please enter a valid amount")
    try:
        amount = float(raw)
    except (TypeError, ValueError) as exc:
        raise ValidationError("Please enter a valid amount") from exc
    if not math.isfinite(amount) or amount <= 0:
        raise ValidationError("Please enter a valid amount")
    return amount


def coerce_date(raw: Any) -> str:
    """Normalize a calendar date to ``YYYY-MM-DD`` text or raise ValidationError."""

    if isinstance(raw, datetime):
        return raw.date().isoformat()
    if isinstance(raw, date):
        return raw.isoformat()
    text = str(raw or "").strip()
    if not _ISO_DATE.match(text):
        raise ValidationError(f"Invalid date: {raw!r} (expected YYYY-MM-DD)")
    try:
        date.fromisoformat(text)
    except ValueError as exc:
        raise ValidationError(f"Invalid date: {raw!r} (expected YYYY-MM-DD)") from exc
    return text


def _normalize_category(raw: Optional[str]) -> str:
    return (raw or "").strip() or DEFAULT_CATEGORY


class LedgerStore:
    """Owns the active set; newest-added records sit at the front."""

    def __init__(
        self,
        backend: CollectionStore,
        *,
        clock: Clock,
        id_factory: Callable[[], str] = new_transaction_id,
    ):
        self._backend = backend
        self._clock = clock
        self._id_factory = id_factory
        self._records: list[Transaction] = self._load()

    def _load(self) -> list[Transaction]:
        records: list[Transaction] = []
        for item in self._backend.read_all(TRANSACTIONS_KEY):
            try:
                records.append(Transaction.from_dict(item))
            except (KeyError, TypeError, ValueError):
                logger.warning("Dropping malformed stored transaction: %r", item)
        return records

    def _persist(self) -> None:
        self._backend.write_all(TRANSACTIONS_KEY, [r.to_dict() for r in self._records])

    def _index_of(self, transaction_id: str) -> int:
        for index, record in enumerate(self._records):
            if record.id == transaction_id:
                return index
        return -1

    def fresh_id(self) -> str:
        """Return an id not used by any active record."""

        taken = {r.id for r in self._records}
        candidate = self._id_factory()
        while candidate in taken:
            candidate = self._id_factory()
        return candidate

    def add(
        self,
        amount: Any,
        category: Optional[str] = DEFAULT_CATEGORY,
        note: Optional[str] = "",
        date: Any = None,
    ) -> Transaction:
        """Validate and prepend a new record; returns the stored copy."""

        value = coerce_amount(amount)
        day = coerce_date(date) if date is not None else self._clock.today().isoformat()
        record = Transaction(
            id=self.fresh_id(),
            amount=value,
            category=_normalize_category(category),
            note=note or "",
            date=day,
            created_at=format_timestamp(self._clock.now()),
        )
        self._records.insert(0, record)
        self._persist()
        logger.info("Added transaction %s", record.id, extra={"amount": value, "category": record.category})
        return replace(record)

    def update(
        self,
        transaction_id: str,
        *,
        amount: Any = None,
        category: Optional[str] = None,
        note: Optional[str] = None,
        date: Any = None,
    ) -> Optional[Transaction]:
        """Apply edits in place. Unknown ids are a silent no-op returning None."""

        changes: dict[str, Any] = {}
        if amount is not None:
            changes["amount"] = coerce_amount(amount)
        if category is not None:
            changes["category"] = _normalize_category(category)
        if note is not None:
            changes["note"] = note
        if date is not None:
            changes["date"] = coerce_date(date)

        index = self._index_of(transaction_id)
        if index == -1:
            logger.debug("Update ignored; transaction %s not found", transaction_id)
            return None
        record = self._records[index]
        for name, value in changes.items():
            setattr(record, name, value)
        self._persist()
        logger.info("Updated transaction %s", transaction_id, extra={"fields": sorted(changes)})
        return replace(record)

    def remove(self, transaction_id: str) -> Optional[Transaction]:
        """Extract a record for hand-off to the trash; None if absent."""

        index = self._index_of(transaction_id)
        if index == -1:
            logger.debug("Remove ignored; transaction %s not found", transaction_id)
            return None
        previous = list(self._records)
        record = self._records.pop(index)
        try:
            self._persist()
        except Exception:
            self._records = previous
            raise
        return record

    def reinstate(self, records: Iterable[Transaction]) -> int:
        """Insert each record at the front in turn; one write for the batch."""

        batch = list(records)
        if not batch:
            return 0
        previous = list(self._records)
        for record in batch:
            self._records.insert(0, record)
        try:
            self._persist()
        except Exception:
            self._records = previous
            raise
        return len(batch)

    def append_many(self, records: Iterable[Transaction]) -> int:
        """Append records at the end in the given order; one write for the batch."""

        batch = list(records)
        if not batch:
            return 0
        self._records.extend(batch)
        self._persist()
        return len(batch)

    def clear(self) -> int:
        count = len(self._records)
        self._records.clear()
        self._persist()
        return count

    def get(self, transaction_id: str) -> Optional[Transaction]:
        index = self._index_of(transaction_id)
        return replace(self._records[index]) if index != -1 else None

    def list(self) -> list[Transaction]:
        """Return copies of the active set in storage order."""

        return [replace(r) for r in self._records]

    def __len__(self) -> int:
        return len(self._records)


__all__ = ["LedgerStore", "coerce_amount", "coerce_date"]
