"""Ledger record definitions for active and trashed expenses."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, fields
from datetime import datetime, timezone
from typing import Any, Mapping

DEFAULT_CATEGORY = "General"

# Known categories and their display colors; anything else uses the fallback.
CATEGORY_COLORS: dict[str, str] = {
    "Food": "#f59e0b",
    "Transport": "#3b82f6",
    "Shopping": "#ec4899",
    "Bills": "#8b5cf6",
    "Entertainment": "#10b981",
    "Health": "#ef4444",
    "Education": "#06b6d4",
    "General": "#6366f1",
}
KNOWN_CATEGORIES: tuple[str, ...] = tuple(CATEGORY_COLORS)
FALLBACK_COLOR = "#6366f1"


def category_color(category: str) -> str:
    """Return the display color for a category, tolerating unknown labels."""

    return CATEGORY_COLORS.get(category, FALLBACK_COLOR)


def new_transaction_id() -> str:
    return str(uuid.uuid4())


def format_timestamp(value: datetime) -> str:
    """Render an instant as UTC ISO-8601 text with millisecond precision."""

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds")


def _parse_timestamp(raw: Any) -> datetime:
    if isinstance(raw, datetime):
        value = raw
    elif isinstance(raw, (int, float)) and not isinstance(raw, bool):
        # Epoch milliseconds
        value = datetime.fromtimestamp(raw / 1000, tz=timezone.utc)
    elif isinstance(raw, str):
        value = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    else:
        raise TypeError(f"Unsupported timestamp value: {raw!r}")
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


@dataclass
class Transaction:
    """A single expense entry in the active set."""

    id: str
    amount: float
    category: str
    note: str
    date: str
    created_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "amount": self.amount,
            "category": self.category,
            "note": self.note,
            "date": self.date,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Transaction":
        """Build a record from its serialized form.

        Raises KeyError, TypeError or ValueError for malformed payloads.
        """
        amount = data["amount"]
        if isinstance(amount, bool):
            raise TypeError("amount must be numeric")
        return cls(
            id=str(data["id"]),
            amount=float(amount),
            category=str(data.get("category") or DEFAULT_CATEGORY),
            note=str(data.get("note") or ""),
            date=str(data["date"]),
            created_at=str(data.get("createdAt") or ""),
        )

    def trashed(self, deleted_at: datetime) -> "TrashedTransaction":
        """Return a soft-deleted copy stamped with ``deleted_at``."""

        values = {f.name: getattr(self, f.name) for f in fields(Transaction)}
        return TrashedTransaction(**values, deleted_at=deleted_at)


@dataclass
class TrashedTransaction(Transaction):
    """A soft-deleted transaction awaiting restore or purge."""

    deleted_at: datetime

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["deletedAt"] = self.deleted_at.astimezone(timezone.utc).isoformat(
            timespec="microseconds"
        )
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TrashedTransaction":
        base = Transaction.from_dict(data)
        return base.trashed(_parse_timestamp(data["deletedAt"]))

    def restored(self) -> Transaction:
        """Return the active record without its deletion stamp."""

        values = {f.name: getattr(self, f.name) for f in fields(Transaction)}
        return Transaction(**values)


__all__ = [
    "CATEGORY_COLORS",
    "DEFAULT_CATEGORY",
    "FALLBACK_COLOR",
    "KNOWN_CATEGORIES",
    "Transaction",
    "TrashedTransaction",
    "category_color",
    "format_timestamp",
    "new_transaction_id",
]
