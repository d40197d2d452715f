"""Read-side helpers: filtering, ordering and summaries over ledger records."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Optional, Sequence

from ..models.transaction import Transaction

ALL_CATEGORIES = "All"
QUICK_FILTERS = ("today", "week", "month", "clear")


def _iso(value: date | str | None) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class LedgerQuery:
    """Filters applied to ledger listings; every field is optional."""

    search_text: str = ""
    category: Optional[str] = ALL_CATEGORIES
    date_from: Optional[str] = None
    date_to: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "date_from", _iso(self.date_from))
        object.__setattr__(self, "date_to", _iso(self.date_to))

    @property
    def category_filter(self) -> Optional[str]:
        """Category to match exactly, or None when the filter is disabled."""

        if not self.category or self.category == ALL_CATEGORIES:
            return None
        return self.category

    def matches(self, tx: Transaction) -> bool:
        if self.search_text:
            needle = self.search_text.lower()
            if needle not in (tx.note or "").lower() and needle not in tx.category.lower():
                return False
        wanted = self.category_filter
        if wanted is not None and tx.category != wanted:
            return False
        # ISO dates compare chronologically as plain strings
        if self.date_from and tx.date < self.date_from:
            return False
        if self.date_to and tx.date > self.date_to:
            return False
        return True

    def with_preset(self, preset: str, today: date) -> "LedgerQuery":
        """Return a copy whose date bounds come from a quick-filter preset."""

        date_from, date_to = quick_filter_range(preset, today)
        return replace(self, date_from=date_from, date_to=date_to)


def quick_filter_range(preset: str, today: date) -> tuple[Optional[str], Optional[str]]:
    """Resolve a quick-filter name to inclusive (date_from, date_to) bounds.

    Unknown names behave like ``clear``.
    """

    if preset == "today":
        return today.isoformat(), today.isoformat()
    if preset == "week":
        return (today - timedelta(days=7)).isoformat(), today.isoformat()
    if preset == "month":
        return today.replace(day=1).isoformat(), today.isoformat()
    return None, None


def filter_transactions(
    transactions: Iterable[Transaction], query: LedgerQuery | None = None
) -> list[Transaction]:
    """Apply the query and sort by date, newest first.

    The sort is stable, so records sharing a date keep their input order.
    """

    query = query or LedgerQuery()
    matched = [tx for tx in transactions if query.matches(tx)]
    return sorted(matched, key=lambda tx: tx.date, reverse=True)


@dataclass(frozen=True)
class DailyTotal:
    """Spending on a single calendar day."""

    date: str
    total: float


def total_for_day(transactions: Iterable[Transaction], day: date) -> float:
    key = day.isoformat()
    return sum(tx.amount for tx in transactions if tx.date == key)


def total_for_month(transactions: Iterable[Transaction], day: date) -> float:
    prefix = day.strftime("%Y-%m")
    return sum(tx.amount for tx in transactions if tx.date.startswith(prefix))


def trailing_daily_totals(
    transactions: Iterable[Transaction], days: int, today: date
) -> list[DailyTotal]:
    """Totals for the last ``days`` calendar days including today, oldest first."""

    by_day: dict[str, float] = {}
    for tx in transactions:
        by_day[tx.date] = by_day.get(tx.date, 0.0) + tx.amount

    series: list[DailyTotal] = []
    for offset in range(days - 1, -1, -1):
        key = (today - timedelta(days=offset)).isoformat()
        series.append(DailyTotal(date=key, total=by_day.get(key, 0.0)))
    return series


def category_totals(transactions: Iterable[Transaction]) -> dict[str, float]:
    """Sum amounts per category, largest first; empty categories are omitted."""

    totals: dict[str, float] = {}
    for tx in transactions:
        totals[tx.category] = totals.get(tx.category, 0.0) + tx.amount
    return dict(sorted(totals.items(), key=lambda item: item[1], reverse=True))


@dataclass(frozen=True)
class LedgerStats:
    """Dashboard figures computed over the whole active set."""

    today_total: float
    month_total: float
    last_7_days: Sequence[DailyTotal] = field(default_factory=tuple)
    last_30_days: Sequence[DailyTotal] = field(default_factory=tuple)
    category_totals: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "todayTotal": self.today_total,
            "monthTotal": self.month_total,
            "dailySeries": {
                "7": [{"date": d.date, "total": d.total} for d in self.last_7_days],
                "30": [{"date": d.date, "total": d.total} for d in self.last_30_days],
            },
            "categoryTotals": dict(self.category_totals),
        }


def compute_stats(transactions: Iterable[Transaction], today: date) -> LedgerStats:
    """Aggregate the unfiltered active set."""

    records = list(transactions)
    return LedgerStats(
        today_total=total_for_day(records, today),
        month_total=total_for_month(records, today),
        last_7_days=tuple(trailing_daily_totals(records, 7, today)),
        last_30_days=tuple(trailing_daily_totals(records, 30, today)),
        category_totals=category_totals(records),
    )


__all__ = [
    "ALL_CATEGORIES",
    "DailyTotal",
    "LedgerQuery",
    "LedgerStats",
    "QUICK_FILTERS",
    "category_totals",
    "compute_stats",
    "filter_transactions",
    "quick_filter_range",
    "total_for_day",
    "total_for_month",
    "trailing_daily_totals",
]
