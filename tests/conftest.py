"""Pytest configuration and shared fixtures for ExpenseLedger tests.

Fixtures here build ledgers over an in-memory collection store and a fixed
clock so retention windows and date buckets are deterministic.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from expenseledger.clock import FixedClock
from expenseledger.infra.repositories import InMemoryCollectionStore
from expenseledger.services.ledger_service import ExpenseLedger

# Noon UTC keeps the calendar date stable regardless of test-time offsets.
NOW = datetime(2024, 1, 20, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def isolated_data_dir(tmp_path, monkeypatch: pytest.MonkeyPatch):
    """Point configuration at a temp directory so tests never touch ./instance."""

    data_dir = tmp_path / "instance"
    monkeypatch.setenv("EXPENSELEDGER_DATA_DIR", str(data_dir))
    monkeypatch.delenv("EXPENSELEDGER_DATABASE_URL", raising=False)
    monkeypatch.delenv("EXPENSELEDGER_STORAGE", raising=False)
    return data_dir


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def backend() -> InMemoryCollectionStore:
    return InMemoryCollectionStore()


@pytest.fixture
def ledger(backend, clock) -> ExpenseLedger:
    return ExpenseLedger(backend, clock=clock)


@pytest.fixture
def transaction_factory(ledger):
    """Factory for adding transactions with sensible defaults.

    Returns:
        Callable: Function that adds and returns Transaction instances
    """

    def _create_transaction(
        amount: float = 10.0,
        category: str = "Food",
        note: str = "",
        date: str = "2024-01-20",
    ):
        return ledger.add(amount, category=category, note=note, date=date)

    return _create_transaction

