"""Tests for CSV export and export/import round trips."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from expenseledger.errors import NothingToExportError
from expenseledger.services import csv_codec


def test_export_format_and_store_order(ledger):
    ledger.add(150, category="Food", note="Lunch", date="2024-01-10")
    ledger.add(75.5, category="Bills", note='Said "hi", bye', date="2024-01-15")
    ledger.add(3.25, category="Transport", note="", date="2024-01-01")

    text = ledger.export_csv()

    assert text.split("\n") == [
        "Date,Category,Amount,Note",
        '2024-01-01,Transport,3.25,""',
        '2024-01-15,Bills,75.5,"Said ""hi"", bye"',
        '2024-01-10,Food,150,"Lunch"',
    ]


def test_export_empty_ledger_raises(ledger):
    with pytest.raises(NothingToExportError, match="No transactions to export"):
        ledger.export_csv()


@pytest.mark.parametrize(
    "amount, expected",
    [(150.0, "150"), (75.5, "75.5"), (0.1, "0.1"), (1234.56, "1234.56")],
)
def test_format_amount(amount, expected):
    assert csv_codec.format_amount(amount) == expected


def test_round_trip_preserves_fields(ledger, backend, clock):
    from expenseledger.services.ledger_service import ExpenseLedger
    from expenseledger.infra.repositories import InMemoryCollectionStore

    ledger.add(150, category="Food", note="Lunch, with team", date="2024-01-10")
    ledger.add(0.99, category="Pets", note='The "good" food', date="2024-01-11")
    ledger.add(20, category="Health", note="multi\nline", date="2024-01-12")
    ledger.add(12, category="Food", note="  indented note ", date="2024-01-13")
    originals = ledger.store.list()

    other = ExpenseLedger(InMemoryCollectionStore(), clock=clock)
    result = other.import_csv(ledger.export_csv())

    assert result.imported == len(originals)
    imported = other.store.list()
    assert [(t.date, t.category, t.amount, t.note) for t in imported] == [
        (t.date, t.category, t.amount, t.note) for t in originals
    ]
    assert not {t.id for t in imported} & {t.id for t in originals}


def test_export_csv_file_uses_default_name(ledger, tmp_path: Path):
    ledger.add(10, category="Food", note="Snack", date="2024-01-10")

    path = ledger.export_csv_file(directory=tmp_path)

    assert path == tmp_path / "expenses_2024-01-20.csv"
    assert path.read_text(encoding="utf-8") == 'Date,Category,Amount,Note\n2024-01-10,Food,10,"Snack"'


def test_export_csv_file_explicit_path(ledger, tmp_path: Path):
    ledger.add(10, date="2024-01-10")
    target = tmp_path / "nested" / "out.csv"
    assert ledger.export_csv_file(target) == target
    assert target.exists()


def test_export_csv_file_empty_raises(ledger, tmp_path: Path):
    with pytest.raises(NothingToExportError):
        ledger.export_csv_file(directory=tmp_path)
    assert list(tmp_path.iterdir()) == []


def test_default_export_filename():
    assert csv_codec.default_export_filename(date(2024, 7, 4)) == "expenses_2024-07-04.csv"
