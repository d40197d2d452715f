from __future__ import annotations

import itertools
from datetime import date, datetime

import pytest

from expenseledger.models.transaction import Transaction
from expenseledger.services.query import LedgerQuery, filter_transactions, quick_filter_range


def _tx(tx_id: str, day: str, category: str = "Food", note: str = "", amount: float = 1.0) -> Transaction:
    return Transaction(id=tx_id, amount=amount, category=category, note=note, date=day, created_at="")


@pytest.fixture
def records() -> list[Transaction]:
    return [
        _tx("a", "2024-01-10", "Food", "Pizza with friends"),
        _tx("b", "2024-01-15", "Transport", "Bus pass"),
        _tx("c", "2024-01-10", "Shopping", "New shoes"),
        _tx("d", "2024-01-20", "Food", "Groceries"),
        _tx("e", "2024-01-10", "Bills", "electric FOOD bank donation"),
    ]


def test_category_filter_scenario(ledger):
    food = ledger.add(150.00, category="Food", date="2024-01-10")
    ledger.add(50.00, category="Transport", date="2024-01-15")

    result = ledger.list(LedgerQuery(category="Food"))

    assert result == [food]


def test_all_category_disables_filter(records):
    assert len(filter_transactions(records, LedgerQuery(category="All"))) == 5
    assert len(filter_transactions(records, LedgerQuery(category=None))) == 5
    assert len(filter_transactions(records, LedgerQuery(category=""))) == 5


def test_category_match_is_exact(records):
    assert filter_transactions(records, LedgerQuery(category="food")) == []


def test_search_matches_note_or_category_case_insensitively(records):
    ids = [t.id for t in filter_transactions(records, LedgerQuery(search_text="food"))]
    assert ids == ["d", "a", "e"]

    ids = [t.id for t in filter_transactions(records, LedgerQuery(search_text="SHOES"))]
    assert ids == ["c"]


def test_date_bounds_are_inclusive(records):
    query = LedgerQuery(date_from="2024-01-10", date_to="2024-01-15")
    ids = [t.id for t in filter_transactions(records, query)]
    assert ids == ["b", "a", "c", "e"]

    query = LedgerQuery(date_from=date(2024, 1, 15))
    assert [t.id for t in filter_transactions(records, query)] == ["d", "b"]


def test_datetime_bounds_compare_by_calendar_day(records):
    query = LedgerQuery(date_from=datetime(2024, 1, 10, 9, 30), date_to=datetime(2024, 1, 15, 23, 59))
    assert query.date_from == "2024-01-10"
    assert [t.id for t in filter_transactions(records, query)] == ["b", "a", "c", "e"]


def test_sort_is_descending_and_stable(records):
    result = filter_transactions(records)
    dates = [t.date for t in result]
    assert dates == sorted(dates, reverse=True)
    # equal dates keep their input order
    assert [t.id for t in result if t.date == "2024-01-10"] == ["a", "c", "e"]


def test_filter_does_not_mutate_input(records):
    before = list(records)
    filter_transactions(records, LedgerQuery(search_text="x", category="Food"))
    assert records == before


def test_filters_are_conjunctive_and_order_independent(records):
    predicates = [
        LedgerQuery(search_text="o"),
        LedgerQuery(category="Food"),
        LedgerQuery(date_from="2024-01-10", date_to="2024-01-15"),
    ]
    combined = filter_transactions(
        records,
        LedgerQuery(search_text="o", category="Food", date_from="2024-01-10", date_to="2024-01-15"),
    )
    assert [t.id for t in combined] == ["a"]

    for order in itertools.permutations(predicates):
        current = records
        for query in order:
            current = filter_transactions(current, query)
        assert {t.id for t in current} == {t.id for t in combined}


@pytest.mark.parametrize(
    "preset, expected",
    [
        ("today", ("2024-03-05", "2024-03-05")),
        ("week", ("2024-02-27", "2024-03-05")),
        ("month", ("2024-03-01", "2024-03-05")),
        ("clear", (None, None)),
        ("bogus", (None, None)),
    ],
)
def test_quick_filter_ranges(preset, expected):
    assert quick_filter_range(preset, date(2024, 3, 5)) == expected


def test_with_preset_only_touches_dates():
    query = LedgerQuery(search_text="bus", category="Transport", date_from="2020-01-01")
    preset = query.with_preset("month", date(2024, 1, 20))
    assert preset.search_text == "bus"
    assert preset.category == "Transport"
    assert (preset.date_from, preset.date_to) == ("2024-01-01", "2024-01-20")
    assert query.with_preset("clear", date(2024, 1, 20)).date_from is None


def test_ledger_list_without_query_sorts_by_date(ledger):
    older = ledger.add(1, date="2024-01-01")
    newer = ledger.add(2, date="2024-01-05")
    imported_last = ledger.add(3, date="2024-01-03")
    assert [t.id for t in ledger.list()] == [newer.id, imported_last.id, older.id]
