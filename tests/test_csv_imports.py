from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from expenseledger.errors import NoValidTransactionsError
from expenseledger.services.csv_codec import parse_csv


def test_import_scenario_skips_malformed_line(ledger):
    text = 'Date,Category,Amount,Note\n2024-02-01,Bills,75.50,"Electric bill"\nmalformed-line\n'

    result = ledger.import_csv(text)

    assert result.imported == 1
    assert result.skipped == 1
    [tx] = ledger.store.list()
    assert tx.category == "Bills"
    assert tx.amount == 75.50
    assert tx.note == "Electric bill"
    assert tx.date == "2024-02-01"


def test_imported_rows_are_appended_in_file_order(ledger):
    existing = ledger.add(1, date="2024-01-01")
    text = (
        "Date,Category,Amount,Note\n"
        '2024-02-01,Food,10,"first"\n'
        '2024-02-02,Food,20,"second"\n'
    )
    ledger.import_csv(text)
    assert [t.note for t in ledger.store.list()] == ["", "first", "second"]
    assert ledger.store.list()[0].id == existing.id


def test_import_generates_fresh_ids_and_created_at(ledger, clock):
    existing = ledger.add(1, date="2024-01-01")
    text = f'Date,Category,Amount,Note\n2024-02-01,Food,10,"{existing.id}"\n'

    ledger.import_csv(text)

    imported = ledger.store.list()[-1]
    assert imported.id != existing.id
    assert imported.created_at.startswith("2024-01-20T12:00:00")


def test_zero_valid_rows_raises_and_writes_nothing(ledger, backend):
    text = "Date,Category,Amount,Note\nnot,a,number,here\n,Food,10,\"no date\"\n"

    with pytest.raises(NoValidTransactionsError) as excinfo:
        ledger.import_csv(text)

    assert str(excinfo.value) == "No valid transactions found in CSV"
    assert excinfo.value.skipped == 2
    assert backend.writes == []


def test_header_only_file_is_a_failure(ledger):
    with pytest.raises(NoValidTransactionsError):
        ledger.import_csv("Date,Category,Amount,Note\n")


@pytest.mark.parametrize(
    "line",
    [
        "2024-02-01,Food,abc,\"x\"",
        "2024-02-01,Food,NaN,\"x\"",
        "2024-02-01,Food,inf,\"x\"",
        "2024-02-01,Food,-5,\"x\"",
        "2024-02-01,Food,0,\"x\"",
        "   ,Food,5,\"x\"",
        "2024-02-01,Food,5",
        "just-one-field",
    ],
)
def test_malformed_rows_are_skipped(line):
    result = parse_csv("Date,Category,Amount,Note\n" + line + "\n")
    assert result.records == []
    assert result.skipped == 1


def test_blank_lines_are_ignored_not_counted():
    text = 'Date,Category,Amount,Note\n\n   \n2024-02-01,Food,5,"x"\n\n'
    result = parse_csv(text)
    assert len(result.records) == 1
    assert result.skipped == 0


def test_blank_category_defaults_to_general():
    result = parse_csv('Date,Category,Amount,Note\n2024-02-01, ,5,"x"\n2024-02-02,,6,"y"\n')
    assert [r.category for r in result.records] == ["General", "General"]


def test_note_unescaping_and_embedded_commas():
    text = (
        "Date,Category,Amount,Note\n"
        '2024-02-01,Food,5,"Said ""hi"", then left"\n'
        "2024-02-02,Food,6,unquoted, with comma\n"
        '2024-02-03,Food,7,""\n'
        "2024-02-04,Food,8,\n"
    )
    notes = [r.note for r in parse_csv(text).records]
    assert notes == ['Said "hi", then left', "unquoted, with comma", "", ""]


def test_quoted_note_may_span_lines():
    text = 'Date,Category,Amount,Note\n2024-02-01,Food,5,"line one\nline two"\n2024-02-02,Food,6,"ok"\n'
    records = parse_csv(text).records
    assert [r.note for r in records] == ["line one\nline two", "ok"]


def test_unterminated_quote_does_not_swallow_following_rows():
    text = (
        "Date,Category,Amount,Note\n"
        '2024-01-01,Food,5,"oops\n'
        '2024-01-02,Bills,10,"ok"\n'
        '2024-01-03,Health,20,"fine"\n'
    )

    result = parse_csv(text)

    assert [(r.category, r.amount, r.note) for r in result.records] == [
        ("Bills", 10.0, "ok"),
        ("Health", 20.0, "fine"),
    ]
    assert result.skipped == 1


def test_unterminated_quote_on_last_line_is_skipped():
    result = parse_csv('Date,Category,Amount,Note\n2024-01-01,Food,5,"fine"\n2024-01-02,Food,6,"never closed\n')
    assert [r.note for r in result.records] == ["fine"]
    assert result.skipped == 1


def test_lines_after_stray_quote_are_read_one_by_one():
    text = (
        "Date,Category,Amount,Note\n"
        '2024-01-01,Food,5,"oops\n'
        "not a row\n"
        '2024-01-02,Bills,10,"ok"\n'
    )

    result = parse_csv(text)

    assert [r.category for r in result.records] == ["Bills"]
    assert result.skipped == 2


def test_import_keeps_rows_after_a_stray_quote(ledger):
    text = 'Date,Category,Amount,Note\n2024-01-01,Food,5,"oops\n2024-01-02,Bills,10,"ok"\n'

    result = ledger.import_csv(text)

    assert (result.imported, result.skipped) == (1, 1)
    assert ledger.store.list()[0].category == "Bills"


def test_crlf_line_endings_and_bom():
    text = '\ufeffDate,Category,Amount,Note\r\n2024-02-01,Food,5,"x"\r\n'
    [record] = parse_csv(text).records
    assert record.note == "x"
    assert record.date == "2024-02-01"


def test_date_and_category_are_trimmed_but_note_is_kept():
    [record] = parse_csv('Date,Category,Amount,Note\n 2024-02-01 , Food , 5.5 ,"  padded  "\n').records
    assert (record.date, record.category, record.amount, record.note) == ("2024-02-01", "Food", 5.5, "  padded  ")


def test_parse_uses_injected_id_factory_and_timestamp():
    ids = iter(["id-1", "id-2"])
    result = parse_csv(
        'Date,Category,Amount,Note\n2024-02-01,Food,5,"x"\n2024-02-01,Food,6,"y"\n',
        id_factory=lambda: next(ids),
        imported_at=datetime(2024, 5, 1, 8, 30, tzinfo=timezone.utc),
    )
    assert [r.id for r in result.records] == ["id-1", "id-2"]
    assert result.records[0].created_at == "2024-05-01T08:30:00.000+00:00"


def test_import_csv_file_reads_utf8_sig(ledger, tmp_path: Path):
    csv_path = tmp_path / "ledger.csv"
    csv_path.write_text('Date,Category,Amount,Note\n2024-02-01,Health,30,"Pharmacy"\n', encoding="utf-8-sig")

    result = ledger.import_csv_file(csv_path)

    assert result.imported == 1
    assert ledger.store.list()[0].category == "Health"
