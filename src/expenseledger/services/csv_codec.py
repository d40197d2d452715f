"""CSV import/export for ledger records.

Export writes ``Date,Category,Amount,Note`` with the note always quoted.
Import is tolerant: rows that do not look like a transaction are skipped
and counted, never raised.
"""

from __future__ import annotations

import csv
import io
import math
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Callable, Iterable, Optional

from ..logging_config import get_logger
from ..models.transaction import (
    DEFAULT_CATEGORY,
    Transaction,
    format_timestamp,
    new_transaction_id,
)

logger = get_logger(__name__)

CSV_HEADER = ("Date", "Category", "Amount", "Note")


@dataclass
class ParseResult:
    """Rows accepted from a CSV document plus the count of rejected ones."""

    records: list[Transaction] = field(default_factory=list)
    skipped: int = 0


def format_amount(amount: float) -> str:
    """Render an amount the way it was entered: ``150`` or ``75.5``."""

    value = float(amount)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def quote_field(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def export_csv(transactions: Iterable[Transaction]) -> str:
    """Serialize records in the order given (no re-sorting)."""

    lines = [",".join(CSV_HEADER)]
    for tx in transactions:
        lines.append(
            ",".join(
                [tx.date, tx.category, format_amount(tx.amount), quote_field(tx.note or "")]
            )
        )
    return "\n".join(lines)


def default_export_filename(today: date) -> str:
    return f"expenses_{today.isoformat()}.csv"


def write_csv(*, transactions: Iterable[Transaction], output_path: Path) -> Path:
    """Write the export document to ``output_path`` and return the path."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    # newline="" keeps the document's own \n line endings on every platform
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        fh.write(export_csv(transactions))
    return output_path


def _parse_amount(raw: str) -> Optional[float]:
    try:
        amount = float(raw.strip())
    except ValueError:
        return None
    if not math.isfinite(amount) or amount <= 0:
        return None
    return amount


RowValues = tuple[str, str, float, str]


def _row_values(fields: list[str]) -> Optional[RowValues]:
    """Return (date, category, amount, note) for an acceptable row."""

    if len(fields) < 4:
        return None
    amount = _parse_amount(fields[2])
    if amount is None:
        return None
    day = fields[0].strip()
    if not day:
        return None
    # An unquoted note may itself contain commas
    note = ",".join(fields[3:])
    return day, fields[1].strip() or DEFAULT_CATEGORY, amount, note


def _read_record(record: str) -> Optional[RowValues]:
    try:
        fields = next(csv.reader(io.StringIO(record, newline="")), [])
    except csv.Error as exc:
        logger.debug("Unreadable CSV record %r: %s", record, exc)
        return None
    return _row_values(fields)


def _has_open_quote(text: str) -> bool:
    # Escaped quotes come in pairs, so an odd count leaves a quoted field open
    return text.count('"') % 2 == 1


def parse_csv(
    text: str,
    *,
    id_factory: Callable[[], str] = new_transaction_id,
    imported_at: Optional[datetime] = None,
) -> ParseResult:
    """Parse an exported document back into fresh records.

    The first line is the header and is discarded. Every other line is a
    record of its own, except that a quoted note may continue onto the
    following lines. A continuation line that is a valid row by itself is
    never absorbed: the line holding the stray quote is skipped instead
    and parsing resumes on the next line. Blank lines are ignored and
    malformed rows are counted in ``skipped``. Ids in the file are never
    reused.
    """

    created_at = format_timestamp(imported_at or datetime.now().astimezone())
    result = ParseResult()
    lines = [line.rstrip("\r") for line in text.lstrip("\ufeff").split("\n")]

    index = 1
    while index < len(lines):
        line = lines[index]
        if not line.strip():
            index += 1
            continue

        record, end = line, index + 1
        while _has_open_quote(record) and end < len(lines):
            continuation = lines[end]
            if not _has_open_quote(continuation) and _read_record(continuation) is not None:
                break
            record = f"{record}\n{continuation}"
            end += 1

        if _has_open_quote(record):
            logger.debug("Skipping CSV line %d with an unterminated quote", index + 1)
            result.skipped += 1
            index += 1
            continue

        values = _read_record(record)
        if values is None:
            logger.debug("Skipping malformed CSV row at line %d: %r", index + 1, record)
            result.skipped += 1
        else:
            day, category, amount, note = values
            result.records.append(
                Transaction(
                    id=id_factory(),
                    amount=amount,
                    category=category,
                    note=note,
                    date=day,
                    created_at=created_at,
                )
            )
        index = end
    return result


def read_csv_file(csv_path: Path) -> str:
    """Read a CSV file as text, tolerating a UTF-8 byte-order mark."""

    with csv_path.open("r", newline="", encoding="utf-8-sig") as fh:
        return fh.read()


__all__ = [
    "CSV_HEADER",
    "ParseResult",
    "default_export_filename",
    "export_csv",
    "format_amount",
    "parse_csv",
    "quote_field",
    "read_csv_file",
    "write_csv",
]
