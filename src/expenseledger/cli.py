"""Command-line interface for ExpenseLedger."""

from __future__ import annotations

import functools
from pathlib import Path
from typing import Optional

import click

from .config import BaseConfig
from .context import AppContext, create_app_context
from .errors import LedgerError
from .logging_config import setup_logging
from .models.transaction import KNOWN_CATEGORIES, Transaction
from .services.query import ALL_CATEGORIES, QUICK_FILTERS, LedgerQuery


def _format_row(tx: Transaction) -> str:
    note = f"  {tx.note}" if tx.note else ""
    return f"{tx.id}  {tx.date}  {tx.category:<13} {tx.amount:>10.2f}{note}"


def _notify_errors(func):
    """Report ledger failures as a one-line message instead of a traceback."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except LedgerError as exc:
            raise click.ClickException(str(exc)) from exc

    return wrapper


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Track personal expenses with a 7-day trash."""

    if ctx.obj is None:
        config = BaseConfig()
        setup_logging(config)
        ctx.obj = create_app_context(config)


pass_app = click.make_pass_decorator(AppContext)


@cli.command("add")
@click.argument("amount")
@click.option("--category", "-c", default="General", show_default=True,
              help=f"One of {', '.join(KNOWN_CATEGORIES)} (free text allowed).")
@click.option("--note", "-n", default="", help="Optional note.")
@click.option("--date", "-d", "day", default=None, help="YYYY-MM-DD, defaults to today.")
@pass_app
@_notify_errors
def add_command(app: AppContext, amount: str, category: str, note: str, day: Optional[str]) -> None:
    """Add an expense."""

    tx = app.ledger.add(amount, category=category, note=note, date=day)
    click.echo("Expense added successfully!")
    click.echo(_format_row(tx))


@cli.command("edit")
@click.argument("transaction_id")
@click.option("--amount", default=None)
@click.option("--category", "-c", default=None)
@click.option("--note", "-n", default=None)
@click.option("--date", "-d", "day", default=None)
@pass_app
@_notify_errors
def edit_command(
    app: AppContext,
    transaction_id: str,
    amount: Optional[str],
    category: Optional[str],
    note: Optional[str],
    day: Optional[str],
) -> None:
    """Edit an expense's amount, category, note or date."""

    tx = app.ledger.update(transaction_id, amount=amount, category=category, note=note, date=day)
    if tx is None:
        click.echo(f"No transaction with id {transaction_id}.")
        return
    click.echo("Transaction updated!")
    click.echo(_format_row(tx))


@cli.command("list")
@click.option("--search", "-s", default="", help="Match note or category text.")
@click.option("--category", "-c", default=ALL_CATEGORIES, show_default=True)
@click.option("--from", "date_from", default=None, help="Inclusive start date.")
@click.option("--to", "date_to", default=None, help="Inclusive end date.")
@click.option("--preset", type=click.Choice(QUICK_FILTERS), default=None,
              help="Quick date range; overrides --from/--to.")
@pass_app
def list_command(
    app: AppContext,
    search: str,
    category: str,
    date_from: Optional[str],
    date_to: Optional[str],
    preset: Optional[str],
) -> None:
    """List expenses, newest date first."""

    query = LedgerQuery(search_text=search, category=category, date_from=date_from, date_to=date_to)
    if preset:
        query = query.with_preset(preset, app.clock.today())
    rows = app.ledger.list(query)
    if not rows:
        click.echo("No transactions found.")
        return
    for tx in rows:
        click.echo(_format_row(tx))


@cli.command("delete")
@click.argument("transaction_id")
@pass_app
def delete_command(app: AppContext, transaction_id: str) -> None:
    """Move an expense to the trash."""

    if app.ledger.delete(transaction_id) is None:
        click.echo(f"No transaction with id {transaction_id}.")
        return
    click.echo("Moved to trash. Will be permanently deleted in 7 days.")


@cli.command("trash")
@pass_app
def trash_command(app: AppContext) -> None:
    """Show the trash with time left before each entry is purged."""

    items = app.ledger.trash()
    if not items:
        click.echo("Trash is empty.")
        return
    for item in items:
        click.echo(f"{_format_row(item)}  [{app.ledger.expiry_description(item.deleted_at)}]")


@cli.command("restore")
@click.argument("ids", nargs=-1, required=True)
@pass_app
def restore_command(app: AppContext, ids: tuple[str, ...]) -> None:
    """Restore one or more trashed expenses."""

    if len(ids) == 1:
        restored = [tx for tx in [app.ledger.restore(ids[0])] if tx is not None]
    else:
        restored = app.ledger.restore_selected(ids)
    click.echo(f"Restored {len(restored)} transaction(s).")


@cli.command("purge")
@click.argument("ids", nargs=-1, required=True)
@pass_app
def purge_command(app: AppContext, ids: tuple[str, ...]) -> None:
    """Permanently delete trashed expenses."""

    if len(ids) == 1:
        count = 1 if app.ledger.permanently_delete(ids[0]) else 0
    else:
        count = app.ledger.delete_selected(ids)
    click.echo(f"Permanently deleted {count} transaction(s).")


@cli.command("empty-trash")
@click.confirmation_option(prompt="Permanently delete everything in the trash?")
@pass_app
def empty_trash_command(app: AppContext) -> None:
    """Permanently delete everything in the trash."""

    count = app.ledger.empty_trash()
    click.echo("Trash emptied." if count else "Trash is already empty.")


@cli.command("stats")
@pass_app
def stats_command(app: AppContext) -> None:
    """Show today's and this month's totals plus a category breakdown."""

    stats = app.ledger.stats()
    click.echo(f"Today:      {stats.today_total:,.2f}")
    click.echo(f"This month: {stats.month_total:,.2f}")
    click.echo("Last 7 days:")
    for day in stats.last_7_days:
        click.echo(f"  {day.date}  {day.total:>10.2f}")
    if stats.category_totals:
        click.echo("By category:")
        for name, total in stats.category_totals.items():
            click.echo(f"  {name:<13} {total:>10.2f}")


@cli.command("export")
@click.argument("output", required=False, type=click.Path(dir_okay=False, path_type=Path))
@pass_app
@_notify_errors
def export_command(app: AppContext, output: Optional[Path]) -> None:
    """Export active expenses to CSV (default expenses_<today>.csv)."""

    path = app.ledger.export_csv_file(output)
    click.echo(f"CSV exported successfully: {path}")


@cli.command("import")
@click.argument("csv_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@pass_app
@_notify_errors
def import_command(app: AppContext, csv_path: Path) -> None:
    """Import expenses from a CSV export."""

    result = app.ledger.import_csv_file(csv_path)
    click.echo(f"Imported {result.imported} transactions!")


@cli.command("wipe")
@click.confirmation_option(prompt="Delete ALL transactions and trash? This cannot be undone.")
@pass_app
def wipe_command(app: AppContext) -> None:
    """Delete all data, including the trash."""

    app.ledger.delete_all_data()
    click.echo("All data deleted successfully")


def main() -> None:  # pragma: no cover - console entry point
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()
