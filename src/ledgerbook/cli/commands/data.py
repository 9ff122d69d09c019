"""Backup, restore and maintenance commands."""

from datetime import date
from pathlib import Path

import click
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.cli.formatting import format_money, format_timestamp
from ledgerbook.database.mappers import dumps, loads
from ledgerbook.domain.dashboard import DashboardService
from ledgerbook.domain.errors import DomainError


@click.group()
def data_group():
    """Export, import and clear ledger data."""
    pass


@data_group.command("export")
@click.argument("file", required=False, type=click.Path(dir_okay=False))
@click.pass_context
def export_data(ctx, file: str | None):
    """Write a JSON backup of the whole ledger.

    FILE defaults to ledger_backup_<today>.json; use "-" for standard output.
    """
    store = ctx.obj["store"]
    text = dumps(store.export_snapshot(), indent=2)

    if file == "-":
        click.echo(text)
        return

    path = Path(file or f"ledger_backup_{date.today().isoformat()}.json")
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        click.echo(f"Error: Could not write {path}: {e}", err=True)
        ctx.exit(1)
    click.echo(f"Exported ledger to {path}")


@data_group.command("import")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def import_data(ctx, file: str, yes: bool):
    """Replace the ledger with a JSON backup."""
    store = ctx.obj["store"]

    try:
        document = loads(Path(file).read_text(encoding="utf-8"))
    except (OSError, ValueError):
        click.echo("Error: Failed to parse file", err=True)
        ctx.exit(1)

    if not (isinstance(document, dict) and "accounts" in document and "transactions" in document):
        click.echo("Error: Invalid file format", err=True)
        ctx.exit(1)

    if not yes and not click.confirm("Replace current data with import?"):
        click.echo("Import cancelled.")
        return

    try:
        store.import_snapshot(document)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo("Data imported successfully.")


@data_group.command("clear")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def clear_data(ctx, yes: bool):
    """Delete all accounts and vouchers."""
    store = ctx.obj["store"]

    if not yes and not click.confirm("Are you sure you want to clear ALL data? This cannot be undone."):
        click.echo("Clear cancelled.")
        return

    try:
        store.reset_all()
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo("All data has been cleared.")


@data_group.command("stats")
@click.pass_context
def storage_stats(ctx):
    """Show storage size and activity figures."""
    stats = DashboardService(ctx.obj["store"]).storage_stats()

    last_activity = format_timestamp(stats.last_activity) if stats.last_activity else "Never"
    click.echo(f"Storage used:      {stats.size_kib} KB")
    click.echo(f"Transactions:      {stats.transaction_count}")
    click.echo(f"Total DR volume:   {format_money(stats.total_dr_volume)}")
    click.echo(f"Last activity:     {last_activity}")


@data_group.command("log")
@click.option("--limit", type=int, default=20, show_default=True, help="Number of entries to show")
@click.pass_context
def activity_log(ctx, limit: int):
    """Show recent voucher activity, newest first."""
    entries = DashboardService(ctx.obj["store"]).activity_log(limit=limit)
    if not entries:
        click.echo("No activity recorded.")
        return

    for tx in entries:
        status = "Posted" if tx.posted else "Draft"
        click.echo(f"{format_timestamp(tx.timestamp)} | Voucher #{tx.voucher_no} | {status} | {tx.narration}")


def register_commands(cli):
    """Register data commands with main CLI."""
    cli.add_command(data_group, name="data")
