"""Main CLI entry point."""

import click
from ledgerbook.database.factories import create_sqlite_storage
from ledgerbook.domain.ledger import LedgerStore
from ledgerbook.logging_config import configure_logging

# Import and register all commands at module level
from ledgerbook.cli.commands import (
    account,
    voucher,
    report,
    dashboard,
    data,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides LEDGERBOOK_DB_PATH environment variable)",
    envvar="LEDGERBOOK_DB_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Log ledger operations to stderr")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Ledgerbook - Personal double-entry ledger.

    Keep accounts, record and post vouchers, and print statements and
    cash/bank totals from the posted entries.
    """
    ctx.ensure_object(dict)
    configure_logging(verbose)

    # Open storage only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        storage = create_sqlite_storage(database_path=db_path)
        storage.connect()
        ctx.call_on_close(storage.disconnect)
        ctx.obj["storage"] = storage
        ctx.obj["store"] = LedgerStore(storage)


# Register all commands
account.register_commands(cli)
voucher.register_commands(cli)
report.register_commands(cli)
dashboard.register_commands(cli)
data.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
