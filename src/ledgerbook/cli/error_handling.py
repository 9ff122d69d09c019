"""CLI error handling helpers."""

import logging

import click

from ledgerbook.domain.errors import DomainError, PersistenceError

logger = logging.getLogger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Print a ledger error as ``Error: ...`` and exit with status 1.

    A ``PersistenceError`` means the change was not written; the database
    path is added so the user can check it.
    """
    logger.debug("Command %s failed", ctx.command_path, exc_info=error)
    click.echo(f"Error: {error}", err=True)
    if isinstance(error, PersistenceError):
        storage = (ctx.find_root().obj or {}).get("storage")
        database_url = getattr(storage, "database_url", None)
        if database_url:
            click.echo(f"Check that {database_url} is writable.", err=True)
    ctx.exit(1)
