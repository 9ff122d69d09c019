"""CLI helper for turning an account argument into an account ID."""

from __future__ import annotations

import click
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.ledger import LedgerStore
from ledgerbook.utils.account_resolver import resolve_account


def resolve_account_or_exit(ctx: click.Context, store: LedgerStore, account: str | int) -> str:
    """Resolve account serial, ID or name, or exit with a CLI error.

    Accepts "1", "acc_3f9a2c1d0" or "Cash" on the command line.
    """
    try:
        return resolve_account(store, account)
    except ValueError as exc:
        handle_domain_error(ctx, exc)
