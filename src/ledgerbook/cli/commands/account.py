"""Account management commands."""

import click
from ledgerbook.cli.account_resolution import resolve_account_or_exit
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.cli.formatting import format_money
from ledgerbook.domain.balances import compute_balances
from ledgerbook.domain.entities import CANONICAL_ACCOUNT_TYPES
from ledgerbook.domain.errors import DomainError
from ledgerbook.domain.validation import validate_account_fields
from ledgerbook.utils.amount_parser import parse_amount


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--type", "account_type", required=True, help="Account type (cash, bank, income, expense, liability, asset or custom)")
@click.option("--narration", default="", help="Optional description")
@click.option("--opening", default="0", help="Opening balance (default 0)")
@click.pass_context
def create_account(ctx, name: str, account_type: str, narration: str, opening: str):
    """Create a new account.

    Examples:
        ledgerbook account create "Cash" --type cash --opening 1000
        ledgerbook account create "Sales" --type income
        ledgerbook account create "Petty Cashbox" --type cashbox
    """
    store = ctx.obj["store"]

    try:
        validate_account_fields(name, account_type)
        opening_balance = parse_amount(opening)
        account = store.add_account(
            name=name.strip(),
            type=account_type.strip(),
            narration=narration,
            opening_balance=opening_balance,
        )
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created account '{account.name}' (#{account.serial})")


@account_group.command("list")
@click.option("--search", default="", help="Only show accounts whose name, type or narration contains this text")
@click.pass_context
def list_accounts(ctx, search: str):
    """List accounts with their current balance."""
    store = ctx.obj["store"]

    accounts = store.search_accounts(search)
    if not accounts:
        if search:
            click.echo(f'No accounts match "{search}".')
        else:
            click.echo("No accounts found.")
        return

    balances = compute_balances(store.accounts, store.transactions)

    click.echo("\nAccounts:")
    click.echo("-" * 72)
    for acc in accounts:
        pin = "*" if acc.pinned else " "
        click.echo(
            f"#{acc.serial:<3d}{pin}| {acc.name:20s} | {acc.type:10s} | "
            f"{format_money(balances[acc.id]):>15s}"
            + (f" | {acc.narration}" if acc.narration else "")
        )


@account_group.command("types")
def list_types():
    """List the standard account types."""
    for account_type in CANONICAL_ACCOUNT_TYPES:
        click.echo(account_type)


@account_group.command("edit")
@click.argument("account", metavar="ACCOUNT")
@click.option("--name", help="New account name")
@click.option("--type", "account_type", help="New account type")
@click.option("--narration", help="New description")
@click.option("--opening", help="New opening balance")
@click.pass_context
def edit_account(ctx, account: str, name: str | None, account_type: str | None, narration: str | None, opening: str | None):
    """Edit an account.

    ACCOUNT can be an account serial number, ID or name.

    Examples:
        ledgerbook account edit Cash --opening 1500
        ledgerbook account edit 2 --name "Main Bank" --type bank
    """
    store = ctx.obj["store"]
    account_id = resolve_account_or_exit(ctx, store, account)
    current = store.get_account(account_id)

    changes = {}
    if name is not None:
        changes["name"] = name.strip()
    if account_type is not None:
        changes["type"] = account_type.strip()
    if narration is not None:
        changes["narration"] = narration

    try:
        if opening is not None:
            changes["opening_balance"] = parse_amount(opening)
        validate_account_fields(changes.get("name", current.name), changes.get("type", current.type))
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)
        return

    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        updated = store.update_account(account_id, **changes)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Updated account '{updated.name}' (#{updated.serial})")


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account.

    ACCOUNT can be an account serial number, ID or name.

    The account can only be deleted if no voucher line uses it. Delete or
    edit those vouchers first.
    """
    store = ctx.obj["store"]
    account_id = resolve_account_or_exit(ctx, store, account)
    account_obj = store.get_account(account_id)

    if store.account_in_use(account_id):
        click.echo(
            f"Error: Cannot delete account '{account_obj.name}': it is used in transactions.",
            err=True,
        )
        ctx.exit(1)

    if not yes and not click.confirm(f"Are you sure you want to delete account '{account_obj.name}' (#{account_obj.serial})?"):
        click.echo("Deletion cancelled.")
        return

    try:
        store.delete_account(account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Deleted account '{account_obj.name}'")


@account_group.command("pin")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def pin_account(ctx, account: str) -> None:
    """Pin or unpin an account on the dashboard."""
    store = ctx.obj["store"]
    account_id = resolve_account_or_exit(ctx, store, account)

    try:
        updated = store.toggle_pin(account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    state = "Pinned" if updated.pinned else "Unpinned"
    click.echo(f"{state} account '{updated.name}'")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
