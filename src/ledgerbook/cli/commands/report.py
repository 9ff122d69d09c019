"""Statement and balance report commands."""

import click
from ledgerbook.cli.account_resolution import resolve_account_or_exit
from ledgerbook.cli.date_filters import resolve_cli_date_range
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.cli.formatting import account_label, format_money
from ledgerbook.domain.balances import compute_balances
from ledgerbook.domain.errors import DomainError
from ledgerbook.domain.report import StatementService


@click.group()
def report_group():
    """Statements and balances."""
    pass


@report_group.command("statement")
@click.option("--account", help="Account serial, ID or name (default: all accounts)")
@click.option("--from", "from_date", help="Start date, inclusive")
@click.option("--to", "to_date", help="End date, inclusive")
@click.option("--this-month", is_flag=True, help="Statement for the current month")
@click.option("--last-month", is_flag=True, help="Statement for the previous month")
@click.option("--this-year", is_flag=True, help="Statement for the current year")
@click.option("--last-year", is_flag=True, help="Statement for the previous year")
@click.pass_context
def statement(ctx, account, from_date, to_date, this_month, last_month, this_year, last_year):
    """Show a statement of posted vouchers.

    With --account the statement shows the opening balance, a running
    balance per line and the closing balance. Without it every posted line
    in the period is listed.

    Examples:
        ledgerbook report statement --account Cash --from 2024-01-01 --to 2024-01-31
        ledgerbook report statement --last-month
    """
    store = ctx.obj["store"]

    start, end = resolve_cli_date_range(
        ctx,
        from_date=from_date,
        to_date=to_date,
        period_flags={
            "this-month": this_month,
            "last-month": last_month,
            "this-year": this_year,
            "last-year": last_year,
        },
    )

    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, store, account)

    try:
        result = StatementService(store).generate(account_id=account_id, from_date=start, to_date=end)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    title = store.get_account(account_id).name if account_id else "All Accounts"
    period_from = start.isoformat() if start else "Beginning"
    period_to = end.isoformat() if end else "Present"
    click.echo(f"\nStatement: {title}")
    click.echo(f"Statement Period: {period_from} to {period_to}")
    if account_id:
        click.echo(f"Opening Balance: {format_money(result.opening_balance)}")

    click.echo("-" * 90)
    if not result.rows:
        click.echo("No posted transactions in this period.")
    for row in result.rows:
        line = (
            f"{row.date.isoformat()} | {row.voucher_no:5d} | {row.narration[:30]:30s} | "
            f"{format_money(row.dr):>12s} | {format_money(row.cr):>12s}"
        )
        if account_id:
            line += f" | {format_money(row.balance):>14s}"
        else:
            line += f" | {account_label(store.get_account(row.account_id))}"
        click.echo(line)
    click.echo("-" * 90)
    click.echo(
        f"{'Total':>50s} | {format_money(result.total_dr):>12s} | {format_money(result.total_cr):>12s}"
    )

    if account_id:
        click.echo(f"Closing Balance: {format_money(result.closing_balance)}")
    else:
        click.echo(f"Net (DR - CR): {format_money(result.closing_balance)}")


@report_group.command("balances")
@click.pass_context
def balances(ctx):
    """Show the current balance of every account."""
    store = ctx.obj["store"]
    accounts = store.accounts
    if not accounts:
        click.echo("No accounts found.")
        return

    computed = compute_balances(accounts, store.transactions)
    for acc in accounts:
        click.echo(f"#{acc.serial:<3d} | {acc.name:20s} | {acc.type:10s} | {format_money(computed[acc.id]):>15s}")


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
