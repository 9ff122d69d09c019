"""Dashboard command."""

import click
from ledgerbook.cli.formatting import format_money
from ledgerbook.domain.dashboard import DashboardService


@click.command("dashboard")
@click.pass_context
def dashboard(ctx):
    """Show cash and bank totals and pinned accounts."""
    service = DashboardService(ctx.obj["store"])
    stats = service.stats()

    pinned = service.pinned_balances()
    if pinned:
        click.echo("\nPinned Accounts:")
        click.echo("-" * 40)
        for acc, balance in pinned:
            click.echo(f"{acc.name:20s} {format_money(balance):>18s}")

    change = stats.current_total - stats.prev_total

    click.echo("")
    click.echo(f"Bank Total:      {format_money(stats.bank_total):>18s}")
    click.echo(f"Cash Total:      {format_money(stats.cash_total):>18s}")
    click.echo(f"Current Total:   {format_money(stats.current_total):>18s}")
    click.echo(f"Previous Total:  {format_money(stats.prev_total):>18s}  (change {format_money(change)})")
    click.echo(f"Accounts: {stats.account_count}  Posted vouchers: {stats.posted_count}")


def register_commands(cli):
    """Register dashboard command with main CLI."""
    cli.add_command(dashboard, name="dashboard")
