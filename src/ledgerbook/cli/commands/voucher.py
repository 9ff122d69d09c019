"""Voucher entry, posting and listing commands."""

from dataclasses import replace

import click
from ledgerbook.cli.account_resolution import resolve_account_or_exit
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.cli.formatting import account_label, format_money
from ledgerbook.domain.entities import ZERO, Transaction, TransactionLine
from ledgerbook.domain.errors import BalanceMismatch, DomainError
from ledgerbook.domain.ledger import TRANSACTION_STATUSES, new_id
from ledgerbook.utils.amount_parser import parse_amount
from ledgerbook.utils.date_parser import parse_date


def _build_lines(ctx, store, debits, credits) -> tuple[TransactionLine, ...]:
    lines = []
    for side, entries in (("dr", debits), ("cr", credits)):
        for account, amount in entries:
            account_id = resolve_account_or_exit(ctx, store, account)
            try:
                value = parse_amount(amount, allow_negative=False)
            except ValueError as e:
                handle_domain_error(ctx, e)
            lines.append(
                TransactionLine(
                    id=new_id(),
                    account_id=account_id,
                    dr=value if side == "dr" else ZERO,
                    cr=value if side == "cr" else ZERO,
                )
            )
    return tuple(lines)


def _apply_line_narrations(ctx, lines, narrations) -> tuple[TransactionLine, ...]:
    if len(narrations) > len(lines):
        click.echo(f"Error: {len(narrations)} line narrations given for {len(lines)} lines.", err=True)
        ctx.exit(1)
    return tuple(
        replace(line, narration=narrations[i]) if i < len(narrations) else line
        for i, line in enumerate(lines)
    )


def _refuse_pending_draft(ctx, store) -> None:
    draft = store.load_draft()
    if draft is not None:
        click.echo(
            f"Error: Voucher #{draft.voucher_no} is still in progress. "
            "Use 'voucher draft --save' or 'voucher draft --discard' first.",
            err=True,
        )
        ctx.exit(1)


def _find_voucher_or_exit(ctx, store, voucher_no: int) -> Transaction:
    tx = store.find_voucher(voucher_no)
    if tx is None:
        click.echo(f"Error: Voucher #{voucher_no} not found", err=True)
        ctx.exit(1)
    return tx


def _echo_voucher(store, tx: Transaction) -> None:
    status = "Posted" if tx.posted else "Draft"
    click.echo(f"\nVoucher #{tx.voucher_no}  {tx.date.isoformat()}  [{status}]")
    if tx.narration:
        click.echo(f"Narration: {tx.narration}")
    click.echo("-" * 78)
    for line in tx.lines:
        label = account_label(store.get_account(line.account_id))
        narration = line.narration or tx.narration
        click.echo(
            f"{label:30s} | {format_money(line.dr):>12s} | {format_money(line.cr):>12s} | {narration}"
        )
    click.echo("-" * 78)
    click.echo(f"{'Total':30s} | {format_money(tx.total_dr):>12s} | {format_money(tx.total_cr):>12s}")


def _report_mismatch(ctx, store, tx: Transaction, error: BalanceMismatch) -> None:
    store.save_draft(tx)
    click.echo(
        f"Error: Totals do not match!\n"
        f"DR: {error.dr_sum:.2f}\nCR: {error.cr_sum:.2f}\nDifference: {error.difference:.2f}",
        err=True,
    )
    click.echo("Voucher kept as in-progress draft. Use 'voucher draft' to review it.", err=True)
    ctx.exit(1)


@click.group()
def voucher_group():
    """Record and post vouchers."""
    pass


@voucher_group.command("add")
@click.option("--date", "date_str", default="today", help="Voucher date (default: today)")
@click.option("--narration", default="", help="Voucher narration")
@click.option("--dr", "debits", nargs=2, multiple=True, metavar="ACCOUNT AMOUNT", help="Debit line (repeatable)")
@click.option("--cr", "credits", nargs=2, multiple=True, metavar="ACCOUNT AMOUNT", help="Credit line (repeatable)")
@click.option(
    "--line-narration",
    "line_narrations",
    multiple=True,
    help="Narration for the next line, debits first (repeatable)",
)
@click.option("--post", is_flag=True, help="Post the voucher instead of saving it as a draft")
@click.pass_context
def add_voucher(ctx, date_str: str, narration: str, debits, credits, line_narrations, post: bool):
    """Record a voucher.

    The voucher takes the next voucher number. Without --post it is saved
    as a draft, which does not count towards balances or reports. A voucher
    left in progress by a failed post must be saved or discarded first.

    Examples:
        ledgerbook voucher add --date 2024-01-05 --narration "Cash sale" --dr Cash 500 --cr Sales 500 --post
        ledgerbook voucher add --dr 1 100 --dr 2 50 --cr 3 150
        ledgerbook voucher add --dr Rent 900 --cr Bank 900 --line-narration "March rent"
    """
    store = ctx.obj["store"]
    _refuse_pending_draft(ctx, store)

    try:
        voucher_date = parse_date(date_str)
    except ValueError as e:
        click.echo(f"Error: Invalid date: {e}", err=True)
        ctx.exit(1)

    try:
        draft = store.new_draft(on_date=voucher_date, narration=narration)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    lines = _apply_line_narrations(ctx, _build_lines(ctx, store, debits, credits), line_narrations)
    tx = replace(draft, lines=lines)

    if post:
        try:
            saved = store.post_transaction(tx)
        except BalanceMismatch as e:
            _report_mismatch(ctx, store, tx, e)
            return
        except DomainError as e:
            handle_domain_error(ctx, e)
            return
        click.echo(f"Posted voucher #{saved.voucher_no}")
    else:
        if len(tx.lines) < 2:
            click.echo("Error: Minimum 2 lines required for double entry.", err=True)
            ctx.exit(1)
        try:
            saved = store.save_transaction(tx)
        except DomainError as e:
            handle_domain_error(ctx, e)
            return
        click.echo(f"Saved draft voucher #{saved.voucher_no}")


@voucher_group.command("post")
@click.argument("voucher_no", type=int)
@click.pass_context
def post_voucher(ctx, voucher_no: int):
    """Post a draft voucher so it counts towards balances."""
    store = ctx.obj["store"]
    tx = _find_voucher_or_exit(ctx, store, voucher_no)

    if tx.posted:
        click.echo(f"Voucher #{voucher_no} is already posted.")
        return

    try:
        store.post_transaction(tx)
    except BalanceMismatch as e:
        _report_mismatch(ctx, store, tx, e)
        return
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Posted voucher #{voucher_no}")


@voucher_group.command("list")
@click.option("--status", type=click.Choice(TRANSACTION_STATUSES), default="all", show_default=True)
@click.option("--search", default="", help="Match voucher number, narration, date or account name")
@click.pass_context
def list_vouchers(ctx, status: str, search: str):
    """List vouchers, newest first."""
    store = ctx.obj["store"]
    vouchers = store.search_transactions(term=search, status=status)

    if not vouchers:
        if search or status != "all":
            click.echo("No vouchers match the given filters.")
        else:
            click.echo("No vouchers found.")
        return

    click.echo(f"\n{'No.':>5s} | {'Date':10s} | {'Status':6s} | {'Amount':>12s} | Narration")
    click.echo("-" * 72)
    for tx in vouchers:
        status_label = "Posted" if tx.posted else "Draft"
        click.echo(
            f"{tx.voucher_no:5d} | {tx.date.isoformat()} | {status_label:6s} | "
            f"{format_money(tx.total_dr):>12s} | {tx.narration}"
        )


@voucher_group.command("show")
@click.argument("voucher_no", type=int)
@click.pass_context
def show_voucher(ctx, voucher_no: int):
    """Show the lines of a voucher."""
    store = ctx.obj["store"]
    tx = _find_voucher_or_exit(ctx, store, voucher_no)
    _echo_voucher(store, tx)


@voucher_group.command("edit")
@click.argument("voucher_no", type=int)
@click.option("--date", "date_str", help="New voucher date")
@click.option("--narration", help="New voucher narration")
@click.option("--dr", "debits", nargs=2, multiple=True, metavar="ACCOUNT AMOUNT", help="Debit line (replaces all lines)")
@click.option("--cr", "credits", nargs=2, multiple=True, metavar="ACCOUNT AMOUNT", help="Credit line (replaces all lines)")
@click.option(
    "--line-narration",
    "line_narrations",
    multiple=True,
    help="Narration for the next line, in voucher line order (repeatable)",
)
@click.pass_context
def edit_voucher(ctx, voucher_no: int, date_str, narration, debits, credits, line_narrations):
    """Change the date, narration or lines of a voucher.

    Giving any --dr or --cr replaces every line of the voucher. A posted
    voucher is checked again and stays posted; if its totals no longer
    match nothing is changed and the edit is kept as the in-progress voucher.

    Examples:
        ledgerbook voucher edit 3 --date 2024-01-06 --narration "Cash sale, corrected"
        ledgerbook voucher edit 3 --dr Cash 450 --cr Sales 450
        ledgerbook voucher edit 3 --line-narration "Till" --line-narration "Counter sale"
    """
    store = ctx.obj["store"]
    tx = _find_voucher_or_exit(ctx, store, voucher_no)

    pending = store.load_draft()
    if pending is not None and pending.id != tx.id:
        _refuse_pending_draft(ctx, store)

    changes = {}
    if date_str is not None:
        try:
            changes["date"] = parse_date(date_str)
        except ValueError as e:
            click.echo(f"Error: Invalid date: {e}", err=True)
            ctx.exit(1)
    if narration is not None:
        changes["narration"] = narration

    lines = tx.lines
    if debits or credits:
        lines = _build_lines(ctx, store, debits, credits)
        if len(lines) < 2:
            click.echo("Error: Minimum 2 lines required for double entry.", err=True)
            ctx.exit(1)
    if line_narrations:
        lines = _apply_line_narrations(ctx, lines, line_narrations)
    if lines != tx.lines:
        changes["lines"] = lines

    if not changes:
        click.echo("Nothing to update.")
        return

    edited = replace(tx, **changes)
    try:
        if edited.posted:
            store.post_transaction(edited)
        else:
            store.save_transaction(edited)
    except BalanceMismatch as e:
        _report_mismatch(ctx, store, edited, e)
        return
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Updated voucher #{voucher_no}")


@voucher_group.command("delete")
@click.argument("voucher_no", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_voucher(ctx, voucher_no: int, yes: bool):
    """Delete a voucher, posted or draft.

    Deleting the highest-numbered voucher makes its number available again.
    """
    store = ctx.obj["store"]
    tx = _find_voucher_or_exit(ctx, store, voucher_no)

    if not yes and not click.confirm(f"Delete Voucher #{voucher_no}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        store.delete_transaction(tx.id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Deleted voucher #{voucher_no}")


@voucher_group.command("draft")
@click.option("--save", is_flag=True, help="Save the in-progress voucher as a draft voucher")
@click.option("--discard", is_flag=True, help="Discard the in-progress voucher")
@click.pass_context
def draft_voucher(ctx, save: bool, discard: bool):
    """Review the in-progress voucher left by a failed post."""
    store = ctx.obj["store"]

    if save and discard:
        click.echo("Error: --save and --discard cannot be combined.", err=True)
        ctx.exit(1)

    draft = store.load_draft()
    if draft is None:
        click.echo("No in-progress voucher.")
        return

    if discard:
        store.discard_draft()
        click.echo(f"Discarded in-progress voucher #{draft.voucher_no}")
        return

    if save:
        taken = store.find_voucher(draft.voucher_no)
        if taken is not None and taken.id != draft.id:
            draft = replace(draft, voucher_no=store.meta.next_voucher_no)
        try:
            store.save_transaction(replace(draft, posted=False))
        except DomainError as e:
            handle_domain_error(ctx, e)
            return
        click.echo(f"Saved draft voucher #{draft.voucher_no}")
        return

    _echo_voucher(store, draft)


def register_commands(cli):
    """Register voucher commands with main CLI."""
    cli.add_command(voucher_group, name="voucher")
