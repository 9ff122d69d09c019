"""CLI helpers for date range resolution."""

from datetime import date

import click

from ledgerbook.utils.date_parser import get_date_range, parse_date


def resolve_cli_date_range(
    ctx,
    *,
    from_date: str | None,
    to_date: str | None,
    period_flags: dict[str, bool],
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from period flags or explicit dates.

    Either bound may be left open.
    """
    period_count = sum(1 for is_set in period_flags.values() if is_set)

    if period_count > 1:
        click.echo(
            "Error: Only one period option (--this-month, --last-month, --this-year, --last-year) can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if period_count > 0 and (from_date or to_date):
        click.echo(
            "Error: Period options (--this-month, --this-year, etc.) cannot be combined with --from or --to.",
            err=True,
        )
        ctx.exit(1)

    start = None
    end = None

    if period_count == 1:
        for period, is_set in period_flags.items():
            if is_set:
                start, end = get_date_range(period)
                break
    else:
        if from_date:
            try:
                start = parse_date(from_date)
            except ValueError as e:
                click.echo(f"Error: Invalid start date: {e}", err=True)
                ctx.exit(1)

        if to_date:
            try:
                end = parse_date(to_date)
            except ValueError as e:
                click.echo(f"Error: Invalid end date: {e}", err=True)
                ctx.exit(1)

    return start, end
