"""Shared output formatting for CLI commands."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from ledgerbook.domain.entities import Account


def format_money(amount: Decimal) -> str:
    """Format an amount with thousands separators and two decimals."""
    return f"{amount:,.2f}"


def account_label(account: Optional[Account]) -> str:
    """Return "Name (type)" for an account, or "Unknown" for a missing one."""
    if account is None:
        return "Unknown"
    return f"{account.name} ({account.type})"


def format_timestamp(millis: int) -> str:
    """Format epoch milliseconds as local date and time."""
    return datetime.fromtimestamp(millis / 1000).strftime("%Y-%m-%d %H:%M:%S")
