"""Validation rules applied before accounts and vouchers are stored."""

from decimal import Decimal
from typing import Sequence

from ledgerbook.domain.entities import Transaction, TransactionLine
from ledgerbook.domain.errors import BalanceMismatch, ValidationError

BALANCE_TOLERANCE = Decimal("0.01")
MIN_LINES = 2


def balance_difference(transaction: Transaction) -> Decimal:
    """Return the signed difference between debit and credit totals."""
    return transaction.total_dr - transaction.total_cr


def validate_for_posting(transaction: Transaction) -> None:
    """Check that a voucher balances well enough to be posted.

    Args:
        transaction: Voucher to check

    Raises:
        BalanceMismatch: If |sum(dr) - sum(cr)| exceeds the tolerance
    """
    dr_sum = transaction.total_dr
    cr_sum = transaction.total_cr
    difference = dr_sum - cr_sum
    if abs(difference) > BALANCE_TOLERANCE:
        raise BalanceMismatch(difference, dr_sum, cr_sum)


def validate_line_count(lines: Sequence[TransactionLine]) -> None:
    """Require at least two lines for a double entry."""
    if len(lines) < MIN_LINES:
        raise ValidationError("Minimum 2 lines required for double entry.")


def validate_account_fields(name: str, account_type: str) -> None:
    """Check the fields an account cannot be stored without.

    Raises:
        ValidationError: If name or type is blank
    """
    if not name or not name.strip():
        raise ValidationError("Account name is required")
    if not account_type or not account_type.strip():
        raise ValidationError("Account type is required")
