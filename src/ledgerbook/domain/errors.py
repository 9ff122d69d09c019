"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested account or voucher does not exist."""


class BalanceMismatch(DomainError):
    """Voucher debits and credits do not agree, so it cannot be posted."""

    def __init__(self, difference: Decimal, dr_sum: Decimal, cr_sum: Decimal):
        self.difference = difference
        self.dr_sum = dr_sum
        self.cr_sum = cr_sum
        super().__init__(balance_mismatch(difference, dr_sum, cr_sum))


class UsageConflict(DomainError):
    """Account deletion blocked because transaction lines reference it."""

    def __init__(self, account_id: str, line_count: int):
        self.account_id = account_id
        self.line_count = line_count
        super().__init__(account_delete_blocked(account_id, line_count))


class InvalidFormat(DomainError):
    """Imported document does not have the ledger snapshot shape."""


class PersistenceError(DomainError):
    """Saving or clearing the stored ledger failed."""


def account_not_found(account_id: str) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def voucher_not_found(voucher_no: int) -> str:
    """Return message for missing voucher."""
    return f"Voucher #{voucher_no} not found"


def balance_mismatch(difference: Decimal, dr_sum: Decimal, cr_sum: Decimal) -> str:
    """Return message for a voucher whose totals do not match."""
    return (
        f"Totals do not match! DR: {dr_sum:.2f} CR: {cr_sum:.2f} "
        f"Difference: {difference:.2f}"
    )


def account_delete_blocked(account_id: str, line_count: int) -> str:
    """Return message when account is used by transaction lines."""
    return (
        f"Cannot delete account {account_id}: it is used in "
        f"{line_count} transaction line{'s' if line_count != 1 else ''}."
    )
