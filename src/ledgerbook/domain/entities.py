"""Domain model entities for ledgerbook.

These are pure data classes representing bookkeeping concepts, independent of
how the ledger is persisted. The store replaces entities wholesale (via
``dataclasses.replace``) instead of mutating them.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional


CANONICAL_ACCOUNT_TYPES = ("cash", "bank", "income", "expense", "liability", "asset")

ZERO = Decimal("0")


@dataclass(frozen=True)
class Account:
    """Ledger account domain entity."""

    id: str
    serial: int
    name: str
    type: str
    narration: str = ""
    opening_balance: Decimal = ZERO
    pinned: bool = False


@dataclass(frozen=True)
class TransactionLine:
    """A single debit/credit line of a voucher."""

    id: str
    account_id: str
    narration: str = ""
    dr: Decimal = ZERO
    cr: Decimal = ZERO


@dataclass(frozen=True)
class Transaction:
    """Voucher domain entity."""

    id: str
    voucher_no: int
    date: date
    narration: str
    lines: tuple[TransactionLine, ...]
    posted: bool = False
    timestamp: int = 0

    @property
    def total_dr(self) -> Decimal:
        return sum((line.dr for line in self.lines), ZERO)

    @property
    def total_cr(self) -> Decimal:
        return sum((line.cr for line in self.lines), ZERO)


@dataclass(frozen=True)
class LedgerMeta:
    """Derived counters kept next to the ledger data."""

    next_account_serial: int = 1
    next_voucher_no: int = 1


@dataclass(frozen=True)
class LedgerState:
    """The whole ledger aggregate as persisted."""

    accounts: tuple[Account, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    meta: LedgerMeta = field(default_factory=LedgerMeta)


@dataclass(frozen=True)
class ReportRow:
    """One statement line."""

    voucher_no: int
    date: date
    narration: str
    account_id: str
    dr: Decimal
    cr: Decimal
    balance: Decimal


@dataclass(frozen=True)
class Statement:
    """Statement for a date window, optionally for a single account."""

    account_id: Optional[str]
    from_date: Optional[date]
    to_date: Optional[date]
    rows: tuple[ReportRow, ...]
    opening_balance: Decimal
    total_dr: Decimal
    total_cr: Decimal
    closing_balance: Decimal


@dataclass(frozen=True)
class DashboardStats:
    """Headline figures for the dashboard."""

    cash_total: Decimal
    bank_total: Decimal
    current_total: Decimal
    prev_total: Decimal
    account_count: int
    posted_count: int


@dataclass(frozen=True)
class StorageStats:
    """Size and activity figures for the stored ledger."""

    size_kib: Decimal
    total_dr_volume: Decimal
    transaction_count: int
    last_activity: Optional[int]
