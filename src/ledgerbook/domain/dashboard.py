"""Dashboard figures derived from the current ledger."""

from decimal import Decimal
from typing import Iterable, Optional

from ledgerbook.domain.balances import compute_balances, sorted_posted
from ledgerbook.domain.entities import (
    ZERO,
    Account,
    DashboardStats,
    StorageStats,
    Transaction,
)
from ledgerbook.domain.ledger import LedgerStore


def cash_and_bank_totals(
    accounts: Iterable[Account], transactions: Iterable[Transaction]
) -> tuple[Decimal, Decimal]:
    """Sum balances of accounts whose type mentions cash or bank.

    Types are matched by case-insensitive substring, so "Cashbox" counts as
    cash and "bank-savings" as bank.
    """
    accounts = list(accounts)
    balances = compute_balances(accounts, transactions)

    cash_total = ZERO
    bank_total = ZERO
    for acc in accounts:
        account_type = (acc.type or "").lower()
        balance = balances.get(acc.id, ZERO)
        if "cash" in account_type:
            cash_total += balance
        if "bank" in account_type:
            bank_total += balance
    return cash_total, bank_total


class DashboardService:
    """Service for dashboard and storage summary figures."""

    def __init__(self, store: LedgerStore):
        """Initialize dashboard service.

        Args:
            store: Ledger store to read from
        """
        self.store = store

    def stats(self) -> DashboardStats:
        """Compute cash/bank totals now and before the last posted voucher."""
        accounts = self.store.accounts
        transactions = self.store.transactions

        cash_total, bank_total = cash_and_bank_totals(accounts, transactions)
        current_total = cash_total + bank_total

        posted = sorted_posted(transactions)
        if posted:
            prev_cash, prev_bank = cash_and_bank_totals(accounts, posted[:-1])
            prev_total = prev_cash + prev_bank
        else:
            prev_total = current_total

        return DashboardStats(
            cash_total=cash_total,
            bank_total=bank_total,
            current_total=current_total,
            prev_total=prev_total,
            account_count=len(accounts),
            posted_count=len(posted),
        )

    def pinned_balances(self) -> list[tuple[Account, Decimal]]:
        """Return pinned accounts with their current balance."""
        accounts = self.store.accounts
        balances = compute_balances(accounts, self.store.transactions)
        return [(acc, balances.get(acc.id, ZERO)) for acc in accounts if acc.pinned]

    def storage_stats(self) -> StorageStats:
        """Return stored size, debit volume and last activity."""
        transactions = self.store.transactions
        size_kib = (Decimal(self.store.storage.stored_size()) / Decimal(1024)).quantize(Decimal("0.01"))
        timestamps = [tx.timestamp for tx in transactions if tx.timestamp]

        return StorageStats(
            size_kib=size_kib,
            total_dr_volume=sum((tx.total_dr for tx in transactions), ZERO),
            transaction_count=len(transactions),
            last_activity=max(timestamps) if timestamps else None,
        )

    def activity_log(self, limit: Optional[int] = None) -> list[Transaction]:
        """Return timestamped transactions, most recent first."""
        log = sorted(
            (tx for tx in self.store.transactions if tx.timestamp),
            key=lambda tx: tx.timestamp,
            reverse=True,
        )
        return log if limit is None else log[:limit]
