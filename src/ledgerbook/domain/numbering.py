"""Voucher numbering and account serial policy."""

from dataclasses import replace
from typing import Iterable

from ledgerbook.domain.entities import Account, LedgerState, Transaction


def next_voucher_no(transactions: Iterable[Transaction]) -> int:
    """Derive the next voucher number from the current transaction set.

    The number is always recomputed as ``max + 1`` rather than kept as a
    counter, so deleting the highest voucher frees its number for reuse.
    Gaps in the middle of the sequence are never filled.
    """
    return max((tx.voucher_no for tx in transactions), default=0) + 1


def next_account_serial(accounts: Iterable[Account], current: int = 1) -> int:
    """Return a serial above every existing account serial.

    Serials are never reused, so a counter already past the highest serial
    is kept.
    """
    return max(current, max((acc.serial for acc in accounts), default=0) + 1)


def reconcile_counters(state: LedgerState) -> LedgerState:
    """Rederive the meta counters of a loaded or imported ledger."""
    meta = replace(
        state.meta,
        next_account_serial=next_account_serial(state.accounts, state.meta.next_account_serial),
        next_voucher_no=next_voucher_no(state.transactions),
    )
    return replace(state, meta=meta)
