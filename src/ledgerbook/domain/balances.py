"""Account balance calculation over the posted transaction set."""

from decimal import Decimal
from typing import Iterable

from ledgerbook.domain.entities import Account, Transaction


def sort_key(transaction: Transaction) -> tuple:
    """Canonical ledger ordering: date, then voucher number."""
    return (transaction.date, transaction.voucher_no)


def sorted_posted(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Return posted transactions in ledger order (oldest first)."""
    return sorted((tx for tx in transactions if tx.posted), key=sort_key)


def compute_balances(
    accounts: Iterable[Account], transactions: Iterable[Transaction]
) -> dict[str, Decimal]:
    """Compute the running balance of every account.

    Each account starts at its opening balance; every line of a posted
    transaction then adds ``dr - cr``. Drafts are skipped, and lines that point
    at an account not in ``accounts`` are ignored.

    Args:
        accounts: Accounts to compute balances for
        transactions: Transactions to fold over (order does not matter)

    Returns:
        Mapping of account ID to balance
    """
    balances = {account.id: account.opening_balance for account in accounts}

    for tx in transactions:
        if not tx.posted:
            continue
        for line in tx.lines:
            if line.account_id in balances:
                balances[line.account_id] += line.dr - line.cr

    return balances
