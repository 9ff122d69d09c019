"""Utility for resolving account references to account IDs."""

from ledgerbook.domain.errors import NotFoundError
from ledgerbook.domain.ledger import LedgerStore


def resolve_account(store: LedgerStore, account: str | int) -> str:
    """Resolve an account serial number, ID or name to the account ID.

    Args:
        store: LedgerStore instance
        account: Serial number (int or numeric string), account ID
            (e.g. "acc_1a2b3c4d5") or exact account name

    Returns:
        Account ID

    Raises:
        NotFoundError: If no account matches
    """
    if isinstance(account, int) or (isinstance(account, str) and account.strip().isdigit()):
        serial = int(account)
        for acc in store.accounts:
            if acc.serial == serial:
                return acc.id
        raise NotFoundError(f"Account #{serial} not found")

    if store.get_account(account) is not None:
        return account

    for acc in store.accounts:
        if acc.name == account:
            return acc.id

    # Fall back to a case-insensitive name match
    matches = [acc for acc in store.accounts if acc.name.lower() == account.lower()]
    if len(matches) == 1:
        return matches[0].id

    raise NotFoundError(f"Account '{account}' not found")
