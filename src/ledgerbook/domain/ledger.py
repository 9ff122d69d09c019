"""Ledger store: owns the ledger state and applies every mutation."""

import logging
import time
import uuid
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional

from ledgerbook.database.base import LedgerStorage
from ledgerbook.database.mappers import state_from_dict, state_to_dict
from ledgerbook.domain.balances import sort_key
from ledgerbook.domain.entities import (
    ZERO,
    Account,
    LedgerMeta,
    LedgerState,
    Transaction,
    TransactionLine,
)
from ledgerbook.domain.errors import (
    BalanceMismatch,
    InvalidFormat,
    UsageConflict,
    ValidationError,
)
from ledgerbook.domain.numbering import next_voucher_no, reconcile_counters
from ledgerbook.domain.validation import validate_for_posting, validate_line_count

logger = logging.getLogger(__name__)

TRANSACTION_STATUSES = ("all", "posted", "draft")

_EDITABLE_ACCOUNT_FIELDS = {"name", "type", "narration", "opening_balance", "pinned"}


def new_id(prefix: str = "") -> str:
    """Return a short random identifier."""
    return f"{prefix}{uuid.uuid4().hex[:9]}"


def now_millis() -> int:
    """Return the current time as epoch milliseconds."""
    return int(time.time() * 1000)


class LedgerStore:
    """Owner of the ledger state.

    Every mutation updates the in-memory state first and then persists it
    through the storage collaborator. If persisting fails a
    ``PersistenceError`` is raised, but the in-memory state keeps the change:
    it stays the source of truth for the session.

    The store does not check who is calling it. Account name/type checks
    happen in the calling layer (see ``validate_account_fields``).
    """

    def __init__(self, storage: LedgerStorage):
        """Initialize the store from storage.

        Args:
            storage: Persistence collaborator
        """
        self.storage = storage
        self._state = storage.load()

    # Snapshot access
    @property
    def state(self) -> LedgerState:
        return self._state

    @property
    def meta(self) -> LedgerMeta:
        return self._state.meta

    @property
    def accounts(self) -> list[Account]:
        """Accounts ordered by serial number."""
        return sorted(self._state.accounts, key=lambda acc: acc.serial)

    @property
    def transactions(self) -> list[Transaction]:
        """Transactions in stored order."""
        return list(self._state.transactions)

    def _commit(self, state: LedgerState) -> None:
        self._state = state
        self.storage.save(state)

    # Account operations
    def get_account(self, account_id: str) -> Optional[Account]:
        """Get account by ID."""
        for acc in self._state.accounts:
            if acc.id == account_id:
                return acc
        return None

    def account_usage(self, account_id: str) -> int:
        """Count transaction lines that reference an account."""
        return sum(
            1
            for tx in self._state.transactions
            for line in tx.lines
            if line.account_id == account_id
        )

    def account_in_use(self, account_id: str) -> bool:
        return self.account_usage(account_id) > 0

    def add_account(
        self,
        name: str,
        type: str,
        narration: str = "",
        opening_balance: Decimal = ZERO,
    ) -> Account:
        """Create an account with the next serial number.

        Args:
            name: Display name
            type: Account type (canonical or custom)
            narration: Optional description
            opening_balance: Balance before any transaction

        Returns:
            The new account
        """
        meta = self._state.meta
        account = Account(
            id=new_id("acc_"),
            serial=meta.next_account_serial,
            name=name,
            type=type,
            narration=narration,
            opening_balance=Decimal(opening_balance),
            pinned=False,
        )
        self._commit(
            replace(
                self._state,
                accounts=self._state.accounts + (account,),
                meta=replace(meta, next_account_serial=meta.next_account_serial + 1),
            )
        )
        logger.info("Created account #%d %s (%s)", account.serial, account.name, account.id)
        return account

    def update_account(self, account_id: str, **changes: Any) -> Optional[Account]:
        """Merge field changes into an account.

        Unknown account IDs are ignored.

        Returns:
            The updated account, or None if not found

        Raises:
            ValidationError: If a field is not editable
        """
        invalid = set(changes) - _EDITABLE_ACCOUNT_FIELDS
        if invalid:
            raise ValidationError(f"Cannot update account field(s): {', '.join(sorted(invalid))}")

        account = self.get_account(account_id)
        if account is None:
            return None

        if "opening_balance" in changes:
            changes["opening_balance"] = Decimal(changes["opening_balance"])
        updated = replace(account, **changes)
        self._commit(
            replace(
                self._state,
                accounts=tuple(updated if acc.id == account_id else acc for acc in self._state.accounts),
            )
        )
        logger.info("Updated account %s", account_id)
        return updated

    def delete_account(self, account_id: str) -> None:
        """Delete an account that no transaction line references.

        Raises:
            UsageConflict: If the account is used by any transaction line
        """
        line_count = self.account_usage(account_id)
        if line_count > 0:
            logger.warning("Refused to delete account %s used by %d lines", account_id, line_count)
            raise UsageConflict(account_id, line_count)

        if self.get_account(account_id) is None:
            return

        self._commit(
            replace(
                self._state,
                accounts=tuple(acc for acc in self._state.accounts if acc.id != account_id),
            )
        )
        logger.info("Deleted account %s", account_id)

    def toggle_pin(self, account_id: str) -> Optional[Account]:
        """Flip the pinned flag of an account; no-op if not found."""
        account = self.get_account(account_id)
        if account is None:
            return None
        return self.update_account(account_id, pinned=not account.pinned)

    def search_accounts(self, term: str = "") -> list[Account]:
        """Find accounts whose name, type or narration contains term."""
        term = term.lower()
        return [
            acc
            for acc in self.accounts
            if term in acc.name.lower()
            or term in acc.type.lower()
            or term in acc.narration.lower()
        ]

    # Transaction operations
    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get transaction by ID."""
        for tx in self._state.transactions:
            if tx.id == transaction_id:
                return tx
        return None

    def find_voucher(self, voucher_no: int) -> Optional[Transaction]:
        """Get transaction by voucher number."""
        for tx in self._state.transactions:
            if tx.voucher_no == voucher_no:
                return tx
        return None

    def new_draft(self, on_date: Optional[date] = None, narration: str = "") -> Transaction:
        """Build an unsaved voucher numbered from the current counter.

        The draft gets two empty lines against the first account. Nothing is
        stored until it is saved or posted.

        Raises:
            ValidationError: If no account exists yet
        """
        accounts = self.accounts
        if not accounts:
            raise ValidationError("Please create an account first.")

        first_account = accounts[0].id
        return Transaction(
            id=new_id(),
            voucher_no=self._state.meta.next_voucher_no,
            date=on_date or date.today(),
            narration=narration,
            lines=(
                TransactionLine(id=new_id(), account_id=first_account),
                TransactionLine(id=new_id(), account_id=first_account),
            ),
            posted=False,
            timestamp=now_millis(),
        )

    def save_transaction(self, transaction: Transaction) -> Transaction:
        """Insert or replace a transaction by ID.

        The transaction set is kept in (date, voucher number) order and the
        next voucher number is rederived afterwards.
        """
        existing = self.get_transaction(transaction.id)
        if existing is not None:
            transactions = [transaction if tx.id == transaction.id else tx for tx in self._state.transactions]
        else:
            transactions = list(self._state.transactions) + [transaction]
        transactions.sort(key=sort_key)

        self._commit(
            replace(
                self._state,
                transactions=tuple(transactions),
                meta=replace(self._state.meta, next_voucher_no=next_voucher_no(transactions)),
            )
        )
        self._forget_draft(transaction.id)
        logger.info(
            "%s voucher #%d (%s)",
            "Updated" if existing is not None else "Saved",
            transaction.voucher_no,
            "posted" if transaction.posted else "draft",
        )
        return transaction

    def post_transaction(self, transaction: Transaction) -> Transaction:
        """Validate a voucher and save it as posted.

        Raises:
            ValidationError: If the voucher has fewer than two lines
            BalanceMismatch: If debits and credits differ beyond tolerance;
                nothing is saved
        """
        validate_line_count(transaction.lines)
        try:
            validate_for_posting(transaction)
        except BalanceMismatch:
            logger.warning("Refused to post voucher #%d: totals do not match", transaction.voucher_no)
            raise
        return self.save_transaction(replace(transaction, posted=True))

    def delete_transaction(self, transaction_id: str) -> None:
        """Remove a transaction, posted or not, and rederive the next voucher number."""
        transactions = [tx for tx in self._state.transactions if tx.id != transaction_id]
        self._commit(
            replace(
                self._state,
                transactions=tuple(transactions),
                meta=replace(self._state.meta, next_voucher_no=next_voucher_no(transactions)),
            )
        )
        logger.info("Deleted transaction %s", transaction_id)

    def search_transactions(self, term: str = "", status: str = "all") -> list[Transaction]:
        """Filter transactions for listing, newest first.

        Args:
            term: Case-insensitive text matched against voucher number,
                narration, date, line narration and line account name
            status: One of "all", "posted" or "draft"

        Raises:
            ValidationError: If status is unknown
        """
        if status not in TRANSACTION_STATUSES:
            raise ValidationError(f"Unknown status '{status}'. Use one of: {', '.join(TRANSACTION_STATUSES)}")

        data = list(self._state.transactions)
        if status != "all":
            data = [tx for tx in data if tx.posted == (status == "posted")]

        if term:
            lower = term.lower()
            names = {acc.id: acc.name.lower() for acc in self._state.accounts}
            data = [
                tx
                for tx in data
                if lower in str(tx.voucher_no)
                or lower in tx.narration.lower()
                or lower in tx.date.isoformat()
                or any(
                    lower in line.narration.lower() or lower in names.get(line.account_id, "")
                    for line in tx.lines
                )
            ]

        return sorted(data, key=sort_key, reverse=True)

    # In-progress voucher
    def save_draft(self, transaction: Transaction) -> None:
        """Keep an unsaved voucher so editing can be resumed later."""
        self.storage.save_draft(transaction)

    def load_draft(self) -> Optional[Transaction]:
        return self.storage.load_draft()

    def discard_draft(self) -> None:
        self.storage.clear_draft()

    def _forget_draft(self, transaction_id: str) -> None:
        draft = self.storage.load_draft()
        if draft is not None and draft.id == transaction_id:
            self.storage.clear_draft()

    # Whole-ledger operations
    def reset_all(self) -> None:
        """Drop every account and transaction and clear storage."""
        self._state = LedgerState()
        self.storage.clear()
        logger.info("Cleared all ledger data")

    def export_snapshot(self) -> dict[str, Any]:
        """Return a serializable copy of the whole ledger."""
        return state_to_dict(self._state)

    def import_snapshot(self, candidate: Any) -> None:
        """Replace the whole ledger with an imported snapshot.

        Only the top-level shape is checked: ``accounts`` and
        ``transactions`` must be lists. Dangling account references are kept
        as imported; the next voucher number and account serial are rederived
        from the imported records.

        Raises:
            InvalidFormat: If the candidate does not have the snapshot shape;
                the current state is left untouched
        """
        if not (
            isinstance(candidate, Mapping)
            and isinstance(candidate.get("accounts"), list)
            and isinstance(candidate.get("transactions"), list)
        ):
            raise InvalidFormat("Invalid file format")

        try:
            state = reconcile_counters(state_from_dict(candidate))
        except (KeyError, TypeError, ValueError, AttributeError, OverflowError) as e:
            raise InvalidFormat(f"Invalid file format: {e}") from e

        self._commit(state)
        logger.info(
            "Imported %d accounts and %d transactions",
            len(state.accounts),
            len(state.transactions),
        )
