"""SQLAlchemy implementation of the ledger key-value storage."""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ledgerbook.database.base import LedgerStorage
from ledgerbook.database.mappers import (
    dumps,
    loads,
    state_from_dict,
    state_to_dict,
    transaction_from_dict,
    transaction_to_dict,
)
from ledgerbook.database.models import KeyValue, create_session_factory
from ledgerbook.domain.entities import LedgerState, Transaction
from ledgerbook.domain.errors import PersistenceError
from ledgerbook.domain.numbering import reconcile_counters

logger = logging.getLogger(__name__)

STORAGE_KEY = "personal_ledger_pro_v1"
DRAFT_KEY = "ledger_tx_draft"


class SQLAlchemyLedgerStorage(LedgerStorage):
    """Stores the ledger as JSON documents in a single key-value table."""

    def __init__(self, database_url: str):
        """Initialize SQLAlchemy storage.

        Args:
            database_url: SQLAlchemy database URL (e.g., 'sqlite:///path/to.db')
        """
        self.database_url = database_url
        self.session_factory = create_session_factory(database_url)
        self._session: Optional[Session] = None

    def _get_session(self) -> Session:
        """Get current session, creating one if needed."""
        if self._session is None:
            self._session = self.session_factory()
        return self._session

    def connect(self) -> None:
        """Connect to the database."""
        # Connection is lazy, so this is a no-op
        pass

    def disconnect(self) -> None:
        """Disconnect from the database."""
        if self._session is not None:
            self._session.close()
            self._session = None

    # Raw key-value operations
    def get_value(self, key: str) -> Optional[str]:
        """Return the text stored under key, or None."""
        session = self._get_session()
        row = session.get(KeyValue, key)
        return None if row is None else row.value

    def set_value(self, key: str, value: str) -> None:
        """Store text under key, replacing any previous value."""
        session = self._get_session()
        try:
            row = session.get(KeyValue, key)
            if row is None:
                session.add(KeyValue(key=key, value=value))
            else:
                row.value = value
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error("Failed to store %s: %s", key, e)
            raise PersistenceError(f"Failed to save data: {e}") from e

    def delete_value(self, key: str) -> None:
        """Remove key if present."""
        session = self._get_session()
        try:
            row = session.get(KeyValue, key)
            if row is not None:
                session.delete(row)
                session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error("Failed to remove %s: %s", key, e)
            raise PersistenceError(f"Failed to clear data: {e}") from e

    # Ledger document
    def load(self) -> LedgerState:
        """Load the stored ledger, or an empty ledger if absent or corrupt."""
        try:
            text = self.get_value(STORAGE_KEY)
            if text is None:
                return LedgerState()
            document = loads(text)
            accounts = document.get("accounts")
            transactions = document.get("transactions")
            state = state_from_dict(
                {
                    "accounts": accounts if isinstance(accounts, list) else [],
                    "transactions": transactions if isinstance(transactions, list) else [],
                    "meta": document.get("meta"),
                }
            )
        except (SQLAlchemyError, ValueError, KeyError, TypeError, AttributeError, OverflowError) as e:
            logger.warning("Failed to load state, starting empty: %s", e)
            return LedgerState()
        return reconcile_counters(state)

    def save(self, state: LedgerState) -> None:
        """Persist the whole ledger."""
        self.set_value(STORAGE_KEY, dumps(state_to_dict(state)))

    def clear(self) -> None:
        """Remove the stored ledger and any in-progress voucher."""
        self.delete_value(STORAGE_KEY)
        self.delete_value(DRAFT_KEY)

    def stored_size(self) -> int:
        """Return the size in bytes of the stored ledger document."""
        text = self.get_value(STORAGE_KEY)
        return 0 if text is None else len(text.encode("utf-8"))

    # In-progress voucher
    def load_draft(self) -> Optional[Transaction]:
        """Load the in-progress voucher; a corrupt draft is discarded."""
        text = self.get_value(DRAFT_KEY)
        if text is None:
            return None
        try:
            return transaction_from_dict(loads(text))
        except (ValueError, KeyError, TypeError, AttributeError, OverflowError) as e:
            logger.warning("Failed to parse draft, discarding it: %s", e)
            self.delete_value(DRAFT_KEY)
            return None

    def save_draft(self, transaction: Transaction) -> None:
        """Persist the in-progress voucher."""
        self.set_value(DRAFT_KEY, dumps(transaction_to_dict(transaction)))

    def clear_draft(self) -> None:
        """Forget the in-progress voucher."""
        self.delete_value(DRAFT_KEY)
