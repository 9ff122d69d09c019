"""Abstract ledger storage interface."""

from abc import ABC, abstractmethod
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from ledgerbook.domain.entities import LedgerState, Transaction


class LedgerStorage(ABC):
    """Abstract persistence collaborator for the ledger store.

    ``load`` must never raise: missing or corrupt data yields an empty
    ledger. ``save`` and ``clear`` raise ``PersistenceError`` on failure.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the underlying store."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the underlying store."""
        pass

    # Ledger document
    @abstractmethod
    def load(self) -> LedgerState:
        """Load the stored ledger, or an empty ledger if none is stored."""
        pass

    @abstractmethod
    def save(self, state: LedgerState) -> None:
        """Persist the whole ledger."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove the stored ledger."""
        pass

    @abstractmethod
    def stored_size(self) -> int:
        """Return the size in bytes of the stored ledger document."""
        pass

    # In-progress voucher
    @abstractmethod
    def load_draft(self) -> Optional[Transaction]:
        """Load the in-progress voucher, if any."""
        pass

    @abstractmethod
    def save_draft(self, transaction: Transaction) -> None:
        """Persist the in-progress voucher."""
        pass

    @abstractmethod
    def clear_draft(self) -> None:
        """Forget the in-progress voucher."""
        pass
