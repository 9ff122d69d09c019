"""Domain layer for ledgerbook application.

Services live in their own modules (``ledger``, ``report``, ``dashboard``)
and are imported from there; only entities and errors are re-exported here so
the storage layer can import entities without pulling in the services.
"""

from ledgerbook.domain.entities import (
    Account,
    DashboardStats,
    LedgerMeta,
    LedgerState,
    ReportRow,
    Statement,
    StorageStats,
    Transaction,
    TransactionLine,
)
from ledgerbook.domain.errors import (
    BalanceMismatch,
    DomainError,
    InvalidFormat,
    NotFoundError,
    PersistenceError,
    UsageConflict,
    ValidationError,
)

__all__ = [
    "Account",
    "DashboardStats",
    "LedgerMeta",
    "LedgerState",
    "ReportRow",
    "Statement",
    "StorageStats",
    "Transaction",
    "TransactionLine",
    "BalanceMismatch",
    "DomainError",
    "InvalidFormat",
    "NotFoundError",
    "PersistenceError",
    "UsageConflict",
    "ValidationError",
]
