"""Storage layer for ledgerbook application."""

from ledgerbook.database.base import LedgerStorage
from ledgerbook.database.factories import create_sqlite_storage

__all__ = ["LedgerStorage", "create_sqlite_storage"]
