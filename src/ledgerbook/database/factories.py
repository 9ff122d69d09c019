"""Storage factory functions for creating ledger storage instances."""

import os
from pathlib import Path
from typing import Optional

from ledgerbook.database.sqlalchemy_storage import SQLAlchemyLedgerStorage


def create_sqlite_storage(database_path: Optional[str] = None) -> SQLAlchemyLedgerStorage:
    """Create a SQLite-backed ledger storage.

    Args:
        database_path: Path to SQLite database file. If None, checks LEDGERBOOK_DB_PATH
            environment variable, then defaults to ~/.ledgerbook/ledgerbook.db

    Returns:
        SQLAlchemyLedgerStorage instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get("LEDGERBOOK_DB_PATH")

    if database_path is None:
        db_dir = Path.home() / ".ledgerbook"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "ledgerbook.db")

    return SQLAlchemyLedgerStorage(f"sqlite:///{database_path}")
