"""Shared pytest fixtures for ledgerbook tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from ledgerbook.database.factories import create_sqlite_storage
from ledgerbook.domain.entities import Transaction, TransactionLine
from ledgerbook.domain.ledger import LedgerStore
from ledgerbook.logging_config import reset_logging


@pytest.fixture
def temp_storage():
    """Create a temporary SQLite storage for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    storage = create_sqlite_storage(database_path=db_path)
    # Store the path for tests that need it
    storage.database_path = db_path
    storage.connect()

    yield storage

    # Cleanup
    storage.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def store(temp_storage):
    """Create a LedgerStore backed by the temporary storage."""
    return LedgerStore(temp_storage)


@pytest.fixture
def cash_account(store):
    """Cash account with an opening balance of 1000."""
    return store.add_account(name="Cash", type="cash", opening_balance=Decimal("1000.00"))


@pytest.fixture
def sales_account(store):
    """Income account with no opening balance."""
    return store.add_account(name="Sales", type="income")


@pytest.fixture
def make_voucher():
    """Build a voucher from (account_id, dr, cr) tuples."""

    def _make(voucher_no, on_date, lines, posted=True, narration="", tx_id=None, timestamp=0):
        return Transaction(
            id=tx_id or f"tx{voucher_no}",
            voucher_no=voucher_no,
            date=on_date if isinstance(on_date, date) else date.fromisoformat(on_date),
            narration=narration,
            lines=tuple(
                TransactionLine(
                    id=f"l{voucher_no}_{i}",
                    account_id=account_id,
                    dr=Decimal(str(dr)),
                    cr=Decimal(str(cr)),
                )
                for i, (account_id, dr, cr) in enumerate(lines)
            ),
            posted=posted,
            timestamp=timestamp,
        )

    return _make


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture(autouse=True)
def _clean_logging():
    """Drop handlers bound to CliRunner streams between tests."""
    yield
    reset_logging()
