"""Tests for the SQLAlchemy key-value storage and snapshot mappers."""

from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from ledgerbook.database import mappers
from ledgerbook.database.sqlalchemy_storage import DRAFT_KEY, STORAGE_KEY
from ledgerbook.domain.entities import Account, LedgerMeta, LedgerState, Transaction, TransactionLine
from ledgerbook.domain.errors import PersistenceError


def _state():
    return LedgerState(
        accounts=(Account(id="acc_1", serial=1, name="Cash", type="cash", opening_balance=Decimal("12.34"), pinned=True),),
        transactions=(
            Transaction(
                id="t1",
                voucher_no=1,
                date=date(2024, 1, 5),
                narration="Sale",
                lines=(
                    TransactionLine(id="l1", account_id="acc_1", dr=Decimal("0.10")),
                    TransactionLine(id="l2", account_id="acc_2", narration="x", cr=Decimal("0.10")),
                ),
                posted=True,
                timestamp=1704412800000,
            ),
        ),
        meta=LedgerMeta(next_account_serial=2, next_voucher_no=2),
    )


class TestStorage:
    """SQLAlchemyLedgerStorage behaviour."""

    def test_missing_document_loads_empty_state(self, temp_storage):
        assert temp_storage.load() == LedgerState()
        assert temp_storage.stored_size() == 0

    def test_save_and_load(self, temp_storage):
        temp_storage.save(_state())

        assert temp_storage.load() == _state()
        assert temp_storage.stored_size() > 0

    def test_corrupt_document_loads_empty_state(self, temp_storage):
        temp_storage.set_value(STORAGE_KEY, "{not json")
        assert temp_storage.load() == LedgerState()

        temp_storage.set_value(STORAGE_KEY, "[1, 2]")
        assert temp_storage.load() == LedgerState()

    def test_partial_document_is_merged_with_defaults(self, temp_storage):
        temp_storage.set_value(STORAGE_KEY, '{"accounts": [], "meta": {"nextAccountSerial": 9}}')

        state = temp_storage.load()

        assert state.transactions == ()
        assert state.meta == LedgerMeta(next_account_serial=9, next_voucher_no=1)

    def test_stale_counters_are_rederived_on_load(self, temp_storage):
        stale = replace(_state(), meta=LedgerMeta(next_account_serial=1, next_voucher_no=1))
        temp_storage.save(stale)

        assert temp_storage.load().meta == LedgerMeta(next_account_serial=2, next_voucher_no=2)

    def test_clear_removes_document_and_draft(self, temp_storage):
        temp_storage.save(_state())
        temp_storage.save_draft(_state().transactions[0])

        temp_storage.clear()

        assert temp_storage.get_value(STORAGE_KEY) is None
        assert temp_storage.load_draft() is None

    def test_corrupt_draft_is_discarded(self, temp_storage):
        temp_storage.set_value(DRAFT_KEY, '{"id": "t1"}')

        assert temp_storage.load_draft() is None
        assert temp_storage.get_value(DRAFT_KEY) is None

    def test_write_failure_raises_persistence_error(self, temp_storage, monkeypatch):
        session = temp_storage._get_session()

        def fail_commit():
            raise OperationalError("COMMIT", {}, Exception("disk full"))

        monkeypatch.setattr(session, "commit", fail_commit)

        with pytest.raises(PersistenceError, match="Failed to save data"):
            temp_storage.save(_state())


class TestMappers:
    """Snapshot document conversion."""

    def test_json_round_trip_keeps_decimals(self):
        text = mappers.dumps(mappers.state_to_dict(_state()))

        assert '"openingBalance": 12.34' in text
        assert mappers.state_from_dict(mappers.loads(text)) == _state()

    def test_reads_camel_case_backup_fields(self):
        document = mappers.loads(
            """
            {"accounts": [{"id": "acc_x", "serial": 3, "name": "Bank", "type": "bank",
                           "narration": "", "openingBalance": 100}],
             "transactions": [{"id": "t", "voucherNo": 7, "date": "2024-02-29", "narration": "n",
                               "lines": [{"id": "a", "accountId": "acc_x", "narration": "", "dr": "", "cr": 2.5}],
                               "posted": false, "timestamp": 1}],
             "meta": {"nextAccountSerial": 4, "nextVoucherNo": 8}}
            """
        )

        state = mappers.state_from_dict(document)

        assert state.accounts[0].opening_balance == Decimal("100")
        assert state.accounts[0].pinned is False
        line = state.transactions[0].lines[0]
        assert (line.dr, line.cr) == (Decimal("0"), Decimal("2.5"))
        assert state.transactions[0].date == date(2024, 2, 29)
        assert state.meta == LedgerMeta(next_account_serial=4, next_voucher_no=8)

    def test_bad_amount_raises(self):
        with pytest.raises(ValueError):
            mappers.line_from_dict({"id": "a", "accountId": "x", "dr": "abc"})
