"""Mapper functions between domain entities and the JSON snapshot document.

The snapshot uses camelCase field names
(``openingBalance``, ``voucherNo``, ...) so existing backups import unchanged.
Amounts are written as JSON numbers through simplejson's Decimal support.
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

import simplejson as json  # type: ignore

from ledgerbook.domain import entities as domain


def _to_decimal(value: Any) -> Decimal:
    if value is None or value == "":
        return domain.ZERO
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{value}'") from e


def account_to_dict(account: domain.Account) -> dict[str, Any]:
    """Convert Account entity to its snapshot representation."""
    return {
        "id": account.id,
        "serial": account.serial,
        "name": account.name,
        "type": account.type,
        "narration": account.narration,
        "openingBalance": account.opening_balance,
        "pinned": account.pinned,
    }


def account_from_dict(data: Mapping[str, Any]) -> domain.Account:
    """Convert a snapshot account into an Account entity."""
    return domain.Account(
        id=str(data["id"]),
        serial=int(data.get("serial", 0)),
        name=str(data.get("name", "")),
        type=str(data.get("type", "")),
        narration=str(data.get("narration") or ""),
        opening_balance=_to_decimal(data.get("openingBalance")),
        pinned=bool(data.get("pinned", False)),
    )


def line_to_dict(line: domain.TransactionLine) -> dict[str, Any]:
    """Convert TransactionLine entity to its snapshot representation."""
    return {
        "id": line.id,
        "accountId": line.account_id,
        "narration": line.narration,
        "dr": line.dr,
        "cr": line.cr,
    }


def line_from_dict(data: Mapping[str, Any]) -> domain.TransactionLine:
    """Convert a snapshot line into a TransactionLine entity."""
    return domain.TransactionLine(
        id=str(data.get("id", "")),
        account_id=str(data.get("accountId", "")),
        narration=str(data.get("narration") or ""),
        dr=_to_decimal(data.get("dr")),
        cr=_to_decimal(data.get("cr")),
    )


def transaction_to_dict(transaction: domain.Transaction) -> dict[str, Any]:
    """Convert Transaction entity to its snapshot representation."""
    return {
        "id": transaction.id,
        "voucherNo": transaction.voucher_no,
        "date": transaction.date.isoformat(),
        "narration": transaction.narration,
        "lines": [line_to_dict(line) for line in transaction.lines],
        "posted": transaction.posted,
        "timestamp": transaction.timestamp,
    }


def transaction_from_dict(data: Mapping[str, Any]) -> domain.Transaction:
    """Convert a snapshot transaction into a Transaction entity."""
    return domain.Transaction(
        id=str(data["id"]),
        voucher_no=int(data["voucherNo"]),
        date=date.fromisoformat(str(data["date"])[:10]),
        narration=str(data.get("narration") or ""),
        lines=tuple(line_from_dict(line) for line in data.get("lines") or ()),
        posted=bool(data.get("posted", False)),
        timestamp=int(data.get("timestamp") or 0),
    )


def meta_to_dict(meta: domain.LedgerMeta) -> dict[str, Any]:
    """Convert LedgerMeta to its snapshot representation."""
    return {
        "nextAccountSerial": meta.next_account_serial,
        "nextVoucherNo": meta.next_voucher_no,
    }


def meta_from_dict(data: Mapping[str, Any] | None) -> domain.LedgerMeta:
    """Convert snapshot meta, falling back to defaults for missing keys."""
    data = data or {}
    defaults = domain.LedgerMeta()
    return domain.LedgerMeta(
        next_account_serial=int(data.get("nextAccountSerial", defaults.next_account_serial)),
        next_voucher_no=int(data.get("nextVoucherNo", defaults.next_voucher_no)),
    )


def state_to_dict(state: domain.LedgerState) -> dict[str, Any]:
    """Convert the ledger aggregate into a snapshot document."""
    return {
        "accounts": [account_to_dict(acc) for acc in state.accounts],
        "transactions": [transaction_to_dict(tx) for tx in state.transactions],
        "meta": meta_to_dict(state.meta),
    }


def state_from_dict(data: Mapping[str, Any]) -> domain.LedgerState:
    """Convert a snapshot document into the ledger aggregate.

    Raises:
        KeyError, TypeError, ValueError, OverflowError: If an entry cannot be
            converted
    """
    return domain.LedgerState(
        accounts=tuple(account_from_dict(acc) for acc in data["accounts"]),
        transactions=tuple(transaction_from_dict(tx) for tx in data["transactions"]),
        meta=meta_from_dict(data.get("meta")),
    )


def dumps(document: Any, indent: int | None = None) -> str:
    """Serialize a snapshot document (or part of one) to JSON text."""
    return json.dumps(document, indent=indent, use_decimal=True)


def loads(text: str) -> Any:
    """Parse JSON text, reading numbers with a fractional part as Decimal."""
    return json.loads(text, use_decimal=True)
