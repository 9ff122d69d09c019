"""Tests for posting and account validation rules."""

from decimal import Decimal

import pytest

from ledgerbook.domain.errors import BalanceMismatch, ValidationError
from ledgerbook.domain.validation import (
    balance_difference,
    validate_account_fields,
    validate_for_posting,
    validate_line_count,
)


def test_unbalanced_voucher_reports_difference(make_voucher):
    """Debits of 100 and 50 against a credit of 140 are 10.00 out."""
    tx = make_voucher(1, "2024-01-05", [("a", 100, 0), ("b", 50, 0), ("c", 0, 140)])

    with pytest.raises(BalanceMismatch) as exc_info:
        validate_for_posting(tx)

    assert exc_info.value.difference == Decimal("10.00")
    assert exc_info.value.dr_sum == Decimal("150")
    assert exc_info.value.cr_sum == Decimal("140")
    assert "Difference: 10.00" in str(exc_info.value)


def test_negative_difference_is_signed(make_voucher):
    tx = make_voucher(1, "2024-01-05", [("a", 90, 0), ("b", 0, 100)])

    with pytest.raises(BalanceMismatch) as exc_info:
        validate_for_posting(tx)

    assert exc_info.value.difference == Decimal("-10")
    assert balance_difference(tx) == Decimal("-10")


def test_balanced_voucher_passes(make_voucher):
    tx = make_voucher(1, "2024-01-05", [("a", 500, 0), ("b", 0, 500)])
    validate_for_posting(tx)


@pytest.mark.parametrize("credit, ok", [("99.99", True), ("100.01", True), ("99.98", False), ("100.02", False)])
def test_tolerance_is_one_cent(make_voucher, credit, ok):
    tx = make_voucher(1, "2024-01-05", [("a", 100, 0), ("b", 0, credit)])

    if ok:
        validate_for_posting(tx)
    else:
        with pytest.raises(BalanceMismatch):
            validate_for_posting(tx)


def test_line_count_minimum(make_voucher):
    one_line = make_voucher(1, "2024-01-05", [("a", 0, 0)])
    with pytest.raises(ValidationError, match="Minimum 2 lines"):
        validate_line_count(one_line.lines)

    validate_line_count(make_voucher(1, "2024-01-05", [("a", 0, 0), ("b", 0, 0)]).lines)


@pytest.mark.parametrize("name, account_type, message", [("", "cash", "name"), ("  ", "cash", "name"), ("Cash", "", "type")])
def test_account_fields_required(name, account_type, message):
    with pytest.raises(ValidationError, match=message):
        validate_account_fields(name, account_type)


def test_validation_error_is_value_error():
    with pytest.raises(ValueError):
        validate_account_fields("", "")
