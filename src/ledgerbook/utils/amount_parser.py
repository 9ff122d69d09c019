"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str, allow_negative: bool = True) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles "123.45", "$123.45", "-123.45", "1,234.56" and "(123.45)"
    (negative in parentheses).

    Args:
        amount_str: Amount string
        allow_negative: If False, negative amounts are rejected (debit and
            credit columns are never negative)

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    amount_str = re.sub(r"[$€£¥₹]", "", amount_str).replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}'") from e

    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if is_negative:
        amount = -amount
    if amount < 0 and not allow_negative:
        raise ValueError(f"Amount must not be negative: {amount}")
    return amount
