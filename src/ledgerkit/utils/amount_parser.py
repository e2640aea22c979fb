"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union
import re

# Range of the BIGINT column legs are stored in
MIN_AMOUNT_MINOR = -(2**63)
MAX_AMOUNT_MINOR = 2**63 - 1


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "+123.45"
    - "$123.45"
    - "-123.45"
    - "-$123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols and thousands separators
    amount_str = re.sub(r"[$€£¥]", "", amount_str)
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return -amount if is_negative else amount


def round_to_places(amount: Decimal, places: int) -> Decimal:
    """Round half away from zero to a fixed number of decimal places."""
    return amount.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def to_minor_units(amount: Union[Decimal, int], minor_unit: int) -> int:
    """Convert an amount to integer minor units.

    ``int`` amounts are taken to be in minor units already. ``Decimal``
    amounts are in major units and are scaled by ``10 ** minor_unit``;
    any remainder below one minor unit is refused rather than rounded.

    Raises:
        ValueError: If the amount has more decimal places than ``minor_unit``
    """
    if isinstance(amount, bool):
        raise ValueError(f"Invalid amount: {amount!r}")
    if isinstance(amount, int):
        return amount

    scaled = amount.scaleb(minor_unit)
    if scaled != scaled.to_integral_value():
        raise ValueError(f"Amount {amount} has more than {minor_unit} decimal places")
    return int(scaled)
