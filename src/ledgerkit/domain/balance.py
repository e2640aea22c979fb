"""Balance aggregation."""

from typing import Optional

from ledgerkit.database.base import Database
from ledgerkit.domain.entities import Balance


def format_amount(amount_minor: int, minor_unit: int) -> str:
    """Format a minor-unit amount in major units without floating point.

    >>> format_amount(-12345, 2)
    '-123.45'
    >>> format_amount(7, 0)
    '7'
    """
    sign = "-" if amount_minor < 0 else ""
    magnitude = abs(int(amount_minor))
    if minor_unit <= 0:
        return f"{sign}{magnitude}"
    whole, fraction = divmod(magnitude, 10**minor_unit)
    return f"{sign}{whole}.{fraction:0{minor_unit}d}"


class BalanceService:
    """Read-only service deriving current balances from legs."""

    def __init__(self, db: Database):
        self.db = db

    def get_balances(self, user_id: int, account_id: Optional[int] = None) -> list[Balance]:
        """Current balance per (account, instrument).

        Legs of soft-deleted events are excluded. Amounts are summed in the
        database in minor units, so no rounding takes place.
        """
        return self.db.get_balances(user_id, account_id)
