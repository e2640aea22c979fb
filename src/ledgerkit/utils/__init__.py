"""Utility functions for ledgerkit."""

from ledgerkit.utils.amount_parser import parse_amount, round_to_places, to_minor_units
from ledgerkit.utils.date_parser import (
    parse_day_first_date,
    parse_day_month_name_date,
    parse_timestamp,
)

__all__ = [
    "parse_amount",
    "round_to_places",
    "to_minor_units",
    "parse_day_first_date",
    "parse_day_month_name_date",
    "parse_timestamp",
]
