"""Canonical event/leg CSV format.

One row is one leg. Rows sharing an ``eventGroup`` are merged into a
single transaction, so a multi-leg exchange or trade is written as several
consecutive rows. ``legUnitCount`` is a signed integer already in the
instrument's minor units.

Required columns: externalEventId, eventGroup, eventDescription,
effectiveAt, postedAt, legDescription, legTicker, legUnitCount. Optional
columns: eventType (defaults to purchase) and legCategory (a category path
such as ``food:coffee``).
"""

import re
from typing import Optional

from ledgerkit.domain.entities import (
    CanonicalLeg,
    CanonicalTransaction,
    EventType,
    ParseError,
    ParseResult,
)
from ledgerkit.importers.base import CSVParseError, Parser, ParserContext, read_records
from ledgerkit.utils.date_parser import parse_timestamp

REQUIRED_COLUMNS = (
    "externalEventId",
    "eventGroup",
    "eventDescription",
    "effectiveAt",
    "postedAt",
    "legDescription",
    "legTicker",
    "legUnitCount",
)

# Must agree across every row of a group
EVENT_FIELDS = ("externalEventId", "effectiveAt", "postedAt", "eventDescription", "eventType")

_INTEGER = re.compile(r"^[+-]?\d+$")


def _parse_event_type(value: str) -> EventType:
    if not value:
        return EventType.PURCHASE
    try:
        return EventType(value.strip().lower())
    except ValueError:
        raise ValueError(f'Invalid eventType: "{value}"')


class CanonicalParser(Parser):
    """Parser for the canonical event/leg CSV format."""

    def parse(self, raw_content: str, context: ParserContext) -> ParseResult:
        result = ParseResult()
        try:
            header, records = read_records(raw_content)
        except CSVParseError as e:
            result.errors.append(ParseError(line=0, message=str(e)))
            return result

        if not header:
            result.errors.append(ParseError(line=0, message="File is empty"))
            return result

        for column in REQUIRED_COLUMNS:
            if column not in header:
                result.errors.append(ParseError(line=1, message=f"Missing required column: {column}"))
        if result.errors:
            return result

        groups: dict[str, list[tuple[int, dict[str, str]]]] = {}
        for line, rec in enumerate(records, start=2):
            group = rec.get("eventGroup", "")
            if not group:
                result.errors.append(ParseError(line=line, message="eventGroup is required"))
                continue
            groups.setdefault(group, []).append((line, rec))

        for group, rows in groups.items():
            transaction = self._build_transaction(group, rows, result.errors)
            if transaction is not None:
                result.transactions.append(transaction)

        return result

    def _build_transaction(
        self,
        group: str,
        rows: list[tuple[int, dict[str, str]]],
        errors: list[ParseError],
    ) -> Optional[CanonicalTransaction]:
        first_line, first = rows[0]

        conflict = False
        for field in EVENT_FIELDS:
            expected = first.get(field, "")
            for line, rec in rows[1:]:
                value = rec.get(field, "")
                if value != expected:
                    errors.append(
                        ParseError(
                            line=line,
                            message=(
                                f'eventGroup "{group}": conflicting value for "{field}" '
                                f'(expected "{expected}", got "{value}")'
                            ),
                        )
                    )
                    conflict = True
        if conflict:
            return None

        try:
            effective_at = parse_timestamp(first.get("effectiveAt", ""))
        except ValueError:
            errors.append(
                ParseError(line=first_line, message=f'Invalid effectiveAt date: "{first.get("effectiveAt", "")}"')
            )
            return None

        posted_at = None
        if first.get("postedAt"):
            try:
                posted_at = parse_timestamp(first["postedAt"])
            except ValueError:
                errors.append(
                    ParseError(line=first_line, message=f'Invalid postedAt date: "{first["postedAt"]}"')
                )
                return None

        try:
            event_type = _parse_event_type(first.get("eventType", ""))
        except ValueError as e:
            errors.append(ParseError(line=first_line, message=str(e)))
            return None

        legs = []
        leg_error = False
        for line, rec in rows:
            ticker = rec.get("legTicker", "")
            if not ticker:
                errors.append(ParseError(line=line, message="legTicker is required"))
                leg_error = True
                continue
            unit_count = rec.get("legUnitCount", "")
            if not _INTEGER.match(unit_count):
                errors.append(ParseError(line=line, message=f'Invalid legUnitCount: "{unit_count}"'))
                leg_error = True
                continue
            legs.append(
                CanonicalLeg(
                    instrument_code=ticker,
                    amount=int(unit_count),
                    description=rec.get("legDescription") or None,
                    category_path=rec.get("legCategory") or None,
                )
            )
        if leg_error:
            return None

        return CanonicalTransaction(
            group_key=group,
            effective_at=effective_at,
            description=first.get("eventDescription", ""),
            event_type=event_type,
            legs=tuple(legs),
            external_id=first.get("externalEventId") or None,
            posted_at=posted_at,
            line=first_line,
        )
