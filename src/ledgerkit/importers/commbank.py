"""Commonwealth Bank (NetBank) CSV export.

The export has no header row::

    26/01/2025,-37.50,1200.00,"WOOLWORTHS 1234  PENRITH",12345678

Columns are Date (DD/MM/YYYY), signed Amount, running Balance (ignored),
Description and an optional Serial that identifies the transaction.
"""

from ledgerkit.domain.entities import (
    CanonicalLeg,
    CanonicalTransaction,
    EventType,
    ParseError,
    ParseResult,
)
from ledgerkit.importers.base import CSVParseError, Parser, ParserContext, read_rows
from ledgerkit.utils.amount_parser import parse_amount
from ledgerkit.utils.date_parser import parse_day_first_date

TRANSFER_KEYWORDS = ("transfer", "internet trf")


def infer_event_type(description: str) -> EventType:
    lowered = description.lower()
    if any(keyword in lowered for keyword in TRANSFER_KEYWORDS):
        return EventType.TRANSFER
    return EventType.PURCHASE


class CommBankParser(Parser):
    """Parser for headerless CommBank transaction exports."""

    def parse(self, raw_content: str, context: ParserContext) -> ParseResult:
        result = ParseResult()
        try:
            rows = read_rows(raw_content)
        except CSVParseError as e:
            result.errors.append(ParseError(line=0, message=str(e)))
            return result

        for line, row in enumerate(rows, start=1):
            date_str = row[0] if len(row) > 0 else ""
            amount_str = row[1] if len(row) > 1 else ""
            description = row[3] if len(row) > 3 else ""
            serial = row[4] if len(row) > 4 else ""

            try:
                effective_at = parse_day_first_date(date_str)
            except ValueError as e:
                result.errors.append(ParseError(line=line, message=str(e)))
                continue

            try:
                amount = parse_amount(amount_str)
            except ValueError:
                result.errors.append(ParseError(line=line, message=f"Invalid amount: {amount_str}"))
                continue

            if not description:
                result.errors.append(ParseError(line=line, message="Missing transaction description"))
                continue

            result.transactions.append(
                CanonicalTransaction(
                    group_key=serial or f"line-{line}",
                    effective_at=effective_at,
                    description=description,
                    event_type=infer_event_type(description),
                    legs=(CanonicalLeg(instrument_code=context.cash_instrument_code, amount=amount),),
                    external_id=serial or None,
                    line=line,
                )
            )

        return result
