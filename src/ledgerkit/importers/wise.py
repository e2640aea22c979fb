"""Wise (TransferWise) statement CSV export.

Columns used: ``TransferWise ID``, ``Date`` (YYYY-MM-DD), ``Amount``,
``Currency``, ``Description``, ``Payment Reference``, ``Exchange From``,
``Exchange To``, ``Exchange Rate`` and ``Total fees``.

A currency conversion becomes an ``exchange`` event with a leg for the
sold currency and one for the bought currency. A non-zero fee adds a
negative leg in the row's currency.
"""

from decimal import Decimal, InvalidOperation

from ledgerkit.domain.entities import (
    CanonicalLeg,
    CanonicalTransaction,
    EventType,
    ParseError,
    ParseResult,
)
from ledgerkit.importers.base import CSVParseError, Parser, ParserContext, read_records
from ledgerkit.utils.amount_parser import parse_amount, round_to_places
from ledgerkit.utils.date_parser import parse_timestamp

DEFAULT_DESCRIPTION = "Wise transaction"


def _exchange_rate(value: str) -> Decimal | None:
    """Positive exchange rate, or None if the column does not hold one."""
    if not value:
        return None
    try:
        rate = Decimal(value)
    except InvalidOperation:
        return None
    if not rate.is_finite() or rate <= 0:
        return None
    return rate


def _fee(value: str) -> Decimal:
    try:
        return parse_amount(value)
    except ValueError:
        return Decimal(0)


class WiseParser(Parser):
    """Parser for Wise statement exports."""

    def parse(self, raw_content: str, context: ParserContext) -> ParseResult:
        result = ParseResult()
        try:
            _, records = read_records(raw_content)
        except CSVParseError as e:
            result.errors.append(ParseError(line=0, message=str(e)))
            return result

        # Line 1 is the header
        for line, rec in enumerate(records, start=2):
            external_id = rec.get("TransferWise ID", "") or None
            date_str = rec.get("Date", "")
            amount_str = rec.get("Amount", "")
            currency = rec.get("Currency", "").upper()
            description = rec.get("Description", "") or rec.get("Payment Reference", "") or DEFAULT_DESCRIPTION
            exchange_from = rec.get("Exchange From", "").upper()
            exchange_to = rec.get("Exchange To", "").upper()
            rate = _exchange_rate(rec.get("Exchange Rate", ""))
            fee = _fee(rec.get("Total fees", ""))

            if not date_str:
                result.errors.append(ParseError(line=line, message="Missing date"))
                continue
            try:
                effective_at = parse_timestamp(date_str)
            except ValueError as e:
                result.errors.append(ParseError(line=line, message=str(e)))
                continue

            try:
                amount = parse_amount(amount_str)
            except ValueError:
                result.errors.append(ParseError(line=line, message=f"Invalid amount: {amount_str}"))
                continue

            if exchange_from and exchange_to and rate is not None:
                bought = round_to_places(-amount / rate, 2)
                legs = [
                    CanonicalLeg(instrument_code=exchange_from, amount=amount),
                    CanonicalLeg(instrument_code=exchange_to, amount=bought),
                ]
                event_type = EventType.EXCHANGE
                meta = {
                    "exchange_rate": str(rate),
                    "exchange_from": exchange_from,
                    "exchange_to": exchange_to,
                }
            else:
                if not currency:
                    result.errors.append(ParseError(line=line, message="Missing currency"))
                    continue
                legs = [CanonicalLeg(instrument_code=currency, amount=amount)]
                event_type = (
                    EventType.TRANSFER if "transfer" in description.lower() else EventType.PURCHASE
                )
                meta = None

            if fee != 0:
                legs.append(
                    CanonicalLeg(
                        instrument_code=currency or exchange_from,
                        amount=round_to_places(-abs(fee), 2),
                        description="Fee",
                    )
                )

            result.transactions.append(
                CanonicalTransaction(
                    group_key=external_id or f"line-{line}",
                    effective_at=effective_at,
                    description=description,
                    event_type=event_type,
                    legs=tuple(legs),
                    external_id=external_id,
                    meta=meta,
                    line=line,
                )
            )

        return result
