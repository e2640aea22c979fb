"""Vanguard Personal Investor (Australia) transaction CSV export.

Header row::

    Date,Type,Product Type,Product Name,Product ID,Units,Total

``Buy`` and ``Sell`` rows become two-leg trades: units of the product plus
the cash total. Every other row type (distributions, fees, deposits) is a
single cash leg recorded as a payout.
"""

from ledgerkit.domain.entities import (
    CanonicalLeg,
    CanonicalTransaction,
    EventType,
    ParseError,
    ParseResult,
)
from ledgerkit.importers.base import CSVParseError, Parser, ParserContext, read_records
from ledgerkit.utils.amount_parser import parse_amount
from ledgerkit.utils.date_parser import parse_day_month_name_date

TRADE_TYPES = ("buy", "sell")


class VanguardParser(Parser):
    """Parser for Vanguard transaction exports."""

    def parse(self, raw_content: str, context: ParserContext) -> ParseResult:
        result = ParseResult()
        try:
            _, records = read_records(raw_content)
        except CSVParseError as e:
            result.errors.append(ParseError(line=0, message=str(e)))
            return result

        for line, rec in enumerate(records, start=2):
            date_str = rec.get("Date", "")
            row_type = rec.get("Type", "")
            product_name = rec.get("Product Name", "")
            product_id = rec.get("Product ID", "").upper()
            units_str = rec.get("Units", "")
            total_str = rec.get("Total", "")

            if not date_str:
                result.errors.append(ParseError(line=line, message="Missing date"))
                continue
            try:
                effective_at = parse_day_month_name_date(date_str)
            except ValueError as e:
                result.errors.append(ParseError(line=line, message=str(e)))
                continue

            if not product_id:
                result.errors.append(ParseError(line=line, message="Missing Product ID"))
                continue

            try:
                units = parse_amount(units_str)
            except ValueError:
                result.errors.append(ParseError(line=line, message=f"Invalid units: {units_str}"))
                continue

            try:
                total = parse_amount(total_str)
            except ValueError:
                result.errors.append(ParseError(line=line, message=f"Invalid total: {total_str}"))
                continue

            suffix = f" - {product_name}" if product_name else ""
            if row_type.lower() in TRADE_TYPES:
                transaction = CanonicalTransaction(
                    group_key=f"line-{line}",
                    effective_at=effective_at,
                    description=f"{row_type} {product_id}{suffix}",
                    event_type=EventType.TRADE,
                    legs=(
                        CanonicalLeg(instrument_code=product_id, amount=units),
                        CanonicalLeg(instrument_code=context.cash_instrument_code, amount=total),
                    ),
                    meta={"type": row_type, "product_name": product_name, "product_id": product_id},
                    line=line,
                )
            else:
                transaction = CanonicalTransaction(
                    group_key=f"line-{line}",
                    effective_at=effective_at,
                    description=f"{row_type}{suffix}",
                    event_type=EventType.PAYOUT,
                    legs=(CanonicalLeg(instrument_code=context.cash_instrument_code, amount=total),),
                    meta={
                        "type": row_type,
                        "product_name": product_name,
                        "product_id": product_id,
                        "units": units_str,
                    },
                    line=line,
                )
            result.transactions.append(transaction)

        return result
