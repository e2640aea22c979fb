"""Tests for provider parsers."""

import pytest
from datetime import datetime, UTC
from decimal import Decimal

from ledgerkit.domain.entities import EventType, ImporterKind
from ledgerkit.domain.errors import ValidationError
from ledgerkit.importers import (
    CanonicalParser,
    CommBankParser,
    ParserContext,
    VanguardParser,
    WiseParser,
    get_parser,
)

CONTEXT = ParserContext(account_id=1, cash_instrument_code="AUD")


def legs_of(transaction):
    return [(leg.instrument_code, leg.amount) for leg in transaction.legs]


class TestRegistry:
    """Tests for parser selection."""

    @pytest.mark.parametrize(
        "importer, parser_cls",
        [
            (ImporterKind.COMMBANK_CSV, CommBankParser),
            (ImporterKind.WISE_CSV, WiseParser),
            (ImporterKind.VANGUARD_CSV, VanguardParser),
            (ImporterKind.CANONICAL_CSV, CanonicalParser),
            ("canonical_csv", CanonicalParser),
        ],
    )
    def test_get_parser(self, importer, parser_cls):
        assert isinstance(get_parser(importer), parser_cls)

    def test_unknown_importer(self):
        with pytest.raises(ValidationError, match="Unsupported importer"):
            get_parser("ofx")


class TestCommBankParser:
    """Tests for CommBankParser."""

    def test_statement(self, fixtures_dir):
        result = CommBankParser().parse((fixtures_dir / "commbank_statement.csv").read_text(), CONTEXT)

        assert result.errors == []
        assert len(result.transactions) == 3
        first, second, third = result.transactions

        assert first.line == 1
        assert first.effective_at == datetime(2025, 1, 26, tzinfo=UTC)
        assert first.external_id == "12345678"
        assert first.description == "WOOLWORTHS 1234  PENRITH"
        assert first.event_type is EventType.PURCHASE
        assert legs_of(first) == [("AUD", Decimal("-37.50"))]

        assert second.external_id is None
        assert third.event_type is EventType.TRANSFER
        assert legs_of(third) == [("AUD", Decimal("500.00"))]

    def test_uses_account_cash_instrument(self):
        result = CommBankParser().parse("01/02/2025,-1.00,0,COFFEE\n", ParserContext(1, "NZD"))

        assert legs_of(result.transactions[0]) == [("NZD", Decimal("-1.00"))]

    def test_internet_transfer_keyword(self):
        result = CommBankParser().parse('01/02/2025,-100.00,0,"INTERNET TRF TO J SMITH"\n', CONTEXT)

        assert result.transactions[0].event_type is EventType.TRANSFER

    def test_bad_rows_do_not_stop_parsing(self, fixtures_dir):
        result = CommBankParser().parse((fixtures_dir / "commbank_bad_rows.csv").read_text(), CONTEXT)

        assert [t.line for t in result.transactions] == [1, 4]
        assert [(e.line, e.message) for e in result.errors] == [
            (2, "Invalid date: 2025-01-27"),
            (3, "Invalid amount: abc"),
            (5, "Missing transaction description"),
        ]

    def test_comma_thousands_separator(self):
        result = CommBankParser().parse('01/02/2025,"-1,234.50",0,RENT\n', CONTEXT)

        assert legs_of(result.transactions[0]) == [("AUD", Decimal("-1234.50"))]


class TestWiseParser:
    """Tests for WiseParser."""

    def test_statement(self, fixtures_dir):
        result = WiseParser().parse((fixtures_dir / "wise_statement.csv").read_text(), CONTEXT)

        assert result.errors == []
        exchange, card, received = result.transactions

        assert exchange.line == 2
        assert exchange.external_id == "TRANSFER-1001"
        assert exchange.event_type is EventType.EXCHANGE
        assert legs_of(exchange) == [
            ("AUD", Decimal("-100.00")),
            ("EUR", Decimal("62.50")),
            ("AUD", Decimal("-1.25")),
        ]
        assert exchange.meta == {"exchange_rate": "1.6", "exchange_from": "AUD", "exchange_to": "EUR"}

        assert card.event_type is EventType.PURCHASE
        assert legs_of(card) == [("EUR", Decimal("-12.40"))]

        assert received.effective_at == datetime(2025, 2, 5, tzinfo=UTC)
        assert legs_of(received) == [("AUD", Decimal("250.00"))]

    def test_bought_amount_rounds_half_up(self):
        content = (
            "TransferWise ID,Date,Amount,Currency,Description,Exchange From,Exchange To,Exchange Rate,Total fees\n"
            "T-1,2025-02-01,-10.00,AUD,Convert,AUD,USD,1.6,\n"
        )
        result = WiseParser().parse(content, CONTEXT)

        # 10 / 1.6 = 6.25 exactly; 10 / 3 below exercises rounding
        assert legs_of(result.transactions[0])[1] == ("USD", Decimal("6.25"))

        content = content.replace("1.6", "3")
        result = WiseParser().parse(content, CONTEXT)
        assert legs_of(result.transactions[0])[1] == ("USD", Decimal("3.33"))

    def test_description_falls_back_to_reference(self):
        content = (
            "TransferWise ID,Date,Amount,Currency,Description,Payment Reference\n"
            "T-1,2025-02-01,5.00,AUD,,Invoice 42\n"
            "T-2,2025-02-01,5.00,AUD,,\n"
        )
        result = WiseParser().parse(content, CONTEXT)

        assert [t.description for t in result.transactions] == ["Invoice 42", "Wise transaction"]

    def test_errors(self):
        content = (
            "TransferWise ID,Date,Amount,Currency,Description\n"
            "T-1,,5.00,AUD,Missing date\n"
            "T-2,2025-02-01,five,AUD,Bad amount\n"
            "T-3,2025-02-01,5.00,AUD,Good\n"
        )
        result = WiseParser().parse(content, CONTEXT)

        assert [(e.line, e.message) for e in result.errors] == [
            (2, "Missing date"),
            (3, "Invalid amount: five"),
        ]
        assert [t.external_id for t in result.transactions] == ["T-3"]


class TestVanguardParser:
    """Tests for VanguardParser."""

    def test_trade_and_distribution(self, fixtures_dir):
        result = VanguardParser().parse((fixtures_dir / "vanguard_transactions.csv").read_text(), CONTEXT)

        assert result.errors == []
        trade, payout = result.transactions

        assert trade.event_type is EventType.TRADE
        assert trade.effective_at == datetime(2025, 4, 6, tzinfo=UTC)
        assert trade.description == "Buy VDAL - Vanguard Diversified All Growth ETF"
        assert legs_of(trade) == [("VDAL", Decimal("19")), ("AUD", Decimal("-855.00"))]

        assert payout.event_type is EventType.PAYOUT
        assert payout.description == "Distribution - Vanguard Diversified All Growth ETF"
        assert legs_of(payout) == [("AUD", Decimal("12.34"))]
        assert payout.meta["units"] == "0"

    def test_errors(self):
        content = (
            "Date,Type,Product Type,Product Name,Product ID,Units,Total\n"
            "2025-04-06,Buy,ETF,Fund,VDAL,1,-10\n"
            "06-Foo-2025,Buy,ETF,Fund,VDAL,1,-10\n"
            "06-Apr-2025,Buy,ETF,Fund,,1,-10\n"
            "06-Apr-2025,Buy,ETF,Fund,VDAL,x,-10\n"
            "06-Apr-2025,Buy,ETF,Fund,VDAL,1,\n"
        )
        result = VanguardParser().parse(content, CONTEXT)

        assert result.transactions == []
        assert [(e.line, e.message.split(":")[0]) for e in result.errors] == [
            (2, "Invalid date format"),
            (3, "Invalid date format"),
            (4, "Missing Product ID"),
            (5, "Invalid units"),
            (6, "Invalid total"),
        ]


class TestCanonicalParser:
    """Tests for CanonicalParser."""

    HEADER = "externalEventId,eventGroup,eventDescription,effectiveAt,postedAt,legDescription,legTicker,legUnitCount\n"

    def test_groups_rows_into_transactions(self, fixtures_dir):
        result = CanonicalParser().parse((fixtures_dir / "canonical_events.csv").read_text(), CONTEXT)

        assert result.errors == []
        coffee, trade = result.transactions

        assert coffee.external_id == "EXT-1"
        assert coffee.posted_at == datetime(2025, 3, 2, tzinfo=UTC)
        assert coffee.legs[0].category_path == "food:coffee"
        assert coffee.legs[0].description == "Flat white"
        assert legs_of(coffee) == [("AUD", -550)]

        assert trade.group_key == "g2"
        assert trade.line == 3
        assert trade.external_id is None
        assert trade.posted_at is None
        assert trade.event_type is EventType.TRADE
        assert legs_of(trade) == [("VDAL", 19), ("AUD", -85500)]

    def test_empty_file(self):
        result = CanonicalParser().parse("", CONTEXT)

        assert [(e.line, e.message) for e in result.errors] == [(0, "File is empty")]

    def test_missing_columns(self):
        result = CanonicalParser().parse("eventGroup,legTicker\ng1,AUD\n", CONTEXT)

        assert result.transactions == []
        assert all(e.line == 1 for e in result.errors)
        assert "Missing required column: externalEventId" in [e.message for e in result.errors]

    def test_conflicting_group_fields(self):
        content = self.HEADER + (
            ",g1,Lunch,2025-03-01,,,AUD,-100\n"
            ",g1,Dinner,2025-03-01,,,AUD,-200\n"
            ",g2,Ok,2025-03-01,,,AUD,-300\n"
        )
        result = CanonicalParser().parse(content, CONTEXT)

        assert [t.group_key for t in result.transactions] == ["g2"]
        [error] = result.errors
        assert error.line == 3
        assert 'conflicting value for "eventDescription"' in error.message

    def test_row_errors(self):
        content = self.HEADER + (
            ",,No group,2025-03-01,,,AUD,-100\n"
            ",g1,Bad date,yesterday,,,AUD,-100\n"
            ",g2,Bad count,2025-03-01,,,AUD,-1.50\n"
            ",g3,No ticker,2025-03-01,,,,-100\n"
        )
        result = CanonicalParser().parse(content, CONTEXT)

        assert result.transactions == []
        assert [(e.line, e.message) for e in result.errors] == [
            (2, "eventGroup is required"),
            (3, 'Invalid effectiveAt date: "yesterday"'),
            (4, 'Invalid legUnitCount: "-1.50"'),
            (5, "legTicker is required"),
        ]

    def test_invalid_event_type(self):
        content = (
            "externalEventId,eventGroup,eventDescription,effectiveAt,postedAt,legDescription,legTicker,legUnitCount,eventType\n"
            ",g1,Thing,2025-03-01,,,AUD,-100,gift\n"
        )
        result = CanonicalParser().parse(content, CONTEXT)

        assert [e.message for e in result.errors] == ['Invalid eventType: "gift"']
