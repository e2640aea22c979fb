"""Tests for domain entities."""

import pytest
from dataclasses import FrozenInstanceError
from datetime import datetime, UTC

from ledgerkit.domain.entities import Event, EventState, EventType, ParseResult
from ledgerkit.domain.errors import ImportErrorRecord, ImportPhase


def make_event(**overrides):
    values = dict(
        id=1,
        user_id=1,
        account_id=1,
        event_type=EventType.PURCHASE,
        effective_at=datetime(2025, 1, 10, tzinfo=UTC),
        posted_at=None,
        description="Coffee",
        external_id=None,
        dedupe_key="k",
        import_run_id=None,
        deleted_at=None,
        meta=None,
        created_at=datetime(2025, 1, 10, tzinfo=UTC),
    )
    values.update(overrides)
    return Event(**values)


class TestEvent:
    """Tests for Event entity."""

    def test_state_follows_deleted_at(self):
        assert make_event().state is EventState.ACTIVE
        assert make_event(deleted_at=datetime.now(UTC)).state is EventState.DELETED

    def test_event_immutability(self):
        event = make_event()
        with pytest.raises(FrozenInstanceError):
            event.deleted_at = datetime.now(UTC)


def test_enums_compare_to_their_values():
    assert EventType.BILL_PAYMENT == "bill_payment"
    assert EventType("payout") is EventType.PAYOUT


def test_parse_result_defaults_are_independent():
    a, b = ParseResult(), ParseResult()
    a.errors.append("x")
    assert b.errors == []


def test_import_error_record_dict_form():
    record = ImportErrorRecord(line=2, message="Missing date", phase=ImportPhase.PARSE)

    assert record.to_dict() == {"line": 2, "message": "Missing date", "phase": "parse"}
    assert ImportErrorRecord.from_dict(record.to_dict()) == record
