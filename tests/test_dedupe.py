"""Tests for dedupe key computation."""

import hashlib
from datetime import datetime, timedelta, timezone, UTC

from ledgerkit.domain.dedupe import compute_dedupe_key, format_timestamp, normalize_description


class TestNormalizeDescription:
    """Tests for description normalization."""

    def test_trims_lowercases_and_collapses_whitespace(self):
        assert normalize_description("  WOOLWORTHS 1234   PENRITH \t") == "woolworths 1234 penrith"

    def test_empty_description(self):
        assert normalize_description("   ") == ""


class TestFormatTimestamp:
    """Tests for the timestamp rendering used in hashes."""

    def test_utc_midnight(self):
        assert format_timestamp(datetime(2025, 1, 10, tzinfo=UTC)) == "2025-01-10T00:00:00.000Z"

    def test_naive_is_treated_as_utc(self):
        assert format_timestamp(datetime(2025, 1, 10)) == "2025-01-10T00:00:00.000Z"

    def test_offset_is_converted_to_utc(self):
        sydney = timezone(timedelta(hours=11))
        value = datetime(2025, 1, 10, 9, 30, tzinfo=sydney)
        assert format_timestamp(value) == "2025-01-09T22:30:00.000Z"

    def test_milliseconds_are_kept(self):
        value = datetime(2025, 1, 10, 12, 0, 5, 123456, tzinfo=UTC)
        assert format_timestamp(value) == "2025-01-10T12:00:05.123Z"


class TestComputeDedupeKey:
    """Tests for compute_dedupe_key."""

    def test_external_id_takes_precedence(self):
        key = compute_dedupe_key(7, "12345678", datetime(2025, 1, 10, tzinfo=UTC), -5520, "anything")
        assert key == "7:12345678"

    def test_external_id_is_stripped(self):
        key = compute_dedupe_key(7, "  ABC  ", datetime(2025, 1, 10, tzinfo=UTC), 0, "x")
        assert key == "7:ABC"

    def test_blank_external_id_falls_back_to_hash(self):
        effective_at = datetime(2025, 1, 10, tzinfo=UTC)
        with_blank = compute_dedupe_key(7, "   ", effective_at, -5520, "Coffee")
        without = compute_dedupe_key(7, None, effective_at, -5520, "Coffee")
        assert with_blank == without
        assert len(without) == 64

    def test_hash_matches_documented_payload(self):
        effective_at = datetime(2025, 1, 10, tzinfo=UTC)
        expected = hashlib.sha256(
            "1|2025-01-10T00:00:00.000Z|-5520|woolworths 1234 penrith".encode("utf-8")
        ).hexdigest()
        assert compute_dedupe_key(1, None, effective_at, -5520, "WOOLWORTHS 1234  PENRITH") == expected

    def test_hash_is_stable_across_description_formatting(self):
        effective_at = datetime(2025, 1, 10, tzinfo=UTC)
        a = compute_dedupe_key(1, None, effective_at, -5520, "WOOLWORTHS 1234 PENRITH")
        b = compute_dedupe_key(1, None, effective_at, -5520, "  woolworths   1234 penrith ")
        assert a == b

    def test_hash_changes_with_each_field(self):
        effective_at = datetime(2025, 1, 10, tzinfo=UTC)
        base = compute_dedupe_key(1, None, effective_at, -5520, "Coffee")
        assert compute_dedupe_key(2, None, effective_at, -5520, "Coffee") != base
        assert compute_dedupe_key(1, None, effective_at + timedelta(days=1), -5520, "Coffee") != base
        assert compute_dedupe_key(1, None, effective_at, -5521, "Coffee") != base
        assert compute_dedupe_key(1, None, effective_at, -5520, "Tea") != base
