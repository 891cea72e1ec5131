"""Tests for taskbind.core.timestamps — ULID generation + UTC helpers."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from taskbind.core.timestamps import ensure_utc, generate_ulid, to_iso8601, utc_now


class TestUtcNow:
    def test_has_utc_timezone(self):
        assert utc_now().tzinfo is UTC

    def test_is_recent(self):
        before = datetime.now(UTC)
        result = utc_now()
        after = datetime.now(UTC)
        assert before <= result <= after


class TestGenerateUlid:
    def test_length_is_26(self):
        assert len(generate_ulid()) == 26

    def test_uses_crockford_base32(self):
        valid_chars = set("0123456789ABCDEFGHJKMNPQRSTVWXYZ")
        assert set(generate_ulid()) <= valid_chars

    def test_unique(self):
        assert len({generate_ulid() for _ in range(100)}) == 100

    def test_time_prefix_sorts(self):
        first = generate_ulid()
        ids = [generate_ulid() for _ in range(10)]
        assert all(i[:10] >= first[:10] for i in ids)


class TestEnsureUtc:
    def test_utc_unchanged(self):
        dt = datetime(2025, 1, 1, tzinfo=UTC)
        assert ensure_utc(dt) == dt

    def test_converts_offset(self):
        dt = datetime(2025, 1, 1, 3, 0, tzinfo=timezone(timedelta(hours=3)))
        assert ensure_utc(dt) == datetime(2025, 1, 1, 0, 0, tzinfo=UTC)
        assert ensure_utc(dt).tzinfo is UTC

    def test_naive_rejected(self):
        with pytest.raises(ValueError):
            ensure_utc(datetime(2025, 1, 1))


class TestToIso8601:
    def test_utc_form(self):
        dt = datetime(2025, 1, 15, 12, 0, tzinfo=UTC)
        assert to_iso8601(dt) == "2025-01-15T12:00:00+00:00"

    def test_offset_is_normalised(self):
        dt = datetime(2025, 1, 15, 15, 0, tzinfo=timezone(timedelta(hours=3)))
        assert to_iso8601(dt) == "2025-01-15T12:00:00+00:00"

    def test_round_trips_through_fromisoformat(self):
        dt = datetime(2025, 1, 15, 12, 0, 0, 123456, tzinfo=UTC)
        assert datetime.fromisoformat(to_iso8601(dt)) == dt
