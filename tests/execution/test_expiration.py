"""Tests for taskbind.execution.expiration — the staleness guard."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from taskbind.execution.expiration import age, as_timedelta, is_expired


@pytest.fixture
def created(fixed_now) -> datetime:
    return fixed_now - timedelta(minutes=10)


@pytest.fixture
def descriptor(make_descriptor, created):
    return make_descriptor(created_at_utc=created)


class TestIsExpired:
    def test_younger_than_ttl(self, descriptor, fixed_now):
        assert is_expired(descriptor, timedelta(minutes=11), now=fixed_now) is False

    def test_older_than_ttl(self, descriptor, fixed_now):
        assert is_expired(descriptor, timedelta(minutes=9), now=fixed_now) is True

    def test_exactly_at_ttl_is_not_expired(self, descriptor, fixed_now):
        assert is_expired(descriptor, timedelta(minutes=10), now=fixed_now) is False

    def test_one_microsecond_past_ttl(self, descriptor, fixed_now):
        later = fixed_now + timedelta(microseconds=1)
        assert is_expired(descriptor, timedelta(minutes=10), now=later) is True

    def test_ttl_in_seconds(self, descriptor, fixed_now):
        assert is_expired(descriptor, 600, now=fixed_now) is False
        assert is_expired(descriptor, 599.5, now=fixed_now) is True

    def test_zero_ttl(self, make_descriptor, fixed_now):
        d = make_descriptor(created_at_utc=fixed_now)
        assert is_expired(d, 0, now=fixed_now) is False
        assert is_expired(d, 0, now=fixed_now + timedelta(seconds=1)) is True

    def test_now_in_other_timezone(self, descriptor, fixed_now):
        plus_five = timezone(timedelta(hours=5))
        same_instant = fixed_now.astimezone(plus_five)
        assert is_expired(descriptor, timedelta(minutes=10), now=same_instant) is False

    def test_defaults_to_current_time(self, make_descriptor):
        fresh = make_descriptor()
        stale = make_descriptor(created_at_utc=datetime.now(UTC) - timedelta(days=2))
        assert is_expired(fresh, timedelta(hours=1)) is False
        assert is_expired(stale, timedelta(hours=1)) is True

    def test_is_pure(self, descriptor, fixed_now):
        before = descriptor.to_wire()
        for _ in range(3):
            is_expired(descriptor, timedelta(minutes=1), now=fixed_now)
        assert descriptor.to_wire() == before

    @pytest.mark.parametrize("minutes", [0, 1, 5, 9, 10, 11, 60])
    def test_matches_age_comparison(self, descriptor, fixed_now, minutes):
        ttl = timedelta(minutes=minutes)
        expected = fixed_now - descriptor.created_at_utc > ttl
        assert is_expired(descriptor, ttl, now=fixed_now) is expected


class TestHelpers:
    def test_age(self, descriptor, fixed_now):
        assert age(descriptor, now=fixed_now) == timedelta(minutes=10)

    def test_negative_ttl_rejected(self):
        with pytest.raises(ValueError):
            as_timedelta(-1)

    def test_naive_now_rejected(self, descriptor):
        with pytest.raises(ValueError):
            is_expired(descriptor, 60, now=datetime(2025, 1, 15, 12, 0))
