"""
Descriptor ids and UTC instants (stdlib-only).

Descriptors need an id that sorts by creation time (handy when reading a
queue dump) and a timezone-aware UTC creation instant that survives a trip
through ISO 8601.

Features:
    - **generate_ulid():** 48-bit millisecond time + 80 random bits, Crockford base32
    - **utc_now():** Timezone-aware UTC datetime
    - **ensure_utc():** Normalise aware datetimes to UTC, reject naive ones
    - **to_iso8601():** Wire form of ``createdAtUtc``

Tags:
    timestamps, ulid, utc, datetime, taskbind, stdlib-only

Doc-Types:
    - API Reference
"""

import secrets
import time
from datetime import UTC, datetime

# Crockford's base32 alphabet (no I, L, O, U)
_CROCKFORD = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"

_ULID_CHARS = 26


def utc_now() -> datetime:
    """Current instant, aware and in UTC."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime) -> datetime:
    """Return ``dt`` converted to UTC.

    Raises:
        ValueError: If ``dt`` is naive; a naive time has no defined age.
    """
    if dt.tzinfo is None or dt.utcoffset() is None:
        raise ValueError(f"Naive datetime is not allowed: {dt.isoformat()}")
    return dt.astimezone(UTC)


def generate_ulid() -> str:
    """26-char ULID; the first 10 chars encode creation time and sort with it."""
    millis = time.time_ns() // 1_000_000
    value = (millis << 80) | secrets.randbits(80)
    chars = []
    for _ in range(_ULID_CHARS):
        value, digit = divmod(value, 32)
        chars.append(_CROCKFORD[digit])
    return "".join(reversed(chars))


def to_iso8601(dt: datetime) -> str:
    """``dt`` in UTC as ISO 8601 with an explicit ``+00:00`` offset."""
    return ensure_utc(dt).isoformat()
