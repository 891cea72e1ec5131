"""Expiration guard - decide whether a queued task is too old to run.

A task that sat in the queue past its relevance window (after an outage,
say) should be dropped rather than executed late. The check is pure: it
reads the descriptor and a clock and nothing else.

Boundary: a task exactly ``ttl`` old is *not* expired.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from taskbind.core.timestamps import ensure_utc, utc_now
from taskbind.execution.descriptor import TaskDescriptor


def as_timedelta(ttl: timedelta | float | int) -> timedelta:
    """Normalise a TTL given as a timedelta or as seconds."""
    if not isinstance(ttl, timedelta):
        ttl = timedelta(seconds=ttl)
    if ttl < timedelta(0):
        raise ValueError(f"ttl must not be negative, got {ttl}")
    return ttl


def age(descriptor: TaskDescriptor, *, now: datetime | None = None) -> timedelta:
    """How long ago the descriptor was created."""
    current = ensure_utc(now) if now is not None else utc_now()
    return current - descriptor.created_at_utc


def is_expired(
    descriptor: TaskDescriptor,
    ttl: timedelta | float | int,
    *,
    now: datetime | None = None,
) -> bool:
    """True iff the descriptor is strictly older than ``ttl``.

    Args:
        descriptor: Task to check
        ttl: Time-to-live as a timedelta or seconds
        now: Override the clock (aware datetime); defaults to the current UTC time
    """
    return age(descriptor, now=now) > as_timedelta(ttl)


__all__ = ["age", "as_timedelta", "is_expired"]
