from __future__ import annotations

from datetime import UTC, datetime


def utc_now() -> datetime:
    return datetime.now(UTC)


def utc_now_naive() -> datetime:
    """Naive UTC timestamp, matching the ``DateTime`` columns of the models."""
    return utc_now().replace(tzinfo=None)
