"""Timestamp helpers.

All timestamps are persisted as naive UTC so comparisons behave the same on
SQLite (which drops tzinfo) and on servers that keep it.
"""
from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize ``value`` to a naive UTC datetime, leaving naive input untouched."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to a stored naive timestamp; aware values are converted."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
