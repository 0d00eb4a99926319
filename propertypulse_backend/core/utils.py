"""Common utilities for PropertyPulse backend."""

import uuid
from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def days_from(start: datetime, days: int) -> datetime:
    """Return ``start`` shifted by ``days`` days."""
    return start + timedelta(days=days)


def new_id() -> str:
    """Generate an opaque record identifier."""
    return str(uuid.uuid4())
