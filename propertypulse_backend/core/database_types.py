"""Custom database types shared by PostgreSQL and SQLite."""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, String, TypeDecorator

from .utils import ensure_utc


class OpaqueId(TypeDecorator):
    """Record identifier stored as CHAR(36) text.

    Accepts ``uuid.UUID`` or ``str`` on the way in and always hands back a
    ``str``, so identifiers stay opaque to callers on every backend.
    """

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        """Convert UUID to string when saving to database."""
        if value is None:
            return value
        if isinstance(value, uuid.UUID):
            return str(value)
        return value

    def process_result_value(self, value, dialect):
        """Return identifiers as plain strings."""
        if value is None:
            return value
        return str(value)


class UTCDateTime(TypeDecorator):
    """Timezone-aware datetime that always reads back in UTC.

    SQLite drops tzinfo on storage; this type normalises both directions so
    comparisons behave the same on every backend.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        if isinstance(value, datetime):
            value = ensure_utc(value)
            if dialect.name == "sqlite":
                return value.replace(tzinfo=None)
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        return ensure_utc(value)
