"""
Database configuration for the PropertyPulse backend.

Engines and session factories are built from settings and owned by the
repository factory; nothing here connects at import time.
"""

import logging
from datetime import datetime

from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import Mapped, declarative_base, mapped_column
from sqlalchemy.pool import StaticPool

from .core.database_types import OpaqueId, UTCDateTime
from .core.utils import new_id, utc_now

logger = logging.getLogger(__name__)

# Base class
Base = declarative_base()


class IdentifierMixin:
    """Mixin adding an opaque string primary key."""

    id: Mapped[str] = mapped_column(OpaqueId(), primary_key=True, default=new_id)


class TimestampMixin:
    """Mixin to add created and updated timestamps to models."""

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=utc_now
    )

    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=utc_now, onupdate=utc_now
    )


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite ignores foreign keys unless asked per connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _is_memory_sqlite(database_url: str) -> bool:
    url = make_url(database_url)
    return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")


def build_engine(
    database_url: str, echo: bool = False, pool_size: int | None = None
) -> AsyncEngine:
    """Create an async engine for ``database_url``."""
    kwargs = {"echo": echo, "future": True}
    if database_url.startswith("postgresql"):
        kwargs.update(pool_pre_ping=True, pool_recycle=3600)
        if pool_size:
            kwargs["pool_size"] = pool_size
    elif _is_memory_sqlite(database_url):
        # In-memory SQLite lives inside one connection; share it.
        kwargs.update(poolclass=StaticPool, connect_args={"check_same_thread": False})

    engine = create_async_engine(database_url, **kwargs)

    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    return engine


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the async session factory used by SQL repositories."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


def import_models() -> None:
    """Import every model module so they register with ``Base.metadata``."""
    from .modules.applications import models as application_models  # noqa: F401
    from .modules.feedback import models as feedback_models  # noqa: F401
    from .modules.leases import models as lease_models  # noqa: F401
    from .modules.maintenance import models as maintenance_models  # noqa: F401
    from .modules.payments import models as payment_models  # noqa: F401
    from .modules.profiles import models as profile_models  # noqa: F401
    from .modules.properties import models as property_models  # noqa: F401
    from .modules.users import models as user_models  # noqa: F401


async def init_db(engine: AsyncEngine) -> None:
    """Create database tables that do not exist yet."""
    import_models()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured")


async def ping(engine: AsyncEngine) -> None:
    """Run a trivial query; raises when the database is unreachable."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
