"""
Repository factory and database-target switch.

The factory is built once from settings during application start-up and
handed to request handlers through FastAPI dependencies. It owns one
backend per configured target; each backend builds its repositories once,
so a repository captured before a switch keeps working against the backend
it was created for.
"""

import asyncio
import enum
import logging
import threading
import time
from abc import ABC, abstractmethod
from collections import deque
from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine

from ..config import Settings
from ..database import build_engine, build_session_factory, import_models, init_db, ping
from .exceptions import ConfigurationError
from .repositories import DocumentStore, Repository
from .utils import utc_now

logger = logging.getLogger(__name__)

HEALTH_HISTORY_SIZE = 10


class DatabaseTarget(str, enum.Enum):
    """Storage backends the repositories can run against."""

    POSTGRES = "postgres"
    JSON = "json"


def _sql_repository_classes() -> dict[str, type]:
    from ..modules.applications.repository import SQLApplicationRepository
    from ..modules.feedback.repository import SQLFeedbackRepository
    from ..modules.leases.repository import SQLLeaseRepository
    from ..modules.maintenance.repository import SQLTicketRepository
    from ..modules.payments.repository import SQLPaymentRepository
    from ..modules.profiles.repository import (
        SQLPropertyMatchProfileRepository,
        SQLTenantProfileRepository,
    )
    from ..modules.properties.repository import SQLPropertyRepository
    from ..modules.users.repository import SQLUserRepository

    return {
        "users": SQLUserRepository,
        "properties": SQLPropertyRepository,
        "leases": SQLLeaseRepository,
        "payments": SQLPaymentRepository,
        "maintenance_tickets": SQLTicketRepository,
        "applications": SQLApplicationRepository,
        "tenant_profiles": SQLTenantProfileRepository,
        "property_match_profiles": SQLPropertyMatchProfileRepository,
        "feedback": SQLFeedbackRepository,
    }


def _document_repository_classes() -> dict[str, type]:
    from ..modules.applications.repository import DocumentApplicationRepository
    from ..modules.feedback.repository import DocumentFeedbackRepository
    from ..modules.leases.repository import DocumentLeaseRepository
    from ..modules.maintenance.repository import DocumentTicketRepository
    from ..modules.payments.repository import DocumentPaymentRepository
    from ..modules.profiles.repository import (
        DocumentPropertyMatchProfileRepository,
        DocumentTenantProfileRepository,
    )
    from ..modules.properties.repository import DocumentPropertyRepository
    from ..modules.users.repository import DocumentUserRepository

    return {
        "users": DocumentUserRepository,
        "properties": DocumentPropertyRepository,
        "leases": DocumentLeaseRepository,
        "payments": DocumentPaymentRepository,
        "maintenance_tickets": DocumentTicketRepository,
        "applications": DocumentApplicationRepository,
        "tenant_profiles": DocumentTenantProfileRepository,
        "property_match_profiles": DocumentPropertyMatchProfileRepository,
        "feedback": DocumentFeedbackRepository,
    }


class Backend(ABC):
    """One storage target with its repositories."""

    target: DatabaseTarget

    def __init__(self):
        self.repositories: dict[str, Repository] = {}

    @abstractmethod
    async def start(self) -> None:
        """Prepare storage before the backend serves requests."""

    @abstractmethod
    async def ping(self) -> None:
        """Raise when storage is unreachable."""

    @abstractmethod
    async def close(self) -> None:
        """Release connections and flush pending writes."""


class SQLBackend(Backend):
    target = DatabaseTarget.POSTGRES

    def __init__(self, settings: Settings):
        super().__init__()
        import_models()
        self.create_tables = settings.database_create_tables
        self.engine: AsyncEngine = build_engine(
            settings.database_url,
            echo=settings.database_echo,
            pool_size=settings.database_pool_size,
        )
        session_factory = build_session_factory(self.engine)
        self.repositories = {
            name: cls(session_factory) for name, cls in _sql_repository_classes().items()
        }

    async def start(self) -> None:
        if self.create_tables:
            await init_db(self.engine)

    async def ping(self) -> None:
        await ping(self.engine)

    async def close(self) -> None:
        await self.engine.dispose()


class DocumentBackend(Backend):
    target = DatabaseTarget.JSON

    def __init__(self, settings: Settings):
        super().__init__()
        self.store = DocumentStore(settings.document_store_path)
        classes = _document_repository_classes()
        for cls in classes.values():
            self.store.register(cls.collection_schema())
        self.repositories = {name: cls(self.store) for name, cls in classes.items()}

    async def start(self) -> None:
        await self.store.load()

    async def ping(self) -> None:
        await self.store.ping()

    async def close(self) -> None:
        await self.store.flush()


_BACKENDS: dict[DatabaseTarget, type[Backend]] = {
    DatabaseTarget.POSTGRES: SQLBackend,
    DatabaseTarget.JSON: DocumentBackend,
}


class RepositoryFactory:
    """Hands out repositories for the active database target."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self._lock = threading.Lock()
        self._backends: dict[DatabaseTarget, Backend] = {}
        self._health_history: deque[dict[str, Any]] = deque(maxlen=HEALTH_HISTORY_SIZE)
        self._started_at = time.monotonic()
        self._active = self._validate_target(settings.database_target)

    # Targets

    @property
    def configured_targets(self) -> list[DatabaseTarget]:
        targets = []
        if self.settings.database_url:
            targets.append(DatabaseTarget.POSTGRES)
        if self.settings.document_store_enabled:
            targets.append(DatabaseTarget.JSON)
        return targets

    @property
    def active_target(self) -> DatabaseTarget:
        return self._active

    def _validate_target(self, target: DatabaseTarget | str) -> DatabaseTarget:
        try:
            target = DatabaseTarget(str(getattr(target, "value", target)).lower())
        except ValueError:
            raise ConfigurationError(
                f"Unknown database target '{target}'",
                details={"available": [t.value for t in DatabaseTarget]},
            ) from None
        if target not in self.configured_targets:
            raise ConfigurationError(
                f"Database target '{target.value}' is not configured",
                details={"configured": [t.value for t in self.configured_targets]},
            )
        return target

    def _backend(self, target: DatabaseTarget) -> Backend:
        with self._lock:
            backend = self._backends.get(target)
            if backend is None:
                backend = _BACKENDS[target](self.settings)
                self._backends[target] = backend
                logger.info("Initialised %s backend", target.value)
            return backend

    # Lifecycle

    async def start(self) -> None:
        await self._backend(self._active).start()
        logger.info("Repository factory started", extra={"target": self._active.value})

    async def close(self) -> None:
        with self._lock:
            backends = list(self._backends.values())
            self._backends.clear()
        for backend in backends:
            await backend.close()

    async def switch_database(self, target: DatabaseTarget | str) -> dict[str, Any]:
        """Make ``target`` the active backend for repositories handed out from now on.

        Raises:
            ConfigurationError: If the target is unknown or not configured
        """
        target = self._validate_target(target)
        previous = self._active
        if target == previous:
            return {
                "success": True,
                "message": f"Already using {target.value}",
                "previous_target": previous.value,
                "current_target": target.value,
            }

        await self._backend(target).start()
        with self._lock:
            self._active = target
        logger.info(
            "Switched database target",
            extra={"previous_target": previous.value, "current_target": target.value},
        )
        return {
            "success": True,
            "message": f"Switched from {previous.value} to {target.value}",
            "previous_target": previous.value,
            "current_target": target.value,
        }

    # Repositories

    def get(self, name: str) -> Repository:
        backend = self._backend(self._active)
        try:
            return backend.repositories[name]
        except KeyError:
            raise ConfigurationError(f"Unknown repository '{name}'") from None

    def users(self):
        return self.get("users")

    def properties(self):
        return self.get("properties")

    def leases(self):
        return self.get("leases")

    def payments(self):
        return self.get("payments")

    def maintenance_tickets(self):
        return self.get("maintenance_tickets")

    def applications(self):
        return self.get("applications")

    def tenant_profiles(self):
        return self.get("tenant_profiles")

    def property_match_profiles(self):
        return self.get("property_match_profiles")

    def feedback(self):
        return self.get("feedback")

    # Diagnostics

    async def health_check(self) -> dict[str, Any]:
        """Ping every configured backend and record the outcome."""
        checks: dict[str, Any] = {}
        for target in self.configured_targets:
            started = time.perf_counter()
            try:
                await asyncio.wait_for(self._backend(target).ping(), timeout=5)
            except Exception as e:
                logger.warning(
                    "Health check failed", extra={"target": target.value, "error": str(e)}
                )
                checks[target.value] = {"status": "unhealthy", "error": str(e)}
            else:
                checks[target.value] = {
                    "status": "healthy",
                    "response_time_ms": round((time.perf_counter() - started) * 1000, 2),
                }

        active_status = checks.get(self._active.value, {}).get("status", "unhealthy")
        result = {
            "status": active_status,
            "active_target": self._active.value,
            "targets": checks,
            "uptime_seconds": int(time.monotonic() - self._started_at),
            "checked_at": utc_now().isoformat(),
        }
        self._health_history.append(
            {
                "timestamp": result["checked_at"],
                "status": active_status,
                "target": self._active.value,
            }
        )
        return result

    def health_history(self) -> dict[str, Any]:
        history = list(self._health_history)
        return {
            "current_status": history[-1] if history else None,
            "history": history,
            "uptime_seconds": int(time.monotonic() - self._started_at),
        }

    def database_info(self) -> dict[str, Any]:
        with self._lock:
            loaded = self._backends.get(self._active)
        return {
            "active_target": self._active.value,
            "configured_targets": [t.value for t in self.configured_targets],
            "available_targets": [t.value for t in DatabaseTarget],
            "repositories": sorted(loaded.repositories) if loaded else [],
        }
