"""Maintenance ticket repositories."""

from ...core.pagination import ListOptions, Page
from ...core.repositories import DocumentRepository, ForeignKey, Repository, SQLRepository
from .models import MaintenanceTicket, TicketPriority, TicketStatus
from .schemas import TicketCreate, TicketResponse, TicketUpdate

_OPEN, _IN_PROGRESS, _RESOLVED = (s.value for s in TicketStatus)


class TicketRepository(Repository[TicketResponse]):
    resource_type = "MaintenanceTicket"
    create_schema = TicketCreate
    update_schema = TicketUpdate
    read_schema = TicketResponse
    relations = {
        "property": ("property_id", "properties"),
        "tenant": ("tenant_id", "users"),
    }
    status_transitions = {
        _OPEN: {_IN_PROGRESS, _RESOLVED},
        _IN_PROGRESS: {_RESOLVED},
    }

    async def find_by_property_id(
        self,
        property_id: str,
        status: TicketStatus | str | None = None,
        options: ListOptions | None = None,
    ) -> Page[TicketResponse]:
        return await self.list(
            (options or ListOptions()).with_filters(property_id=property_id, status=status)
        )

    async def find_by_tenant_id(
        self,
        tenant_id: str,
        status: TicketStatus | str | None = None,
        options: ListOptions | None = None,
    ) -> Page[TicketResponse]:
        return await self.list(
            (options or ListOptions()).with_filters(tenant_id=tenant_id, status=status)
        )

    async def find_by_status(
        self, status: TicketStatus | str, options: ListOptions | None = None
    ) -> Page[TicketResponse]:
        return await self.list((options or ListOptions()).with_filters(status=status))

    async def find_by_priority(
        self, priority: TicketPriority | str, options: ListOptions | None = None
    ) -> Page[TicketResponse]:
        return await self.list((options or ListOptions()).with_filters(priority=priority))


class SQLTicketRepository(SQLRepository[TicketResponse], TicketRepository):
    model = MaintenanceTicket


class DocumentTicketRepository(DocumentRepository[TicketResponse], TicketRepository):
    collection = "maintenance_tickets"
    required_fields = ("property_id", "tenant_id", "title", "description")
    foreign_keys = {
        "property_id": ForeignKey("properties"),
        "tenant_id": ForeignKey("users"),
    }
