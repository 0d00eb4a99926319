"""Maintenance ticket API routes."""

from fastapi import APIRouter, Query, status

from ...core.exceptions import AccessForbidden, NotFoundError
from ..auth.dependencies import CurrentUser, Factory, ensure_can_manage
from ..auth.schemas import AuthenticatedUser
from ..commons import BaseResponse, ListParams, PaginatedResponse
from ..properties.routers import get_managed_property
from .models import TicketPriority, TicketStatus
from .schemas import TicketCreate, TicketResponse, TicketUpdate

router = APIRouter(prefix="/maintenance", tags=["Maintenance"])


class TicketInput(TicketCreate):
    """Create payload; the reporting tenant defaults to the caller."""

    tenant_id: str | None = None


async def get_visible_ticket(
    factory, ticket_id: str, current_user: AuthenticatedUser
) -> TicketResponse:
    ticket = await factory.maintenance_tickets().find_by_id(ticket_id)
    if not ticket:
        raise NotFoundError(f"Maintenance ticket with ID {ticket_id} not found")
    if ticket.tenant_id != current_user.id:
        await get_managed_property(factory, ticket.property_id, current_user)
    return ticket


@router.get("", response_model=BaseResponse[PaginatedResponse[TicketResponse]])
async def list_tickets(
    current_user: CurrentUser,
    factory: Factory,
    options: ListParams,
    property_id: str | None = Query(None),
    ticket_status: TicketStatus | None = Query(None, alias="status"),
    priority: TicketPriority | None = Query(None),
):
    """Tickets of a property, or the tickets the caller reported."""
    repo = factory.maintenance_tickets()
    options = options.with_filters(priority=priority)
    if property_id:
        await get_managed_property(factory, property_id, current_user)
        page = await repo.find_by_property_id(property_id, ticket_status, options)
    else:
        page = await repo.find_by_tenant_id(current_user.id, ticket_status, options)
    return BaseResponse(success=True, data=PaginatedResponse.from_page(page))


@router.get("/{ticket_id}", response_model=BaseResponse[TicketResponse])
async def get_ticket(ticket_id: str, current_user: CurrentUser, factory: Factory):
    ticket = await get_visible_ticket(factory, ticket_id, current_user)
    return BaseResponse(success=True, data=ticket)


@router.post(
    "",
    response_model=BaseResponse[TicketResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_ticket(data: TicketInput, current_user: CurrentUser, factory: Factory):
    """Report a maintenance issue."""
    values = data.model_dump()
    if values.get("tenant_id") and values["tenant_id"] != current_user.id:
        ensure_can_manage(current_user, None)
    else:
        values["tenant_id"] = current_user.id
    ticket = await factory.maintenance_tickets().create(values)
    return BaseResponse(
        success=True, message="Maintenance ticket created successfully", data=ticket
    )


@router.patch("/{ticket_id}", response_model=BaseResponse[TicketResponse])
async def update_ticket(
    ticket_id: str, data: TicketUpdate, current_user: CurrentUser, factory: Factory
):
    """Update a ticket; only the property side may change its status."""
    ticket = await get_visible_ticket(factory, ticket_id, current_user)
    if data.status is not None and data.status.value != ticket.status.value:
        try:
            await get_managed_property(factory, ticket.property_id, current_user)
        except AccessForbidden:
            raise AccessForbidden("Only the property side can change ticket status") from None
    ticket = await factory.maintenance_tickets().update(ticket_id, data)
    if not ticket:
        raise NotFoundError(f"Maintenance ticket with ID {ticket_id} not found")
    return BaseResponse(
        success=True, message="Maintenance ticket updated successfully", data=ticket
    )


@router.delete("/{ticket_id}", response_model=BaseResponse[None])
async def delete_ticket(ticket_id: str, current_user: CurrentUser, factory: Factory):
    await get_visible_ticket(factory, ticket_id, current_user)
    if not await factory.maintenance_tickets().delete(ticket_id):
        raise NotFoundError(f"Maintenance ticket with ID {ticket_id} not found")
    return BaseResponse(success=True, message="Maintenance ticket deleted successfully")
