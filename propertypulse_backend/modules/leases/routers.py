"""Lease API routes."""

from fastapi import APIRouter, Query, status

from ...core.exceptions import AccessForbidden, NotFoundError
from ..auth.dependencies import CurrentUser, Factory, LandlordUser, ensure_can_manage
from ..auth.schemas import AuthenticatedUser
from ..commons import BaseResponse, ListParams, PaginatedResponse
from ..properties.routers import get_managed_property
from ..users.models import UserRole
from .schemas import LeaseCreate, LeaseResponse, LeaseUpdate

router = APIRouter(prefix="/leases", tags=["Leases"])

STAFF_ROLES = (UserRole.ADMIN, UserRole.PROPERTY_MANAGER)


async def get_visible_lease(
    factory, lease_id: str, current_user: AuthenticatedUser
) -> LeaseResponse:
    """Load a lease the caller is party to."""
    lease = await factory.leases().find_by_id(lease_id)
    if not lease:
        raise NotFoundError(f"Lease with ID {lease_id} not found")
    if lease.tenant_id != current_user.id:
        landlord_id = lease.property.landlord_id if lease.property else None
        ensure_can_manage(current_user, landlord_id)
    return lease


@router.get("", response_model=BaseResponse[PaginatedResponse[LeaseResponse]])
async def list_leases(
    current_user: CurrentUser,
    factory: Factory,
    options: ListParams,
    property_id: str | None = Query(None),
    tenant_id: str | None = Query(None),
):
    """Leases of a property, or the caller's own leases."""
    repo = factory.leases()
    if property_id:
        await get_managed_property(factory, property_id, current_user)
        page = await repo.find_by_property_id(
            property_id, options.with_filters(tenant_id=tenant_id)
        )
    elif tenant_id and tenant_id != current_user.id:
        if not current_user.has_role(*STAFF_ROLES):
            raise AccessForbidden("You can only list your own leases")
        page = await repo.find_by_tenant_id(tenant_id, options)
    else:
        page = await repo.find_by_tenant_id(current_user.id, options)
    return BaseResponse(success=True, data=PaginatedResponse.from_page(page))


@router.get("/active", response_model=BaseResponse[PaginatedResponse[LeaseResponse]])
async def list_active_leases(current_user: LandlordUser, factory: Factory, options: ListParams):
    """Active leases covering today."""
    page = await factory.leases().find_active_leases(options=options)
    return BaseResponse(success=True, data=PaginatedResponse.from_page(page))


@router.get("/expiring", response_model=BaseResponse[PaginatedResponse[LeaseResponse]])
async def list_expiring_leases(
    current_user: LandlordUser,
    factory: Factory,
    options: ListParams,
    days: int = Query(30, ge=1, le=365),
):
    """Active leases ending within ``days`` days."""
    page = await factory.leases().find_expiring_leases(days=days, options=options)
    return BaseResponse(success=True, data=PaginatedResponse.from_page(page))


@router.get("/{lease_id}", response_model=BaseResponse[LeaseResponse])
async def get_lease(lease_id: str, current_user: CurrentUser, factory: Factory):
    """Get a lease by ID."""
    lease = await get_visible_lease(factory, lease_id, current_user)
    return BaseResponse(success=True, data=lease)


@router.post(
    "",
    response_model=BaseResponse[LeaseResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_lease(data: LeaseCreate, current_user: LandlordUser, factory: Factory):
    """Create a lease on a property the caller manages."""
    await get_managed_property(factory, data.property_id, current_user)
    lease = await factory.leases().create(data)
    return BaseResponse(success=True, message="Lease created successfully", data=lease)


@router.patch("/{lease_id}", response_model=BaseResponse[LeaseResponse])
async def update_lease(
    lease_id: str, data: LeaseUpdate, current_user: LandlordUser, factory: Factory
):
    """Update lease terms or status."""
    await get_visible_lease(factory, lease_id, current_user)
    lease = await factory.leases().update(lease_id, data)
    if not lease:
        raise NotFoundError(f"Lease with ID {lease_id} not found")
    return BaseResponse(success=True, message="Lease updated successfully", data=lease)


@router.delete("/{lease_id}", response_model=BaseResponse[None])
async def delete_lease(lease_id: str, current_user: LandlordUser, factory: Factory):
    """Delete a lease and its payments."""
    await get_visible_lease(factory, lease_id, current_user)
    if not await factory.leases().delete(lease_id):
        raise NotFoundError(f"Lease with ID {lease_id} not found")
    return BaseResponse(success=True, message="Lease deleted successfully")
