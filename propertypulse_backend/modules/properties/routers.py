"""Property API routes."""

from decimal import Decimal

from fastapi import APIRouter, Query, status

from ...core.exceptions import NotFoundError
from ..auth.dependencies import CurrentUser, Factory, LandlordUser, ensure_can_manage
from ..auth.schemas import AuthenticatedUser
from ..commons import BaseResponse, ListParams, PaginatedResponse
from ..users.models import UserRole
from .models import PropertyStatus
from .schemas import PropertyCreate, PropertyResponse, PropertyUpdate

router = APIRouter(prefix="/properties", tags=["Properties"])


class PropertyInput(PropertyCreate):
    """Create payload; the landlord defaults to the caller."""

    landlord_id: str | None = None


async def get_managed_property(
    factory, property_id: str, current_user: AuthenticatedUser
) -> PropertyResponse:
    """Load a property the caller may change."""
    property_obj = await factory.properties().find_by_id(property_id, populate=False)
    if not property_obj:
        raise NotFoundError(f"Property with ID {property_id} not found")
    ensure_can_manage(current_user, property_obj.landlord_id)
    return property_obj


@router.get("", response_model=BaseResponse[PaginatedResponse[PropertyResponse]])
async def list_properties(
    current_user: CurrentUser,
    factory: Factory,
    options: ListParams,
    city: str | None = Query(None),
    state: str | None = Query(None),
    zip_code: str | None = Query(None),
    min_rent: Decimal | None = Query(None, ge=0),
    max_rent: Decimal | None = Query(None, ge=0),
    bedrooms: int | None = Query(None, ge=0),
    property_status: PropertyStatus | None = Query(None, alias="status"),
    available_only: bool = Query(False),
):
    """Browse properties by location, rent, size and availability."""
    filters = {"bedrooms": bedrooms, "status": property_status}
    if city:
        filters["address_city"] = {"icontains": city}
    if state:
        filters["address_state"] = {"icontains": state}
    if zip_code:
        filters["address_zip"] = zip_code
    if min_rent is not None or max_rent is not None:
        filters["rent_amount"] = {"gte": min_rent, "lte": max_rent}
    if available_only:
        filters["is_available"] = True

    page = await factory.properties().list(options.with_filters(**filters))
    return BaseResponse(success=True, data=PaginatedResponse.from_page(page))


@router.get("/mine", response_model=BaseResponse[PaginatedResponse[PropertyResponse]])
async def list_my_properties(current_user: LandlordUser, factory: Factory, options: ListParams):
    """Properties owned by the caller."""
    page = await factory.properties().find_by_landlord_id(current_user.id, options)
    return BaseResponse(success=True, data=PaginatedResponse.from_page(page))


@router.get("/{property_id}", response_model=BaseResponse[PropertyResponse])
async def get_property(property_id: str, current_user: CurrentUser, factory: Factory):
    """Get a property by ID."""
    property_obj = await factory.properties().find_by_id(property_id)
    if not property_obj:
        raise NotFoundError(f"Property with ID {property_id} not found")
    return BaseResponse(success=True, data=property_obj)


@router.post(
    "",
    response_model=BaseResponse[PropertyResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_property(data: PropertyInput, current_user: LandlordUser, factory: Factory):
    """Create a property owned by the caller.

    Managers and admins may list a property on behalf of another landlord.
    """
    values = data.model_dump()
    if not values.get("landlord_id") or not current_user.has_role(
        UserRole.ADMIN, UserRole.PROPERTY_MANAGER
    ):
        values["landlord_id"] = current_user.id
    property_obj = await factory.properties().create(values)
    return BaseResponse(
        success=True, message="Property created successfully", data=property_obj
    )


@router.patch("/{property_id}", response_model=BaseResponse[PropertyResponse])
async def update_property(
    property_id: str, data: PropertyUpdate, current_user: LandlordUser, factory: Factory
):
    """Update a property."""
    await get_managed_property(factory, property_id, current_user)
    property_obj = await factory.properties().update(property_id, data)
    if not property_obj:
        raise NotFoundError(f"Property with ID {property_id} not found")
    return BaseResponse(
        success=True, message="Property updated successfully", data=property_obj
    )


@router.delete("/{property_id}", response_model=BaseResponse[None])
async def delete_property(property_id: str, current_user: LandlordUser, factory: Factory):
    """Delete a property with its leases, tickets and applications."""
    await get_managed_property(factory, property_id, current_user)
    if not await factory.properties().delete(property_id):
        raise NotFoundError(f"Property with ID {property_id} not found")
    return BaseResponse(success=True, message="Property deleted successfully")
