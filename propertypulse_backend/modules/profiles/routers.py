"""Tenant profile, property match profile and matching API routes."""

from fastapi import APIRouter, Query

from ...core.exceptions import NotFoundError
from ..auth.dependencies import CurrentUser, Factory, LandlordUser
from ..commons import BaseResponse
from ..properties.routers import get_managed_property
from . import services
from .schemas import (
    PropertyMatch,
    PropertyMatchProfileData,
    PropertyMatchProfileResponse,
    TenantProfileData,
    TenantProfileResponse,
)

router = APIRouter(prefix="/profiles", tags=["Profiles"])
matching_router = APIRouter(prefix="/matching", tags=["Matching"])


# ----- Tenant profile -----


@router.get("/tenant", response_model=BaseResponse[TenantProfileResponse | None])
async def get_tenant_profile(current_user: CurrentUser, factory: Factory):
    """The caller's tenant profile, or null when none exists."""
    profile = await factory.tenant_profiles().find_by_user_id(current_user.id)
    return BaseResponse(success=True, data=profile)


@router.put("/tenant", response_model=BaseResponse[TenantProfileResponse])
async def upsert_tenant_profile(
    data: TenantProfileData, current_user: CurrentUser, factory: Factory
):
    """Create or update the caller's tenant profile."""
    profile = await factory.tenant_profiles().upsert_for_user(current_user.id, data)
    return BaseResponse(
        success=True, message="Tenant profile saved successfully", data=profile
    )


@router.delete("/tenant", response_model=BaseResponse[None])
async def delete_tenant_profile(current_user: CurrentUser, factory: Factory):
    if not await factory.tenant_profiles().delete_for_user(current_user.id):
        raise NotFoundError("Tenant profile not found")
    return BaseResponse(success=True, message="Tenant profile deleted successfully")


# ----- Property match profile -----


@router.get(
    "/property/{property_id}",
    response_model=BaseResponse[PropertyMatchProfileResponse | None],
)
async def get_property_match_profile(
    property_id: str, current_user: LandlordUser, factory: Factory
):
    await get_managed_property(factory, property_id, current_user)
    profile = await factory.property_match_profiles().find_by_property_id(property_id)
    return BaseResponse(success=True, data=profile)


@router.put(
    "/property/{property_id}",
    response_model=BaseResponse[PropertyMatchProfileResponse],
)
async def upsert_property_match_profile(
    property_id: str,
    data: PropertyMatchProfileData,
    current_user: LandlordUser,
    factory: Factory,
):
    """Create or update the rental terms used for matching."""
    await get_managed_property(factory, property_id, current_user)
    profile = await factory.property_match_profiles().upsert_for_property(property_id, data)
    return BaseResponse(
        success=True, message="Match profile updated successfully", data=profile
    )


@router.delete("/property/{property_id}", response_model=BaseResponse[None])
async def delete_property_match_profile(
    property_id: str, current_user: LandlordUser, factory: Factory
):
    await get_managed_property(factory, property_id, current_user)
    if not await factory.property_match_profiles().delete_for_property(property_id):
        raise NotFoundError("Match profile not found")
    return BaseResponse(success=True, message="Match profile deleted successfully")


# ----- Matching -----


@matching_router.get("/properties", response_model=BaseResponse[list[PropertyMatch]])
async def match_properties(
    current_user: CurrentUser,
    factory: Factory,
    limit: int = Query(10, ge=1, le=50),
    min_score: int = Query(0, ge=0, le=100),
):
    """Available properties ranked against the caller's tenant profile."""
    profile = await factory.tenant_profiles().find_by_user_id(current_user.id)
    if profile is None:
        raise NotFoundError("Create a tenant profile before requesting matches")
    matches = await services.find_matches(factory, profile, limit=limit, min_score=min_score)
    return BaseResponse(
        success=True, message=f"Found {len(matches)} matching properties", data=matches
    )
