"""Rental application API routes."""

from fastapi import APIRouter, Query, status

from ...core.exceptions import NotFoundError
from ..auth.dependencies import CurrentUser, Factory, LandlordUser
from ..auth.schemas import AuthenticatedUser
from ..commons import BaseResponse, ListParams, PaginatedResponse
from ..properties.routers import get_managed_property
from .models import ApplicationStatus
from .schemas import ApplicationCreate, ApplicationResponse, ApplicationReview

router = APIRouter(prefix="/applications", tags=["Applications"])


async def get_visible_application(
    factory, application_id: str, current_user: AuthenticatedUser
) -> ApplicationResponse:
    application = await factory.applications().find_by_id(application_id)
    if not application:
        raise NotFoundError(f"Application with ID {application_id} not found")
    if application.applicant_id != current_user.id:
        await get_managed_property(factory, application.property_id, current_user)
    return application


@router.post(
    "",
    response_model=BaseResponse[ApplicationResponse],
    status_code=status.HTTP_201_CREATED,
)
async def submit_application(
    data: ApplicationCreate, current_user: CurrentUser, factory: Factory
):
    """Apply for a property as the current user."""
    values = data.model_dump()
    values["applicant_id"] = current_user.id
    application = await factory.applications().create(values)
    return BaseResponse(
        success=True, message="Application submitted successfully", data=application
    )


@router.get("", response_model=BaseResponse[PaginatedResponse[ApplicationResponse]])
async def list_property_applications(
    current_user: LandlordUser,
    factory: Factory,
    options: ListParams,
    property_id: str = Query(...),
    application_status: ApplicationStatus | None = Query(None, alias="status"),
    search: str | None = Query(None, min_length=1),
):
    """Applications for a property, searchable by applicant name or email."""
    await get_managed_property(factory, property_id, current_user)
    page = await factory.applications().find_by_property_id(
        property_id, application_status, search, options
    )
    return BaseResponse(success=True, data=PaginatedResponse.from_page(page))


@router.get("/mine", response_model=BaseResponse[PaginatedResponse[ApplicationResponse]])
async def list_my_applications(current_user: CurrentUser, factory: Factory, options: ListParams):
    page = await factory.applications().find_by_applicant_id(current_user.id, options)
    return BaseResponse(success=True, data=PaginatedResponse.from_page(page))


@router.get("/{application_id}", response_model=BaseResponse[ApplicationResponse])
async def get_application(application_id: str, current_user: CurrentUser, factory: Factory):
    application = await get_visible_application(factory, application_id, current_user)
    return BaseResponse(success=True, data=application)


@router.post("/{application_id}/review", response_model=BaseResponse[ApplicationResponse])
async def review_application(
    application_id: str,
    data: ApplicationReview,
    current_user: LandlordUser,
    factory: Factory,
):
    """Approve or decline a pending application."""
    application = await factory.applications().find_by_id(application_id, populate=False)
    if not application:
        raise NotFoundError(f"Application with ID {application_id} not found")
    await get_managed_property(factory, application.property_id, current_user)
    application = await factory.applications().review(
        application_id, data.status, data.review_notes
    )
    return BaseResponse(
        success=True,
        message=f"Application {application.status.value.lower()}",
        data=application,
    )


@router.delete("/{application_id}", response_model=BaseResponse[None])
async def withdraw_application(
    application_id: str, current_user: CurrentUser, factory: Factory
):
    """Withdraw an application, or remove it from a managed property."""
    await get_visible_application(factory, application_id, current_user)
    if not await factory.applications().delete(application_id):
        raise NotFoundError(f"Application with ID {application_id} not found")
    return BaseResponse(success=True, message="Application deleted successfully")
