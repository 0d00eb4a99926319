"""Rent payment API routes."""

from fastapi import APIRouter, Query, status

from ...core.exceptions import NotFoundError
from ..auth.dependencies import CurrentUser, Factory, LandlordUser
from ..auth.schemas import AuthenticatedUser
from ..commons import BaseResponse, ListParams, PaginatedResponse
from ..leases.routers import get_visible_lease
from .models import PaymentStatus
from .schemas import PaymentCreate, PaymentResponse, PaymentUpdate

router = APIRouter(prefix="/payments", tags=["Payments"])


async def get_visible_payment(
    factory, payment_id: str, current_user: AuthenticatedUser
) -> PaymentResponse:
    payment = await factory.payments().find_by_id(payment_id)
    if not payment:
        raise NotFoundError(f"Payment with ID {payment_id} not found")
    if payment.tenant_id != current_user.id:
        await get_visible_lease(factory, payment.lease_id, current_user)
    return payment


@router.get("", response_model=BaseResponse[PaginatedResponse[PaymentResponse]])
async def list_payments(
    current_user: CurrentUser,
    factory: Factory,
    options: ListParams,
    lease_id: str | None = Query(None),
    payment_status: PaymentStatus | None = Query(None, alias="status"),
):
    """Payments of a lease, or the caller's own payments."""
    repo = factory.payments()
    options = options.with_filters(status=payment_status)
    if lease_id:
        await get_visible_lease(factory, lease_id, current_user)
        page = await repo.find_by_lease_id(lease_id, options)
    else:
        page = await repo.find_by_tenant_id(current_user.id, options)
    return BaseResponse(success=True, data=PaginatedResponse.from_page(page))


@router.get("/overdue", response_model=BaseResponse[PaginatedResponse[PaymentResponse]])
async def list_overdue_payments(current_user: LandlordUser, factory: Factory, options: ListParams):
    """Unpaid payments past their due date."""
    page = await factory.payments().find_overdue_payments(options=options)
    return BaseResponse(success=True, data=PaginatedResponse.from_page(page))


@router.get("/upcoming", response_model=BaseResponse[PaginatedResponse[PaymentResponse]])
async def list_upcoming_payments(
    current_user: LandlordUser,
    factory: Factory,
    options: ListParams,
    days: int = Query(7, ge=1, le=90),
):
    """Pending payments due within ``days`` days."""
    page = await factory.payments().find_upcoming_payments(days=days, options=options)
    return BaseResponse(success=True, data=PaginatedResponse.from_page(page))


@router.get("/{payment_id}", response_model=BaseResponse[PaymentResponse])
async def get_payment(payment_id: str, current_user: CurrentUser, factory: Factory):
    """Get a payment by ID."""
    payment = await get_visible_payment(factory, payment_id, current_user)
    return BaseResponse(success=True, data=payment)


@router.post(
    "",
    response_model=BaseResponse[PaymentResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_payment(data: PaymentCreate, current_user: LandlordUser, factory: Factory):
    """Record a payment due on a lease."""
    await get_visible_lease(factory, data.lease_id, current_user)
    payment = await factory.payments().create(data)
    return BaseResponse(success=True, message="Payment created successfully", data=payment)


@router.patch("/{payment_id}", response_model=BaseResponse[PaymentResponse])
async def update_payment(
    payment_id: str, data: PaymentUpdate, current_user: LandlordUser, factory: Factory
):
    """Update a payment; marking it PAID stamps the paid date."""
    await get_visible_payment(factory, payment_id, current_user)
    payment = await factory.payments().update(payment_id, data)
    if not payment:
        raise NotFoundError(f"Payment with ID {payment_id} not found")
    return BaseResponse(success=True, message="Payment updated successfully", data=payment)


@router.delete("/{payment_id}", response_model=BaseResponse[None])
async def delete_payment(payment_id: str, current_user: LandlordUser, factory: Factory):
    await get_visible_payment(factory, payment_id, current_user)
    if not await factory.payments().delete(payment_id):
        raise NotFoundError(f"Payment with ID {payment_id} not found")
    return BaseResponse(success=True, message="Payment deleted successfully")
