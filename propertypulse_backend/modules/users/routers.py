"""User management API routes."""

from fastapi import APIRouter, Query, status

from ...core.exceptions import AccessForbidden, NotFoundError
from ..auth.dependencies import AdminUser, CurrentUser, Factory, ensure_can_manage
from ..commons import BaseResponse, ListParams, PaginatedResponse
from .models import UserRole
from .schemas import UserCreate, UserResponse, UserUpdate

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=BaseResponse[PaginatedResponse[UserResponse]])
async def list_users(
    current_user: AdminUser,
    factory: Factory,
    options: ListParams,
    role: UserRole | None = Query(None),
):
    """List users, optionally by role (admin only)."""
    page = await factory.users().list(options.with_filters(role=role))
    return BaseResponse(success=True, data=PaginatedResponse.from_page(page))


@router.post(
    "",
    response_model=BaseResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_user(data: UserCreate, current_user: AdminUser, factory: Factory):
    """Create a user with any role (admin only)."""
    user = await factory.users().create(data)
    return BaseResponse(success=True, message="User created successfully", data=user)


@router.get("/{user_id}", response_model=BaseResponse[UserResponse])
async def get_user(user_id: str, current_user: CurrentUser, factory: Factory):
    """Get a user by ID."""
    ensure_can_manage(current_user, user_id)
    user = await factory.users().find_by_id(user_id)
    if not user:
        raise NotFoundError(f"User with ID {user_id} not found")
    return BaseResponse(success=True, data=user)


@router.patch("/{user_id}", response_model=BaseResponse[UserResponse])
async def update_user(
    user_id: str, data: UserUpdate, current_user: CurrentUser, factory: Factory
):
    """Update a user; only admins may change roles."""
    ensure_can_manage(current_user, user_id)
    if data.role is not None and not current_user.has_role(UserRole.ADMIN):
        raise AccessForbidden("Only administrators can change roles")
    user = await factory.users().update(user_id, data)
    if not user:
        raise NotFoundError(f"User with ID {user_id} not found")
    return BaseResponse(success=True, message="User updated successfully", data=user)


@router.delete("/{user_id}", response_model=BaseResponse[None])
async def delete_user(user_id: str, current_user: AdminUser, factory: Factory):
    """Delete a user and everything that cascades from it (admin only)."""
    if not await factory.users().delete(user_id):
        raise NotFoundError(f"User with ID {user_id} not found")
    return BaseResponse(success=True, message="User deleted successfully")
