"""Authentication API routes."""

import logging

from fastapi import APIRouter, status

from ...core.exceptions import AccessForbidden, AuthenticationRequired, NotFoundError
from ..commons import BaseResponse
from ..users.models import UserRole
from ..users.schemas import UserResponse
from .dependencies import AppSettings, CurrentUser, Factory
from .jwt_service import create_access_token, get_token_expiry_seconds
from .schemas import LoginRequest, RegisterRequest, TokenResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

SELF_SERVICE_ROLES = {UserRole.TENANT, UserRole.LANDLORD}


@router.post("/login", response_model=BaseResponse[TokenResponse])
async def login(login_data: LoginRequest, factory: Factory, settings: AppSettings):
    """Authenticate a user and return an access token."""
    user = await factory.users().verify_credentials(login_data.email, login_data.password)
    if user is None:
        logger.info("Failed login attempt", extra={"email": login_data.email})
        raise AuthenticationRequired("Invalid email or password")

    token = create_access_token(user.id, user.email, user.role.value, settings)
    return BaseResponse(
        success=True,
        message=f"Welcome back, {user.first_name}!",
        data=TokenResponse(
            access_token=token, expires_in=get_token_expiry_seconds(settings)
        ),
    )


@router.post(
    "/register",
    response_model=BaseResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
)
async def register(data: RegisterRequest, factory: Factory):
    """Create a tenant or landlord account."""
    if data.role not in SELF_SERVICE_ROLES:
        raise AccessForbidden(f"Role {data.role.value} cannot be self-assigned")
    user = await factory.users().create(data.model_dump())
    return BaseResponse(success=True, message="Account created successfully", data=user)


@router.get("/me", response_model=BaseResponse[UserResponse])
async def get_current_user_info(current_user: CurrentUser, factory: Factory):
    """Get the current user's profile."""
    user = await factory.users().find_by_id(current_user.id)
    if not user:
        raise NotFoundError("User not found")
    return BaseResponse(success=True, data=user)
