"""Authentication dependencies for FastAPI."""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ...config import Settings
from ...core.exceptions import AccessForbidden, AuthenticationRequired
from ...core.repository_factory import RepositoryFactory
from ..users.models import UserRole
from .jwt_service import decode_access_token
from .schemas import AuthenticatedUser

security = HTTPBearer(auto_error=False)

LANDLORD_ROLES = (UserRole.LANDLORD, UserRole.PROPERTY_MANAGER, UserRole.ADMIN)


def get_settings_dependency(request: Request) -> Settings:
    return request.app.state.settings


def get_factory(request: Request) -> RepositoryFactory:
    """Repository factory created during application start-up."""
    return request.app.state.factory


AppSettings = Annotated[Settings, Depends(get_settings_dependency)]
Factory = Annotated[RepositoryFactory, Depends(get_factory)]


async def get_current_user(
    settings: AppSettings,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> AuthenticatedUser:
    """Extract and validate current user from JWT token.

    No storage lookup happens here; everything needed is in the token.
    """
    if credentials is None:
        raise AuthenticationRequired()

    payload = decode_access_token(credentials.credentials, settings)
    if payload is None:
        raise AuthenticationRequired("Invalid or expired token")

    try:
        return AuthenticatedUser(
            id=payload["sub"], email=payload["email"], role=payload["role"]
        )
    except KeyError as e:
        raise AuthenticationRequired(f"Invalid token payload: missing {e}") from None


def require_role(*allowed_roles: str | UserRole):
    """Dependency factory for role-based access control.

    Usage:
        @router.post("/switch")
        async def switch(current_user: AuthenticatedUser = Depends(require_role(UserRole.ADMIN))):
            ...
    """
    role_names = {getattr(r, "value", r) for r in allowed_roles}

    async def role_checker(
        current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    ) -> AuthenticatedUser:
        if current_user.role not in role_names:
            raise AccessForbidden(
                f"Access denied. Required roles: {', '.join(sorted(role_names))}"
            )
        return current_user

    return role_checker


# Type aliases for dependency injection
CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]
LandlordUser = Annotated[AuthenticatedUser, Depends(require_role(*LANDLORD_ROLES))]
AdminUser = Annotated[AuthenticatedUser, Depends(require_role(UserRole.ADMIN))]


def ensure_can_manage(current_user: AuthenticatedUser, owner_id: str | None) -> None:
    """Allow the owner of a record, a property manager or an admin.

    Raises:
        AccessForbidden: For anyone else
    """
    if current_user.has_role(UserRole.ADMIN, UserRole.PROPERTY_MANAGER):
        return
    if owner_id is None or current_user.id != owner_id:
        raise AccessForbidden("You do not have access to this resource")
