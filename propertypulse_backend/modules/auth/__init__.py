"""Authentication module for PropertyPulse."""

from .dependencies import (
    AdminUser,
    CurrentUser,
    Factory,
    LandlordUser,
    get_current_user,
    get_factory,
    ensure_can_manage,
    require_role,
)
from .routers import router
from .schemas import AuthenticatedUser

__all__ = [
    # Router
    "router",
    # Dependencies
    "get_current_user",
    "get_factory",
    "require_role",
    "ensure_can_manage",
    "CurrentUser",
    "LandlordUser",
    "AdminUser",
    "Factory",
    # Schemas
    "AuthenticatedUser",
]
