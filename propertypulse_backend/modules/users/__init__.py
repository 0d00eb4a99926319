"""User accounts for PropertyPulse."""

from .models import User, UserRole
from .schemas import UserCreate, UserResponse, UserUpdate

__all__ = ["User", "UserRole", "UserCreate", "UserResponse", "UserUpdate"]
