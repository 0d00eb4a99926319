"""Authentication schemas for PropertyPulse."""

from pydantic import BaseModel, EmailStr, Field

from ..users.models import UserRole


class LoginRequest(BaseModel):
    """Schema for login request."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class RegisterRequest(BaseModel):
    """Self-service sign-up; privileged roles are assigned by an admin."""

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=120)
    last_name: str = Field(..., min_length=1, max_length=120)
    phone: str | None = Field(None, max_length=50)
    role: UserRole = UserRole.TENANT


class TokenResponse(BaseModel):
    """Schema for token response."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds


class AuthenticatedUser(BaseModel):
    """Authenticated user context for request handling."""

    id: str
    email: str
    role: str

    def has_role(self, *roles: str | UserRole) -> bool:
        return self.role in {getattr(r, "value", r) for r in roles}
