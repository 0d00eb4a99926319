"""User schemas for PropertyPulse."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from .models import UserRole


class UserBase(BaseModel):
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=120)
    last_name: str = Field(..., min_length=1, max_length=120)
    phone: str | None = Field(None, max_length=50)
    role: UserRole = UserRole.TENANT


class UserCreate(UserBase):
    """Schema for creating a user; the password is hashed before storage."""

    password: str | None = Field(None, min_length=8, max_length=128)


class UserUpdate(BaseModel):
    """Schema for updating a user."""

    email: EmailStr | None = None
    first_name: str | None = Field(None, min_length=1, max_length=120)
    last_name: str | None = Field(None, min_length=1, max_length=120)
    phone: str | None = Field(None, max_length=50)
    role: UserRole | None = None
    password: str | None = Field(None, min_length=8, max_length=128)


class UserResponse(UserBase):
    """User as returned by repositories; never carries the password hash."""

    model_config = ConfigDict(from_attributes=True)

    email: str
    id: str
    created_at: datetime
    updated_at: datetime
