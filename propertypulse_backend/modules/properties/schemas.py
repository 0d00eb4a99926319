"""Property schemas for PropertyPulse."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from ..commons import UserSummary
from .models import PropertyStatus, PropertyType


class PropertyBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    property_type: PropertyType = PropertyType.APARTMENT
    address_street: str = Field(..., min_length=1, max_length=255)
    address_city: str = Field(..., min_length=1, max_length=120)
    address_state: str = Field(..., min_length=1, max_length=120)
    address_zip: str = Field(..., min_length=1, max_length=20)
    address_country: str = Field(default="US", max_length=120)
    bedrooms: int = Field(default=0, ge=0)
    bathrooms: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=1)
    square_feet: int | None = Field(None, gt=0)
    rent_amount: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    deposit: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    status: PropertyStatus = PropertyStatus.ACTIVE
    is_available: bool = True
    available_from: datetime | None = None
    amenities: list[str] = Field(default_factory=list)


class PropertyCreate(PropertyBase):
    """Schema for creating a property."""

    landlord_id: str


class PropertyUpdate(BaseModel):
    """Schema for updating a property."""

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    property_type: PropertyType | None = None
    address_street: str | None = Field(None, min_length=1, max_length=255)
    address_city: str | None = Field(None, min_length=1, max_length=120)
    address_state: str | None = Field(None, min_length=1, max_length=120)
    address_zip: str | None = Field(None, min_length=1, max_length=20)
    address_country: str | None = Field(None, max_length=120)
    bedrooms: int | None = Field(None, ge=0)
    bathrooms: Decimal | None = Field(None, ge=0, decimal_places=1)
    square_feet: int | None = Field(None, gt=0)
    rent_amount: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    deposit: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    status: PropertyStatus | None = None
    is_available: bool | None = None
    available_from: datetime | None = None
    amenities: list[str] | None = None


class PropertyResponse(PropertyBase):
    """Property with its landlord summary."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    landlord_id: str
    landlord: UserSummary | None = None
    created_at: datetime
    updated_at: datetime
