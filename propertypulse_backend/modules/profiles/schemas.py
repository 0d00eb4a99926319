"""Matching profile schemas for PropertyPulse."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..commons import PropertySummary, UserSummary
from ..properties.schemas import PropertyResponse

# ----- Tenant profile -----


class TenantProfileData(BaseModel):
    """Fields a tenant may set on their profile."""

    budget_min: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    budget_max: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    bedrooms_min: int | None = Field(None, ge=0, le=10)
    preferred_cities: list[str] | None = None
    amenities: list[str] | None = None
    has_pets: bool | None = None
    household_size: int | None = Field(None, ge=1, le=20)
    monthly_income: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    move_in_date: datetime | None = None

    @model_validator(mode="after")
    def check_budget(self):
        if (
            self.budget_min is not None
            and self.budget_max is not None
            and self.budget_min > self.budget_max
        ):
            raise ValueError("budget_min cannot exceed budget_max")
        return self


class TenantProfileCreate(TenantProfileData):
    user_id: str
    preferred_cities: list[str] = Field(default_factory=list)
    amenities: list[str] = Field(default_factory=list)
    has_pets: bool = False
    household_size: int = Field(default=1, ge=1, le=20)


class TenantProfileResponse(TenantProfileCreate):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user: UserSummary | None = None
    created_at: datetime
    updated_at: datetime


# ----- Property match profile -----


class PropertyMatchProfileData(BaseModel):
    """Rental terms a landlord sets for matching."""

    pets_allowed: bool | None = None
    min_monthly_income: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    max_occupants: int | None = Field(None, ge=1, le=20)
    lease_term_months: int | None = Field(None, ge=1, le=36)
    highlights: list[str] | None = None


class PropertyMatchProfileCreate(PropertyMatchProfileData):
    property_id: str
    pets_allowed: bool = False
    highlights: list[str] = Field(default_factory=list)


class PropertyMatchProfileResponse(PropertyMatchProfileCreate):
    model_config = ConfigDict(from_attributes=True)

    id: str
    property: PropertySummary | None = None
    created_at: datetime
    updated_at: datetime


# ----- Matching -----


class PropertyMatch(BaseModel):
    """A scored property for the current tenant."""

    property: PropertyResponse
    score: int = Field(..., ge=0, le=100)
    reasons: list[str] = Field(default_factory=list)
