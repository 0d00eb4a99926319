"""Matching profile models for PropertyPulse.

A tenant keeps one TenantProfile describing what they are looking for; a
property keeps one PropertyMatchProfile describing its rental terms.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ...core.database_types import OpaqueId, UTCDateTime
from ...database import Base, IdentifierMixin, TimestampMixin


class TenantProfile(IdentifierMixin, TimestampMixin, Base):
    __tablename__ = "tenant_profiles"

    user_id: Mapped[str] = mapped_column(
        OpaqueId(),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    budget_min: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    budget_max: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    bedrooms_min: Mapped[int | None] = mapped_column(Integer, nullable=True)
    preferred_cities: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    amenities: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    has_pets: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    household_size: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    monthly_income: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    move_in_date: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)

    user = relationship("User")


class PropertyMatchProfile(IdentifierMixin, TimestampMixin, Base):
    __tablename__ = "property_match_profiles"

    property_id: Mapped[str] = mapped_column(
        OpaqueId(),
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    pets_allowed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    min_monthly_income: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    max_occupants: Mapped[int | None] = mapped_column(Integer, nullable=True)
    lease_term_months: Mapped[int | None] = mapped_column(Integer, nullable=True)
    highlights: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    property = relationship("Property")
