"""Property model for PropertyPulse."""

import enum
from datetime import datetime
from decimal import Decimal

from sqlalchemy import JSON, Boolean, Enum, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ...core.database_types import OpaqueId, UTCDateTime
from ...database import Base, IdentifierMixin, TimestampMixin


class PropertyType(str, enum.Enum):
    """Kinds of rentable property."""

    APARTMENT = "APARTMENT"
    HOUSE = "HOUSE"
    CONDO = "CONDO"
    TOWNHOUSE = "TOWNHOUSE"
    STUDIO = "STUDIO"
    OTHER = "OTHER"


class PropertyStatus(str, enum.Enum):
    """Property status values."""

    ACTIVE = "ACTIVE"
    RENTED = "RENTED"
    MAINTENANCE = "MAINTENANCE"
    INACTIVE = "INACTIVE"


class Property(IdentifierMixin, TimestampMixin, Base):
    """Rentable property owned by a landlord."""

    __tablename__ = "properties"

    landlord_id: Mapped[str] = mapped_column(
        OpaqueId(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    property_type: Mapped[PropertyType] = mapped_column(
        Enum(PropertyType), nullable=False, default=PropertyType.APARTMENT
    )
    address_street: Mapped[str] = mapped_column(String(255), nullable=False)
    address_city: Mapped[str] = mapped_column(String(120), nullable=False)
    address_state: Mapped[str] = mapped_column(String(120), nullable=False)
    address_zip: Mapped[str] = mapped_column(String(20), nullable=False)
    address_country: Mapped[str] = mapped_column(String(120), nullable=False, default="US")
    bedrooms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    bathrooms: Mapped[Decimal] = mapped_column(Numeric(4, 1), nullable=False, default=0)
    square_feet: Mapped[int | None] = mapped_column(Integer, nullable=True)
    rent_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    deposit: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    status: Mapped[PropertyStatus] = mapped_column(
        Enum(PropertyStatus), nullable=False, default=PropertyStatus.ACTIVE
    )
    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    available_from: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)
    amenities: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    landlord = relationship("User")

    __table_args__ = (
        Index("ix_properties_landlord_id", "landlord_id"),
        Index("ix_properties_location", "address_city", "address_state"),
        Index("ix_properties_status", "status"),
    )

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, title={self.title})>"
