"""Rental application model for PropertyPulse."""

import enum
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Enum, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ...core.database_types import OpaqueId, UTCDateTime
from ...database import Base, IdentifierMixin, TimestampMixin


class ApplicationStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    DECLINED = "DECLINED"


class Application(IdentifierMixin, TimestampMixin, Base):
    """Prospective tenant's application for a property."""

    __tablename__ = "applications"

    property_id: Mapped[str] = mapped_column(
        OpaqueId(), ForeignKey("properties.id", ondelete="CASCADE"), nullable=False
    )
    applicant_id: Mapped[str | None] = mapped_column(
        OpaqueId(), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    first_name: Mapped[str] = mapped_column(String(120), nullable=False)
    last_name: Mapped[str] = mapped_column(String(120), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    monthly_income: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    occupants: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[ApplicationStatus] = mapped_column(
        Enum(ApplicationStatus), nullable=False, default=ApplicationStatus.PENDING
    )
    review_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    reviewed_at: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)

    property = relationship("Property")
    applicant = relationship("User")

    __table_args__ = (
        Index("ix_applications_property_status", "property_id", "status"),
        Index("ix_applications_applicant_id", "applicant_id"),
    )
