"""Lease model for PropertyPulse."""

import enum
from datetime import datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, Enum, ForeignKey, Index, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ...core.database_types import OpaqueId, UTCDateTime
from ...database import Base, IdentifierMixin, TimestampMixin


class LeaseStatus(str, enum.Enum):
    """Lease status values."""

    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    TERMINATED = "TERMINATED"


class Lease(IdentifierMixin, TimestampMixin, Base):
    """Rental agreement between a property and a tenant."""

    __tablename__ = "leases"

    property_id: Mapped[str] = mapped_column(
        OpaqueId(), ForeignKey("properties.id", ondelete="CASCADE"), nullable=False
    )
    tenant_id: Mapped[str] = mapped_column(
        OpaqueId(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    start_date: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    end_date: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    monthly_rent: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    security_deposit: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    status: Mapped[LeaseStatus] = mapped_column(
        Enum(LeaseStatus), nullable=False, default=LeaseStatus.ACTIVE
    )

    property = relationship("Property")
    tenant = relationship("User")

    __table_args__ = (
        CheckConstraint("start_date < end_date", name="ck_leases_date_order"),
        Index("ix_leases_property_id", "property_id"),
        Index("ix_leases_tenant_id", "tenant_id"),
        Index("ix_leases_status_end_date", "status", "end_date"),
    )

    def __repr__(self) -> str:
        return f"<Lease(id={self.id}, property_id={self.property_id}, status={self.status})>"
