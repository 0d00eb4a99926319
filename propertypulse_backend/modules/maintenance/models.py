"""Maintenance ticket model for PropertyPulse."""

import enum

from sqlalchemy import Enum, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ...core.database_types import OpaqueId
from ...database import Base, IdentifierMixin, TimestampMixin


class TicketPriority(str, enum.Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class TicketStatus(str, enum.Enum):
    """Ticket status values; tickets only move forward."""

    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"


class MaintenanceTicket(IdentifierMixin, TimestampMixin, Base):
    """Repair request raised by a tenant against a property."""

    __tablename__ = "maintenance_tickets"

    property_id: Mapped[str] = mapped_column(
        OpaqueId(), ForeignKey("properties.id", ondelete="CASCADE"), nullable=False
    )
    tenant_id: Mapped[str] = mapped_column(
        OpaqueId(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    priority: Mapped[TicketPriority] = mapped_column(
        Enum(TicketPriority), nullable=False, default=TicketPriority.MEDIUM
    )
    status: Mapped[TicketStatus] = mapped_column(
        Enum(TicketStatus), nullable=False, default=TicketStatus.OPEN
    )

    property = relationship("Property")
    tenant = relationship("User")

    __table_args__ = (
        Index("ix_maintenance_tickets_property_id", "property_id"),
        Index("ix_maintenance_tickets_tenant_id", "tenant_id"),
        Index("ix_maintenance_tickets_status", "status"),
    )
