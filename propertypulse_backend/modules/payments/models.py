"""Payment model for PropertyPulse."""

import enum
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Enum, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ...core.database_types import OpaqueId, UTCDateTime
from ...database import Base, IdentifierMixin, TimestampMixin


class PaymentStatus(str, enum.Enum):
    """Payment status values."""

    PENDING = "PENDING"
    PAID = "PAID"
    OVERDUE = "OVERDUE"


class PaymentMethod(str, enum.Enum):
    """How a payment was made."""

    CARD = "CARD"
    BANK_TRANSFER = "BANK_TRANSFER"
    CASH = "CASH"
    CHECK = "CHECK"
    OTHER = "OTHER"


class Payment(IdentifierMixin, TimestampMixin, Base):
    """Rent payment due under a lease."""

    __tablename__ = "payments"

    lease_id: Mapped[str] = mapped_column(
        OpaqueId(), ForeignKey("leases.id", ondelete="CASCADE"), nullable=False
    )
    tenant_id: Mapped[str] = mapped_column(
        OpaqueId(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    due_date: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    paid_date: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)
    status: Mapped[PaymentStatus] = mapped_column(
        Enum(PaymentStatus), nullable=False, default=PaymentStatus.PENDING
    )
    method: Mapped[PaymentMethod | None] = mapped_column(Enum(PaymentMethod), nullable=True)
    reference: Mapped[str | None] = mapped_column(String(255), nullable=True)

    lease = relationship("Lease")
    tenant = relationship("User")

    __table_args__ = (
        Index("ix_payments_lease_id", "lease_id"),
        Index("ix_payments_tenant_id", "tenant_id"),
        Index("ix_payments_status_due_date", "status", "due_date"),
    )

    def __repr__(self) -> str:
        return f"<Payment(id={self.id}, amount={self.amount}, status={self.status})>"
