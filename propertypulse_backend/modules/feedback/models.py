"""Feedback model for PropertyPulse."""

from sqlalchemy import Boolean, ForeignKey, Index, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ...core.database_types import OpaqueId
from ...database import Base, IdentifierMixin, TimestampMixin


class Feedback(IdentifierMixin, TimestampMixin, Base):
    """Thumbs up/down left by one user about another, optionally tied to a lease."""

    __tablename__ = "feedback"

    from_user_id: Mapped[str] = mapped_column(
        OpaqueId(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    to_user_id: Mapped[str] = mapped_column(
        OpaqueId(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    lease_id: Mapped[str | None] = mapped_column(
        OpaqueId(), ForeignKey("leases.id", ondelete="SET NULL"), nullable=True
    )
    thumbs_up: Mapped[bool] = mapped_column(Boolean, nullable=False)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)

    from_user = relationship("User", foreign_keys=[from_user_id])
    to_user = relationship("User", foreign_keys=[to_user_id])

    __table_args__ = (
        Index("ix_feedback_to_user_id", "to_user_id"),
        Index("ix_feedback_from_user_id", "from_user_id"),
    )
