"""User model for PropertyPulse."""

import enum

from sqlalchemy import Enum, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from ...database import Base, IdentifierMixin, TimestampMixin


class UserRole(str, enum.Enum):
    """Roles a user account can hold."""

    LANDLORD = "LANDLORD"
    TENANT = "TENANT"
    PROPERTY_MANAGER = "PROPERTY_MANAGER"
    ADMIN = "ADMIN"
    OWNER = "OWNER"
    AFFILIATE = "AFFILIATE"


class User(IdentifierMixin, TimestampMixin, Base):
    """Account that can sign in to PropertyPulse."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    first_name: Mapped[str] = mapped_column(String(120), nullable=False)
    last_name: Mapped[str] = mapped_column(String(120), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole), nullable=False, default=UserRole.TENANT
    )
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)

    __table_args__ = (Index("ix_users_role", "role"),)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
