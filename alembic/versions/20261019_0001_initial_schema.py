"""Initial schema for PropertyPulse

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Creates all tables for:
- Users
- Properties, leases, payments and maintenance tickets
- Rental applications
- Tenant and property matching profiles
- Feedback
"""
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ID = sa.String(36)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    """Create all tables."""

    # users
    op.create_table(
        "users",
        sa.Column("id", ID, nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(120), nullable=False),
        sa.Column("last_name", sa.String(120), nullable=False),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column(
            "role",
            sa.Enum("LANDLORD", "TENANT", "PROPERTY_MANAGER", "ADMIN", "OWNER", "AFFILIATE", name="userrole"),
            nullable=False,
        ),
        sa.Column("password_hash", sa.String(255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("ix_users_role", "users", ["role"])

    # properties
    op.create_table(
        "properties",
        sa.Column("id", ID, nullable=False),
        sa.Column("landlord_id", ID, nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "property_type",
            sa.Enum("APARTMENT", "HOUSE", "CONDO", "TOWNHOUSE", "STUDIO", "OTHER", name="propertytype"),
            nullable=False,
        ),
        sa.Column("address_street", sa.String(255), nullable=False),
        sa.Column("address_city", sa.String(120), nullable=False),
        sa.Column("address_state", sa.String(120), nullable=False),
        sa.Column("address_zip", sa.String(20), nullable=False),
        sa.Column("address_country", sa.String(120), nullable=False),
        sa.Column("bedrooms", sa.Integer(), nullable=False),
        sa.Column("bathrooms", sa.Numeric(4, 1), nullable=False),
        sa.Column("square_feet", sa.Integer(), nullable=True),
        sa.Column("rent_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("deposit", sa.Numeric(12, 2), nullable=True),
        sa.Column(
            "status",
            sa.Enum("ACTIVE", "RENTED", "MAINTENANCE", "INACTIVE", name="propertystatus"),
            nullable=False,
        ),
        sa.Column("is_available", sa.Boolean(), nullable=False),
        sa.Column("available_from", sa.DateTime(timezone=True), nullable=True),
        sa.Column("amenities", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["landlord_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_properties_landlord_id", "properties", ["landlord_id"])
    op.create_index("ix_properties_location", "properties", ["address_city", "address_state"])
    op.create_index("ix_properties_status", "properties", ["status"])

    # leases
    op.create_table(
        "leases",
        sa.Column("id", ID, nullable=False),
        sa.Column("property_id", ID, nullable=False),
        sa.Column("tenant_id", ID, nullable=False),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("monthly_rent", sa.Numeric(12, 2), nullable=False),
        sa.Column("security_deposit", sa.Numeric(12, 2), nullable=True),
        sa.Column(
            "status",
            sa.Enum("ACTIVE", "EXPIRED", "TERMINATED", name="leasestatus"),
            nullable=False,
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["tenant_id"], ["users.id"], ondelete="CASCADE"),
        sa.CheckConstraint("start_date < end_date", name="ck_leases_date_order"),
    )
    op.create_index("ix_leases_property_id", "leases", ["property_id"])
    op.create_index("ix_leases_tenant_id", "leases", ["tenant_id"])
    op.create_index("ix_leases_status_end_date", "leases", ["status", "end_date"])

    # payments
    op.create_table(
        "payments",
        sa.Column("id", ID, nullable=False),
        sa.Column("lease_id", ID, nullable=False),
        sa.Column("tenant_id", ID, nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("paid_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "status",
            sa.Enum("PENDING", "PAID", "OVERDUE", name="paymentstatus"),
            nullable=False,
        ),
        sa.Column(
            "method",
            sa.Enum("CARD", "BANK_TRANSFER", "CASH", "CHECK", "OTHER", name="paymentmethod"),
            nullable=True,
        ),
        sa.Column("reference", sa.String(255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["lease_id"], ["leases.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["tenant_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_payments_lease_id", "payments", ["lease_id"])
    op.create_index("ix_payments_tenant_id", "payments", ["tenant_id"])
    op.create_index("ix_payments_status_due_date", "payments", ["status", "due_date"])

    # maintenance_tickets
    op.create_table(
        "maintenance_tickets",
        sa.Column("id", ID, nullable=False),
        sa.Column("property_id", ID, nullable=False),
        sa.Column("tenant_id", ID, nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column(
            "priority",
            sa.Enum("LOW", "MEDIUM", "HIGH", "URGENT", name="ticketpriority"),
            nullable=False,
        ),
        sa.Column(
            "status",
            sa.Enum("OPEN", "IN_PROGRESS", "RESOLVED", name="ticketstatus"),
            nullable=False,
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["tenant_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_maintenance_tickets_property_id", "maintenance_tickets", ["property_id"])
    op.create_index("ix_maintenance_tickets_tenant_id", "maintenance_tickets", ["tenant_id"])
    op.create_index("ix_maintenance_tickets_status", "maintenance_tickets", ["status"])

    # applications
    op.create_table(
        "applications",
        sa.Column("id", ID, nullable=False),
        sa.Column("property_id", ID, nullable=False),
        sa.Column("applicant_id", ID, nullable=True),
        sa.Column("first_name", sa.String(120), nullable=False),
        sa.Column("last_name", sa.String(120), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("monthly_income", sa.Numeric(12, 2), nullable=True),
        sa.Column("occupants", sa.Integer(), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column(
            "status",
            sa.Enum("PENDING", "APPROVED", "DECLINED", name="applicationstatus"),
            nullable=False,
        ),
        sa.Column("review_notes", sa.Text(), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["applicant_id"], ["users.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_applications_property_status", "applications", ["property_id", "status"])
    op.create_index("ix_applications_applicant_id", "applications", ["applicant_id"])

    # tenant_profiles
    op.create_table(
        "tenant_profiles",
        sa.Column("id", ID, nullable=False),
        sa.Column("user_id", ID, nullable=False),
        sa.Column("budget_min", sa.Numeric(12, 2), nullable=True),
        sa.Column("budget_max", sa.Numeric(12, 2), nullable=True),
        sa.Column("bedrooms_min", sa.Integer(), nullable=True),
        sa.Column("preferred_cities", sa.JSON(), nullable=False),
        sa.Column("amenities", sa.JSON(), nullable=False),
        sa.Column("has_pets", sa.Boolean(), nullable=False),
        sa.Column("household_size", sa.Integer(), nullable=False),
        sa.Column("monthly_income", sa.Numeric(12, 2), nullable=True),
        sa.Column("move_in_date", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id"),
    )

    # property_match_profiles
    op.create_table(
        "property_match_profiles",
        sa.Column("id", ID, nullable=False),
        sa.Column("property_id", ID, nullable=False),
        sa.Column("pets_allowed", sa.Boolean(), nullable=False),
        sa.Column("min_monthly_income", sa.Numeric(12, 2), nullable=True),
        sa.Column("max_occupants", sa.Integer(), nullable=True),
        sa.Column("lease_term_months", sa.Integer(), nullable=True),
        sa.Column("highlights", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("property_id"),
    )

    # feedback
    op.create_table(
        "feedback",
        sa.Column("id", ID, nullable=False),
        sa.Column("from_user_id", ID, nullable=False),
        sa.Column("to_user_id", ID, nullable=False),
        sa.Column("lease_id", ID, nullable=True),
        sa.Column("thumbs_up", sa.Boolean(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["from_user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["to_user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["lease_id"], ["leases.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_feedback_to_user_id", "feedback", ["to_user_id"])
    op.create_index("ix_feedback_from_user_id", "feedback", ["from_user_id"])


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_table("feedback")
    op.drop_table("property_match_profiles")
    op.drop_table("tenant_profiles")
    op.drop_table("applications")
    op.drop_table("maintenance_tickets")
    op.drop_table("payments")
    op.drop_table("leases")
    op.drop_table("properties")
    op.drop_table("users")

    bind = op.get_bind()
    if bind.dialect.name == "postgresql":
        for enum_name in (
            "applicationstatus",
            "ticketstatus",
            "ticketpriority",
            "paymentmethod",
            "paymentstatus",
            "leasestatus",
            "propertystatus",
            "propertytype",
            "userrole",
        ):
            sa.Enum(name=enum_name).drop(bind, checkfirst=True)
