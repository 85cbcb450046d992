"""Initial schema: users, properties, rentals, bills, readings and invoices.

Revision ID: 001_initial_schema
Revises:
Create Date: 2025-03-01 00:00:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.current_timestamp(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.current_timestamp(),
        ),
    ]


def _money(name: str, comment: str | None = None) -> sa.Column:
    return sa.Column(name, sa.Numeric(10, 2), nullable=False, comment=comment)


def upgrade() -> None:
    # Create users table
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, comment="Login email - unique identifier"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # Create properties table
    op.create_table(
        "properties",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("address", sa.String(255), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    # Create property_administrators table
    op.create_table(
        "property_administrators",
        sa.Column("property_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("property_id", "user_id"),
    )

    # Create rentals table
    op.create_table(
        "rentals",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("property_id", sa.Integer(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_rentals_user_id", "rentals", ["user_id"])
    op.create_index("ix_rentals_property_id", "rentals", ["property_id"])
    op.create_index(
        "idx_rental_property_dates", "rentals", ["property_id", "start_date", "end_date"]
    )

    # Create electricity_bills table
    op.create_table(
        "electricity_bills",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("property_id", sa.Integer(), nullable=False),
        sa.Column("period_start", sa.Date(), nullable=False),
        sa.Column("period_end", sa.Date(), nullable=False),
        sa.Column(
            "total_kwh", sa.Numeric(12, 2), nullable=False, comment="Total metered consumption in kWh"
        ),
        _money("total_cost", "Total energy cost of the bill"),
        sa.Column(
            "file_url", sa.String(500), nullable=True, comment="Reference to the uploaded bill document"
        ),
        *_timestamps(),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_electricity_bills_property_id", "electricity_bills", ["property_id"])
    op.create_index(
        "idx_electricity_bill_property_period", "electricity_bills", ["property_id", "period_start"]
    )

    # Create service_charges table
    op.create_table(
        "service_charges",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("electricity_bill_id", sa.Integer(), nullable=False),
        _money("maintenance_and_replacement", "Maintenance and replacement"),
        _money("fixed_charge", "Fixed charge"),
        _money("compensatory_interest", "Compensatory interest"),
        _money("public_lighting", "Public lighting"),
        _money("law_contribution", "Law N. 28749 contribution"),
        _money("late_fee", "Late payment fee"),
        _money("previous_month_rounding", "Previous month rounding"),
        _money("current_month_rounding", "Current month rounding"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["electricity_bill_id"], ["electricity_bills.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("electricity_bill_id"),
    )

    # Create consumptions table
    op.create_table(
        "consumptions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("rental_id", sa.Integer(), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("current_reading", sa.Numeric(12, 2), nullable=False),
        sa.Column("previous_reading", sa.Numeric(12, 2), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["rental_id"], ["rentals.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("rental_id", "month", "year", name="uq_consumption_rental_period"),
    )
    op.create_index("ix_consumptions_rental_id", "consumptions", ["rental_id"])

    # Create invoices table
    op.create_table(
        "invoices",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("rental_id", sa.Integer(), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        _money("water_cost"),
        _money("energy_cost"),
        _money("total_cost", "water_cost + energy_cost"),
        sa.Column("status", sa.Enum("UNPAID", "PAID", name="invoicestatus"), nullable=False),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_by_id",
            sa.Integer(),
            nullable=True,
            comment="Administrator who generated the invoice",
        ),
        *_timestamps(),
        sa.ForeignKeyConstraint(["rental_id"], ["rentals.id"]),
        sa.ForeignKeyConstraint(["created_by_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("rental_id", "month", "year", name="uq_invoice_rental_period"),
    )
    op.create_index("ix_invoices_rental_id", "invoices", ["rental_id"])
    op.create_index("idx_invoice_period", "invoices", ["year", "month"])

    # Create audit_logs table
    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("entity_type", sa.String(50), nullable=False),
        sa.Column("entity_id", sa.Integer(), nullable=False),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("actor_id", sa.Integer(), nullable=True),
        sa.Column("changes", sa.JSON(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["actor_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_audit_entity", "audit_logs", ["entity_type", "entity_id"])


def downgrade() -> None:
    op.drop_index("idx_audit_entity", table_name="audit_logs")
    op.drop_table("audit_logs")
    op.drop_index("idx_invoice_period", table_name="invoices")
    op.drop_index("ix_invoices_rental_id", table_name="invoices")
    op.drop_table("invoices")
    op.drop_index("ix_consumptions_rental_id", table_name="consumptions")
    op.drop_table("consumptions")
    op.drop_table("service_charges")
    op.drop_index("idx_electricity_bill_property_period", table_name="electricity_bills")
    op.drop_index("ix_electricity_bills_property_id", table_name="electricity_bills")
    op.drop_table("electricity_bills")
    op.drop_index("idx_rental_property_dates", table_name="rentals")
    op.drop_index("ix_rentals_property_id", table_name="rentals")
    op.drop_index("ix_rentals_user_id", table_name="rentals")
    op.drop_table("rentals")
    op.drop_table("property_administrators")
    op.drop_table("properties")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
    bind = op.get_bind()
    if bind.dialect.name == "postgresql":
        sa.Enum(name="invoicestatus").drop(bind, checkfirst=True)
