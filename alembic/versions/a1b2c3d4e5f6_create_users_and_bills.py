"""create users and bills tables

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision = "a1b2c3d4e5f6"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute("CREATE TYPE connection_type AS ENUM ('domestic', 'commercial', 'industrial')")
    op.execute("CREATE TYPE bill_status AS ENUM ('Not Paid', 'Paid')")

    op.create_table(
        "users",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_id"), "users", ["id"], unique=False)
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_created_at"), "users", ["created_at"], unique=False)

    op.create_table(
        "bills",
        sa.Column("bill_id", sa.UUID(), nullable=False),
        sa.Column("owner_id", sa.UUID(), nullable=False),
        sa.Column("consumer_name", sa.String(255), nullable=False),
        sa.Column("meter_number", sa.String(64), nullable=False),
        sa.Column(
            "connection_type",
            postgresql.ENUM("domestic", "commercial", "industrial", name="connection_type", create_type=False),
            nullable=False,
        ),
        sa.Column("units_consumed", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column(
            "status",
            postgresql.ENUM("Not Paid", "Paid", name="bill_status", create_type=False),
            nullable=False,
            server_default="Not Paid",
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("units_consumed >= 0", name="ck_bills_units_non_negative"),
        sa.CheckConstraint("units_consumed <= 1000000000", name="ck_bills_units_max"),
        sa.CheckConstraint("amount >= 0", name="ck_bills_amount_non_negative"),
        sa.ForeignKeyConstraint(["owner_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("bill_id"),
    )
    op.create_index(op.f("ix_bills_owner_id"), "bills", ["owner_id"], unique=False)
    op.create_index(op.f("ix_bills_meter_number"), "bills", ["meter_number"], unique=False)
    op.create_index(op.f("ix_bills_status"), "bills", ["status"], unique=False)
    op.create_index(op.f("ix_bills_created_at"), "bills", ["created_at"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_bills_created_at"), table_name="bills")
    op.drop_index(op.f("ix_bills_status"), table_name="bills")
    op.drop_index(op.f("ix_bills_meter_number"), table_name="bills")
    op.drop_index(op.f("ix_bills_owner_id"), table_name="bills")
    op.drop_table("bills")

    op.drop_index(op.f("ix_users_created_at"), table_name="users")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_index(op.f("ix_users_id"), table_name="users")
    op.drop_table("users")

    op.execute("DROP TYPE IF EXISTS bill_status")
    op.execute("DROP TYPE IF EXISTS connection_type")
