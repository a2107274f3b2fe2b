"""initial schema: resources, booking settings, bookings with active-slot unique indexes

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

ACTIVE_ONLY = sa.text("status = 'active'")


def upgrade() -> None:
    op.create_table(
        "resources",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("type", sa.Text, nullable=False),
        sa.Column("location", sa.Text, nullable=False),
        sa.Column(
            "status",
            sa.Enum("available", "in-use", "out-of-service", name="resource_status"),
            nullable=False,
            server_default=sa.text("'available'"),
        ),
        sa.Column("picture", sa.Text, nullable=False, server_default=sa.text("'default-resource.png'")),
        sa.Column("created_at", sa.Text, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.Text, server_default=sa.text("CURRENT_TIMESTAMP")),
    )
    op.create_index("ix_resources_type", "resources", ["type"])

    op.create_table(
        "booking_settings",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("settings_key", sa.Text, nullable=False, unique=True,
                  server_default=sa.text("'system_settings'")),
        sa.Column("resource_types", sa.Text, nullable=False, server_default=sa.text("'[]'")),
        sa.Column("daily_limit", sa.Integer, nullable=False, server_default=sa.text("2")),
        sa.Column("weekly_limit", sa.Integer, nullable=False, server_default=sa.text("4")),
        sa.Column("advance_booking_limit", sa.Integer, nullable=False, server_default=sa.text("1")),
        sa.Column("updated_at", sa.Text, server_default=sa.text("CURRENT_TIMESTAMP")),
    )

    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("user_id", sa.Text, nullable=False),
        sa.Column("resource_id", sa.Integer,
                  sa.ForeignKey("resources.id", ondelete="CASCADE"), nullable=False),
        sa.Column("date", sa.Text, nullable=False),
        sa.Column("slot", sa.Text, nullable=False),
        sa.Column("status", sa.Text, nullable=False, server_default=sa.text("'active'")),
        sa.Column("created_at", sa.Text, nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.Text, nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
    )
    op.create_index(
        "uq_bookings_resource_slot_active",
        "bookings",
        ["resource_id", "date", "slot"],
        unique=True,
        postgresql_where=ACTIVE_ONLY,
        sqlite_where=ACTIVE_ONLY,
    )
    op.create_index(
        "uq_bookings_user_slot_active",
        "bookings",
        ["user_id", "date", "slot"],
        unique=True,
        postgresql_where=ACTIVE_ONLY,
        sqlite_where=ACTIVE_ONLY,
    )
    op.create_index(
        "ix_bookings_user_resource_date_status",
        "bookings",
        ["user_id", "resource_id", "date", "status"],
    )


def downgrade() -> None:
    op.drop_index("ix_bookings_user_resource_date_status", table_name="bookings")
    op.drop_index("uq_bookings_user_slot_active", table_name="bookings")
    op.drop_index("uq_bookings_resource_slot_active", table_name="bookings")
    op.drop_table("bookings")
    op.drop_table("booking_settings")
    op.drop_index("ix_resources_type", table_name="resources")
    op.drop_table("resources")
