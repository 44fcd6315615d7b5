"""Initial schema: admin users, sessions, resources, bookings.

Revision ID: 001
Revises: None
Create Date: 2026-10-17
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "admin_users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default=sa.text("'STAFF'")),
        *_timestamps(),
        sa.CheckConstraint("role IN ('ADMIN', 'STAFF', 'VIEWER')", name="check_admin_user_role"),
    )
    op.create_index("ix_admin_users_id", "admin_users", ["id"])
    op.create_index("ix_admin_users_username", "admin_users", ["username"], unique=True)

    op.create_table(
        "user_sessions",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("admin_users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_user_sessions_user_id", "user_sessions", ["user_id"])
    op.create_index("ix_user_sessions_expires_at", "user_sessions", ["expires_at"])

    op.create_table(
        "resources",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("kind", sa.String(50), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("subcategory", sa.String(255), nullable=True),
        sa.Column("type", sa.String(255), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'Available'")),
        *_timestamps(),
        sa.UniqueConstraint("kind", "name", name="uq_resource_kind_name"),
        sa.CheckConstraint("quantity >= 0", name="check_resource_quantity_non_negative"),
        sa.CheckConstraint(
            "status IN ('Available', 'Maintenance', 'Inactive')", name="check_resource_status"
        ),
    )
    op.create_index("ix_resources_id", "resources", ["id"])
    op.create_index("ix_resources_kind", "resources", ["kind"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("kind", sa.String(50), nullable=False),
        sa.Column("resource_id", sa.Integer(), sa.ForeignKey("resources.id"), nullable=False),
        sa.Column("resource_name", sa.String(255), nullable=False),
        sa.Column("start_dt", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_dt", sa.DateTime(timezone=True), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'REQUEST'")),
        sa.Column("requester_name", sa.String(255), nullable=True),
        sa.Column("requester_role", sa.String(100), nullable=True),
        sa.Column("purpose", sa.String(1000), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("canceled_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("end_dt > start_dt", name="check_booking_window"),
        sa.CheckConstraint(
            "status IN ('REQUEST', 'ONGOING', 'SUCCESS', 'CANCEL')", name="check_booking_status"
        ),
    )
    op.create_index("ix_bookings_id", "bookings", ["id"])
    op.create_index("ix_bookings_kind_resource_status", "bookings", ["kind", "resource_id", "status"])
    op.create_index("ix_bookings_created_at", "bookings", ["created_at"])

    # No two active bookings of the same (kind, resource) may overlap.
    # '[)' makes touching windows legal, matching the application check.
    op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
    op.execute(
        """
        ALTER TABLE bookings
        ADD CONSTRAINT ex_bookings_active_no_overlap
        EXCLUDE USING gist (
            kind WITH =,
            resource_id WITH =,
            tstzrange(start_dt, end_dt, '[)') WITH &&
        )
        WHERE (status IN ('REQUEST', 'ONGOING'))
        """
    )


def downgrade() -> None:
    op.execute("ALTER TABLE bookings DROP CONSTRAINT IF EXISTS ex_bookings_active_no_overlap")
    op.drop_table("bookings")
    op.drop_table("resources")
    op.drop_table("user_sessions")
    op.drop_table("admin_users")
