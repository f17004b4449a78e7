"""Initial schema

Revision ID: 20261016_0001
Revises:
Create Date: 2026-10-16 09:30:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "20261016_0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


booking_status_enum = sa.Enum("pending", "approved", "rejected", name="booking_status_enum", native_enum=False)
notification_template_enum = sa.Enum(
    "new_booking",
    "booking_status",
    name="notification_template_enum",
    native_enum=False,
)
notification_status_enum = sa.Enum("pending", "sent", "failed", name="notification_status_enum", native_enum=False)


def _id_col() -> sa.Column:
    return sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False)


def _created_col() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), nullable=False)


def upgrade() -> None:
    op.create_table(
        "admin_users",
        _id_col(),
        _created_col(),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
    )
    op.create_index("ix_admin_users_email", "admin_users", ["email"], unique=True)

    op.create_table(
        "bookings",
        _id_col(),
        _created_col(),
        sa.Column("team_leader_name", sa.String(length=255), nullable=False),
        sa.Column("team_leader_id", sa.String(length=64), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=64), nullable=False),
        sa.Column("studio", sa.String(length=64), nullable=False),
        sa.Column("session", sa.String(length=128), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("status", booking_status_enum, nullable=False),
    )
    op.create_index("ix_bookings_studio", "bookings", ["studio"], unique=False)
    op.create_index("ix_bookings_date", "bookings", ["date"], unique=False)
    op.create_index("ix_bookings_status", "bookings", ["status"], unique=False)
    op.create_index(
        "uq_bookings_active_slot",
        "bookings",
        ["studio", "session", "date"],
        unique=True,
        postgresql_where=sa.text("status <> 'rejected'"),
    )

    op.create_table(
        "email_notifications",
        _id_col(),
        _created_col(),
        sa.Column("booking_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("template", notification_template_enum, nullable=False),
        sa.Column("recipient_email", sa.String(length=255), nullable=False),
        sa.Column("subject", sa.String(length=255), nullable=False),
        sa.Column("status", notification_status_enum, nullable=False),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["booking_id"],
            ["bookings.id"],
            name="fk_email_notifications_booking_id_bookings",
            ondelete="SET NULL",
        ),
    )
    op.create_index("ix_email_notifications_booking_id", "email_notifications", ["booking_id"], unique=False)
    op.create_index("ix_email_notifications_status", "email_notifications", ["status"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_email_notifications_status", table_name="email_notifications")
    op.drop_index("ix_email_notifications_booking_id", table_name="email_notifications")
    op.drop_table("email_notifications")

    op.drop_index("uq_bookings_active_slot", table_name="bookings")
    op.drop_index("ix_bookings_status", table_name="bookings")
    op.drop_index("ix_bookings_date", table_name="bookings")
    op.drop_index("ix_bookings_studio", table_name="bookings")
    op.drop_table("bookings")

    op.drop_index("ix_admin_users_email", table_name="admin_users")
    op.drop_table("admin_users")
