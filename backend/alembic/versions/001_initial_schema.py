"""Initial schema: categories, venues, users, events, bookings with indexes and constraints.

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


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def _enum(name: str, *values: str) -> sa.Enum:
    # Stored as VARCHAR + CHECK, matching the models' native_enum=False
    return sa.Enum(*values, name=name, native_enum=False, length=20, create_constraint=True)


def upgrade() -> None:
    op.create_table(
        "categories",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("icon_url", sa.String(500), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_categories_id", "categories", ["id"])
    op.create_index("ix_categories_name", "categories", ["name"], unique=True)

    op.create_table(
        "venues",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("address", sa.String(500), nullable=False),
        sa.Column("city", sa.String(100), nullable=False),
        sa.Column("state", sa.String(100), nullable=True),
        sa.Column("postal_code", sa.String(20), nullable=True),
        sa.Column("country", sa.String(100), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("capacity", sa.Integer(), nullable=True),
        sa.Column("image_url", sa.String(500), nullable=True),
        sa.Column("description", sa.String(1000), nullable=True),
        sa.Column("amenities", sa.String(1000), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("capacity IS NULL OR capacity >= 0", name="check_venue_capacity_non_negative"),
    )
    op.create_index("ix_venues_id", "venues", ["id"])
    op.create_index("ix_venues_name", "venues", ["name"])
    op.create_index("ix_venues_city", "venues", ["city"])

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone_number", sa.String(30), nullable=True),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("state", sa.String(100), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_city", "users", ["city"])

    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.String(1000), nullable=True),
        sa.Column("event_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("registration_start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("registration_end_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("max_participants", sa.Integer(), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=True),
        sa.Column("image_url", sa.String(500), nullable=True),
        sa.Column("banner_url", sa.String(500), nullable=True),
        sa.Column(
            "event_type",
            _enum(
                "event_type",
                "RUNNING", "CYCLING", "SWIMMING", "FOOTBALL", "BASKETBALL", "TENNIS", "CRICKET",
                "VOLLEYBALL", "BADMINTON", "TABLE_TENNIS", "ATHLETICS", "MARATHON", "TRIATHLON", "OTHER",
            ),
            nullable=False,
        ),
        sa.Column(
            "difficulty_level",
            _enum("difficulty_level", "BEGINNER", "INTERMEDIATE", "ADVANCED", "EXPERT"),
            nullable=True,
        ),
        sa.Column(
            "status",
            _enum("event_status", "ACTIVE", "INACTIVE", "CANCELLED", "COMPLETED"),
            nullable=False,
            server_default=sa.text("'ACTIVE'"),
        ),
        sa.Column("rules", sa.String(2000), nullable=True),
        sa.Column("prize_info", sa.String(1000), nullable=True),
        sa.Column("contact_info", sa.String(500), nullable=True),
        sa.Column("category_id", sa.Integer(), sa.ForeignKey("categories.id"), nullable=False),
        sa.Column("venue_id", sa.Integer(), sa.ForeignKey("venues.id"), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        *_timestamps(),
        sa.CheckConstraint("price IS NULL OR price >= 0", name="check_event_price_non_negative"),
        sa.CheckConstraint(
            "max_participants IS NULL OR max_participants >= 1",
            name="check_event_max_participants_positive",
        ),
        sa.CheckConstraint(
            "registration_start_date < registration_end_date",
            name="check_event_registration_window",
        ),
    )
    op.create_index("ix_events_id", "events", ["id"])
    op.create_index("ix_events_category_id", "events", ["category_id"])
    op.create_index("ix_events_venue_id", "events", ["venue_id"])
    # Upcoming/range listings filter and sort on event date
    op.create_index("ix_events_event_date", "events", ["event_date"])
    # Most listings filter on status and sort by date
    op.create_index("ix_events_status_date", "events", ["status", "event_date"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("event_id", sa.Integer(), sa.ForeignKey("events.id"), nullable=False),
        sa.Column("booking_date", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("total_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column(
            "payment_status",
            _enum("payment_status", "PENDING", "COMPLETED", "FAILED", "REFUNDED", "PARTIALLY_REFUNDED"),
            nullable=False,
            server_default=sa.text("'PENDING'"),
        ),
        sa.Column(
            "booking_status",
            _enum("booking_status", "CONFIRMED", "CANCELLED", "ATTENDED", "NO_SHOW"),
            nullable=False,
            server_default=sa.text("'CONFIRMED'"),
        ),
        sa.Column("payment_reference", sa.String(100), nullable=True),
        sa.Column("notes", sa.String(500), nullable=True),
        sa.Column("emergency_contact", sa.String(100), nullable=True),
        *_timestamps(),
        # At most one booking per (user, event), cancelled ones included
        sa.UniqueConstraint("user_id", "event_id", name="uq_user_event_booking"),
    )
    op.create_index("ix_bookings_id", "bookings", ["id"])
    op.create_index("ix_bookings_user_id", "bookings", ["user_id"])
    op.create_index("ix_bookings_event_id", "bookings", ["event_id"])
    op.create_index("ix_bookings_booking_date", "bookings", ["booking_date"])


def downgrade() -> None:
    op.drop_table("bookings")
    op.drop_table("events")
    op.drop_table("users")
    op.drop_table("venues")
    op.drop_table("categories")
