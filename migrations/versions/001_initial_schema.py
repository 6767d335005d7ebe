"""Initial schema: bookings, bids and trucks.

Revision ID: 001
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


revision = "001"
down_revision = None
branch_labels = None
depends_on = None

BOOKING_STATUS = sa.Enum(
    "PENDING", "BIDDING", "ACCEPTED", "IN_PROGRESS", "COMPLETED",
    name="bookingstatus",
)
TRUCK_TYPE = sa.Enum("MINI", "LCV", "FT14", "FT20", "FT32", name="trucktype")
TRUCK_STATUS = sa.Enum("IDLE", "ACTIVE", "MAINTENANCE", name="truckstatus")


def upgrade() -> None:
    # ── bookings ──────────────────────────────────────────────────────
    op.create_table(
        "bookings",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("customer_id", sa.String(64), nullable=False),
        sa.Column("pickup_location", sa.String(255), nullable=False),
        sa.Column("drop_location", sa.String(255), nullable=False),
        sa.Column("truck_type", TRUCK_TYPE, nullable=False),
        sa.Column("material_type", sa.String(120), nullable=False),
        sa.Column("weight_kg", sa.Float, nullable=False),
        sa.Column("budget", sa.Float, nullable=False),
        sa.Column("distance_km", sa.Float, nullable=False),
        sa.Column("requested_date", sa.Date, nullable=False),
        sa.Column("status", BOOKING_STATUS, nullable=False),
        sa.Column("accepted_bid_id", sa.String(32), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("idx_bookings_status", "bookings", ["status"])
    op.create_index("idx_bookings_customer", "bookings", ["customer_id"])
    op.create_index("idx_bookings_created", "bookings", ["created_at"])

    # ── bids ──────────────────────────────────────────────────────────
    op.create_table(
        "bids",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column(
            "booking_id",
            sa.String(32),
            sa.ForeignKey("bookings.id"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer, nullable=False),
        sa.Column("driver_id", sa.String(64), nullable=False),
        sa.Column("driver_name", sa.String(120), nullable=False),
        sa.Column("amount", sa.Float, nullable=False),
        sa.Column("rating", sa.Float, nullable=False),
        sa.Column("eta_minutes", sa.Integer, nullable=False),
        sa.Column("vehicle_no", sa.String(32), nullable=False),
        sa.Column("vehicle_capacity", sa.String(64), nullable=True),
        sa.Column("vehicle_dimensions", sa.String(64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint(
            "booking_id", "position", name="uq_bids_booking_position"
        ),
    )
    op.create_index("idx_bids_driver", "bids", ["driver_id"])

    # ── trucks ────────────────────────────────────────────────────────
    op.create_table(
        "trucks",
        sa.Column("truck_id", sa.String(32), primary_key=True),
        sa.Column("plate_number", sa.String(32), unique=True, nullable=False),
        sa.Column("driver_name", sa.String(120), nullable=False),
        sa.Column("status", TRUCK_STATUS, nullable=False),
        sa.Column("todays_earnings", sa.Float, nullable=False, default=0.0),
        sa.Column("fuel_level", sa.Integer, nullable=False, default=100),
        sa.Column("next_service_date", sa.Date, nullable=False),
        sa.Column("is_online", sa.Boolean, nullable=False, default=False),
    )
    op.create_index("idx_trucks_service", "trucks", ["next_service_date"])


def downgrade() -> None:
    op.drop_table("trucks")
    op.drop_table("bids")
    op.drop_table("bookings")
    TRUCK_STATUS.drop(op.get_bind(), checkfirst=True)
    TRUCK_TYPE.drop(op.get_bind(), checkfirst=True)
    BOOKING_STATUS.drop(op.get_bind(), checkfirst=True)
