"""create_rental_tables

Revision ID: b7e1c0a4d201
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "b7e1c0a4d201"
down_revision = None
branch_labels = None
depends_on = None


USER_ROLE = sa.Enum("client", "admin", name="rental_user_role_enum")
FUEL_TYPE = sa.Enum("petrol", "diesel", "electric", name="rental_fuel_type_enum")
ORDER_STATUS = sa.Enum(
    "pending",
    "confirmed",
    "ongoing",
    "completed",
    "cancelled",
    name="rental_order_status_enum",
)
PAYMENT_STATUS = sa.Enum(
    "pending", "paid", "refunded", name="rental_payment_status_enum"
)


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "rental_users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("auth_id", sa.String(255), nullable=False, unique=True),
        sa.Column("phone", sa.String(20), nullable=False, unique=True),
        sa.Column("name", sa.String(120), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("role", USER_ROLE, nullable=False),
        sa.Column("is_blocked", sa.Boolean(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "rental_stores",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("address", sa.String(500), nullable=False),
        sa.Column("district", sa.String(120), nullable=False),
        sa.Column("location", sa.JSON(), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("opening_time", sa.String(5), nullable=False),
        sa.Column("closing_time", sa.String(5), nullable=False),
        sa.Column("contact_number", sa.String(20), nullable=True),
        sa.Column("images", sa.JSON(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("latitude >= -90 AND latitude <= 90", name="ck_store_lat"),
        sa.CheckConstraint(
            "longitude >= -180 AND longitude <= 180", name="ck_store_lng"
        ),
    )
    op.create_index(
        "ix_rental_stores_lat_lng", "rental_stores", ["latitude", "longitude"]
    )

    op.create_table(
        "rental_vehicles",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "store_id", sa.Uuid(), sa.ForeignKey("rental_stores.id"), nullable=False
        ),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("brand", sa.String(100), nullable=False),
        sa.Column("model_year", sa.Integer(), nullable=True),
        sa.Column("fuel_type", FUEL_TYPE, nullable=False),
        sa.Column("price_per_hour", sa.Numeric(10, 2), nullable=False),
        sa.Column("price_per_day", sa.Numeric(10, 2), nullable=True),
        sa.Column("mileage", sa.Float(), nullable=True),
        sa.Column("license_plate", sa.String(20), nullable=False, unique=True),
        sa.Column("images", sa.JSON(), nullable=False),
        sa.Column("availability", sa.Boolean(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("price_per_hour >= 0", name="ck_vehicle_price_per_hour"),
    )
    op.create_index(
        "ix_rental_vehicles_store_id", "rental_vehicles", ["store_id"]
    )
    op.create_index(
        "ix_rental_vehicles_store_flags",
        "rental_vehicles",
        ["store_id", "availability", "is_active"],
    )

    op.create_table(
        "rental_orders",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "user_id", sa.Uuid(), sa.ForeignKey("rental_users.id"), nullable=False
        ),
        sa.Column(
            "vehicle_id",
            sa.Uuid(),
            sa.ForeignKey("rental_vehicles.id"),
            nullable=False,
        ),
        sa.Column(
            "store_id", sa.Uuid(), sa.ForeignKey("rental_stores.id"), nullable=False
        ),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("status", ORDER_STATUS, nullable=False),
        sa.Column("payment_status", PAYMENT_STATUS, nullable=False),
        sa.Column("payment_reference", sa.String(100), nullable=True),
        sa.Column("cancellation_reason", sa.Text(), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("end_time > start_time", name="ck_order_window"),
    )
    op.create_index("ix_rental_orders_user_id", "rental_orders", ["user_id"])
    op.create_index("ix_rental_orders_store_id", "rental_orders", ["store_id"])
    op.create_index(
        "ix_rental_orders_vehicle_window",
        "rental_orders",
        ["vehicle_id", "start_time", "end_time"],
    )

    op.create_table(
        "rental_favorites",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("rental_users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "vehicle_id",
            sa.Uuid(),
            sa.ForeignKey("rental_vehicles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("user_id", "vehicle_id", name="uq_favorite_user_vehicle"),
    )

    op.create_table(
        "rental_faqs",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("question", sa.String(500), nullable=False),
        sa.Column("answer", sa.Text(), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table("rental_faqs")
    op.drop_table("rental_favorites")
    op.drop_index("ix_rental_orders_vehicle_window", table_name="rental_orders")
    op.drop_index("ix_rental_orders_store_id", table_name="rental_orders")
    op.drop_index("ix_rental_orders_user_id", table_name="rental_orders")
    op.drop_table("rental_orders")
    op.drop_index("ix_rental_vehicles_store_flags", table_name="rental_vehicles")
    op.drop_index("ix_rental_vehicles_store_id", table_name="rental_vehicles")
    op.drop_table("rental_vehicles")
    op.drop_index("ix_rental_stores_lat_lng", table_name="rental_stores")
    op.drop_table("rental_stores")
    op.drop_table("rental_users")

    bind = op.get_bind()
    for enum in (PAYMENT_STATUS, ORDER_STATUS, FUEL_TYPE, USER_ROLE):
        enum.drop(bind, checkfirst=True)
