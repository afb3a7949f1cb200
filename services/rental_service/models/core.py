"""Rental service models.

Domain entities:
- Stores: pickup points with a geographic location and opening hours
- Vehicles: bikes/scooters owned by a store
- Orders: a user's booking of a vehicle for a half-open time window
- Users: customers and admins, keyed by phone number
- Favorites and FAQs
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.rental_service.models.enums import (
    FuelType,
    OrderStatus,
    PaymentStatus,
    UserRole,
    enum_values,
)
from sqlalchemy import JSON, Boolean, CheckConstraint, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import (
    Float,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

# ============================================================================
# USERS
# ============================================================================


class User(Base):
    """Marketplace account. Rows are provisioned on first authenticated call."""

    __tablename__ = "rental_users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    auth_id: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    phone: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    name: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    role: Mapped[UserRole] = mapped_column(
        SAEnum(UserRole, values_callable=enum_values, name="rental_user_role_enum"),
        default=UserRole.CLIENT,
        nullable=False,
    )
    is_blocked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    def __repr__(self):
        return f"<User {self.phone}>"


# ============================================================================
# STORES & VEHICLES
# ============================================================================


class Store(Base):
    """A rental outlet. ``location`` is the canonical GeoJSON point."""

    __tablename__ = "rental_stores"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    address: Mapped[str] = mapped_column(String(500), nullable=False)
    district: Mapped[str] = mapped_column(String(120), nullable=False)

    location: Mapped[dict] = mapped_column(JSON, nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)

    opening_time: Mapped[str] = mapped_column(String(5), nullable=False)  # "HH:MM"
    closing_time: Mapped[str] = mapped_column(String(5), nullable=False)
    contact_number: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    images: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    vehicles = relationship("Vehicle", back_populates="store")

    __table_args__ = (
        CheckConstraint("latitude >= -90 AND latitude <= 90", name="ck_store_lat"),
        CheckConstraint(
            "longitude >= -180 AND longitude <= 180", name="ck_store_lng"
        ),
        Index("ix_rental_stores_lat_lng", "latitude", "longitude"),
    )

    def set_location(self, longitude: float, latitude: float) -> None:
        """Write the GeoJSON point and the denormalised columns together."""
        self.location = {"type": "Point", "coordinates": [longitude, latitude]}
        self.latitude = latitude
        self.longitude = longitude

    def __repr__(self):
        return f"<Store {self.name}>"


class Vehicle(Base):
    """A bike or scooter listed by a store."""

    __tablename__ = "rental_vehicles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    store_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("rental_stores.id"), nullable=False, index=True
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    brand: Mapped[str] = mapped_column(String(100), nullable=False)
    model_year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    fuel_type: Mapped[FuelType] = mapped_column(
        SAEnum(FuelType, values_callable=enum_values, name="rental_fuel_type_enum"),
        nullable=False,
    )

    price_per_hour: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    price_per_day: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(10, 2), nullable=True
    )
    mileage: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    license_plate: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    images: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    # Manual on/off switch by the store owner
    availability: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    # Soft delete
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    store = relationship("Store", back_populates="vehicles")

    __table_args__ = (
        CheckConstraint("price_per_hour >= 0", name="ck_vehicle_price_per_hour"),
        Index("ix_rental_vehicles_store_flags", "store_id", "availability", "is_active"),
    )

    def __repr__(self):
        return f"<Vehicle {self.license_plate}>"


# ============================================================================
# ORDERS
# ============================================================================


class Order(Base):
    """A booking of one vehicle for ``[start_time, end_time)``."""

    __tablename__ = "rental_orders"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("rental_users.id"), nullable=False, index=True
    )
    vehicle_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("rental_vehicles.id"), nullable=False
    )
    store_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("rental_stores.id"), nullable=False, index=True
    )

    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    status: Mapped[OrderStatus] = mapped_column(
        SAEnum(
            OrderStatus,
            values_callable=enum_values,
            name="rental_order_status_enum",
        ),
        default=OrderStatus.PENDING,
        nullable=False,
    )
    payment_status: Mapped[PaymentStatus] = mapped_column(
        SAEnum(
            PaymentStatus,
            values_callable=enum_values,
            name="rental_payment_status_enum",
        ),
        default=PaymentStatus.PENDING,
        nullable=False,
    )
    payment_reference: Mapped[Optional[str]] = mapped_column(
        String(100), nullable=True
    )

    cancellation_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    rejection_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    user = relationship("User")
    vehicle = relationship("Vehicle")
    store = relationship("Store")

    __table_args__ = (
        CheckConstraint("end_time > start_time", name="ck_order_window"),
        Index(
            "ix_rental_orders_vehicle_window", "vehicle_id", "start_time", "end_time"
        ),
    )

    def __repr__(self):
        return f"<Order {self.id} vehicle={self.vehicle_id} status={self.status}>"


# ============================================================================
# FAVORITES & FAQ
# ============================================================================


class Favorite(Base):
    __tablename__ = "rental_favorites"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("rental_users.id", ondelete="CASCADE"), nullable=False
    )
    vehicle_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("rental_vehicles.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )

    vehicle = relationship("Vehicle")

    __table_args__ = (
        UniqueConstraint("user_id", "vehicle_id", name="uq_favorite_user_vehicle"),
    )


class Faq(Base):
    __tablename__ = "rental_faqs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    question: Mapped[str] = mapped_column(String(500), nullable=False)
    answer: Mapped[str] = mapped_column(Text, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )
