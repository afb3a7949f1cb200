"""
Model factories for creating valid test data.

Every factory produces a valid, insertable SQLAlchemy model instance.
Override any field via kwargs.

Usage:
    store = StoreFactory.create(latitude=12.97, longitude=77.59)
    db_session.add(store)
    await db_session.commit()
"""

import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _uuid() -> uuid.UUID:
    return uuid.uuid4()


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _unique_phone() -> str:
    return f"+9198{uuid.uuid4().int % 10**8:08d}"


def _unique_plate() -> str:
    return f"KA01{uuid.uuid4().hex[:6].upper()}"


def future_window(days: int = 2, hour: int = 10, hours: int = 2):
    """A ``(start, end)`` pair on a whole hour ``days`` from today (UTC)."""
    day = _now().replace(hour=0, minute=0, second=0, microsecond=0)
    start = day + timedelta(days=days, hours=hour)
    return start, start + timedelta(hours=hours)


# ---------------------------------------------------------------------------
# Rental Service
# ---------------------------------------------------------------------------


class UserFactory:
    @staticmethod
    def create(**overrides):
        from services.rental_service.models import User, UserRole

        defaults = {
            "id": _uuid(),
            "auth_id": f"auth-{uuid.uuid4().hex[:8]}",
            "phone": _unique_phone(),
            "name": "Test Rider",
            "role": UserRole.CLIENT,
            "is_blocked": False,
            "created_at": _now(),
            "updated_at": _now(),
        }
        defaults.update(overrides)
        return User(**defaults)


class StoreFactory:
    @staticmethod
    def create(**overrides):
        from services.rental_service.models import Store

        latitude = overrides.pop("latitude", 12.9716)
        longitude = overrides.pop("longitude", 77.5946)
        defaults = {
            "id": _uuid(),
            "name": "MG Road Rentals",
            "address": "1 MG Road",
            "district": "Bengaluru Central",
            "opening_time": "08:00",
            "closing_time": "21:00",
            "contact_number": "+918000000000",
            "images": [],
            "is_active": True,
            "created_at": _now(),
            "updated_at": _now(),
        }
        defaults.update(overrides)
        store = Store(**defaults)
        store.set_location(longitude, latitude)
        return store


class VehicleFactory:
    @staticmethod
    def create(store_id=None, **overrides):
        from services.rental_service.models import FuelType, Vehicle

        defaults = {
            "id": _uuid(),
            "store_id": store_id or _uuid(),
            "name": "Activa 6G",
            "brand": "Honda",
            "model_year": 2023,
            "fuel_type": FuelType.PETROL,
            "price_per_hour": Decimal("50.00"),
            "price_per_day": None,
            "mileage": 45.0,
            "license_plate": _unique_plate(),
            "images": [],
            "availability": True,
            "is_active": True,
            "created_at": _now(),
            "updated_at": _now(),
        }
        defaults.update(overrides)
        return Vehicle(**defaults)


class OrderFactory:
    @staticmethod
    def create(user_id=None, vehicle_id=None, store_id=None, **overrides):
        from services.rental_service.models import Order, OrderStatus, PaymentStatus

        start, end = future_window()
        defaults = {
            "id": _uuid(),
            "user_id": user_id or _uuid(),
            "vehicle_id": vehicle_id or _uuid(),
            "store_id": store_id or _uuid(),
            "start_time": start,
            "end_time": end,
            "total_amount": Decimal("100.00"),
            "status": OrderStatus.CONFIRMED,
            "payment_status": PaymentStatus.PAID,
            "created_at": _now(),
            "updated_at": _now(),
        }
        defaults.update(overrides)
        return Order(**defaults)


class FaqFactory:
    @staticmethod
    def create(**overrides):
        from services.rental_service.models import Faq

        defaults = {
            "id": _uuid(),
            "question": "Do I need a licence?",
            "answer": "Yes, a valid two-wheeler licence.",
            "sort_order": 0,
            "is_active": True,
        }
        defaults.update(overrides)
        return Faq(**defaults)
