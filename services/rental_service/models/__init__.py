"""Rental Service models package."""

from services.rental_service.models.core import (
    Faq,
    Favorite,
    Order,
    Store,
    User,
    Vehicle,
)
from services.rental_service.models.enums import (
    ALWAYS_OCCUPYING_STATUSES,
    FuelType,
    OrderStatus,
    PaymentStatus,
    UserRole,
)

__all__ = [
    "ALWAYS_OCCUPYING_STATUSES",
    "Faq",
    "Favorite",
    "FuelType",
    "Order",
    "OrderStatus",
    "PaymentStatus",
    "Store",
    "User",
    "UserRole",
    "Vehicle",
]
