"""Enum definitions for rental service models."""

import enum


def enum_values(enum_cls):
    """Return persistent DB values for SAEnum mappings."""
    return [member.value for member in enum_cls]


class FuelType(str, enum.Enum):
    PETROL = "petrol"
    DIESEL = "diesel"
    ELECTRIC = "electric"


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


class UserRole(str, enum.Enum):
    CLIENT = "client"
    ADMIN = "admin"


# Orders in these states hold the vehicle whatever the payment state.
ALWAYS_OCCUPYING_STATUSES = (OrderStatus.CONFIRMED, OrderStatus.ONGOING)
