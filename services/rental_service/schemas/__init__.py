"""Rental service schemas package."""

from services.rental_service.schemas.admin import (
    AdminStoreResponse,
    AdminUserResponse,
    AdminVehicleResponse,
    FaqCreate,
    OrderReject,
    PaymentRecord,
    StoreCreate,
    StoreUpdate,
    VehicleCreate,
    VehicleUpdate,
)
from services.rental_service.schemas.main import (
    AvailableVehiclesResponse,
    FaqResponse,
    FavoriteResponse,
    OrderCancel,
    OrderCreate,
    OrderResponse,
    PaginatedResponse,
    ProfileResponse,
    ProfileUpdate,
    StoreResponse,
    StoreWithDistance,
    VehicleDetailResponse,
    VehicleResponse,
)

__all__ = [
    "AdminStoreResponse",
    "AdminUserResponse",
    "AdminVehicleResponse",
    "AvailableVehiclesResponse",
    "FaqCreate",
    "FaqResponse",
    "FavoriteResponse",
    "OrderCancel",
    "OrderCreate",
    "OrderReject",
    "OrderResponse",
    "PaginatedResponse",
    "PaymentRecord",
    "ProfileResponse",
    "ProfileUpdate",
    "StoreCreate",
    "StoreResponse",
    "StoreUpdate",
    "StoreWithDistance",
    "VehicleCreate",
    "VehicleDetailResponse",
    "VehicleResponse",
    "VehicleUpdate",
]
