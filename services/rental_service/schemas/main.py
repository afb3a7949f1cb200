"""Pydantic schemas for the customer-facing rental API."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from services.rental_service.models import (
    FuelType,
    OrderStatus,
    PaymentStatus,
    UserRole,
)

T = TypeVar("T")


class PaginatedResponse(BaseModel, Generic[T]):
    items: List[T]
    total: int
    page: int
    limit: int
    total_pages: int
    has_next: bool
    has_prev: bool


# ============================================================================
# STORE SCHEMAS
# ============================================================================


class StoreResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    description: Optional[str] = None
    address: str
    district: str
    latitude: float
    longitude: float
    opening_time: str
    closing_time: str
    contact_number: Optional[str] = None
    images: List[str] = []


class StoreWithDistance(StoreResponse):
    distance_km: Optional[float] = None


# ============================================================================
# VEHICLE SCHEMAS
# ============================================================================


class VehicleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    store_id: uuid.UUID
    name: str
    description: Optional[str] = None
    brand: str
    model_year: Optional[int] = None
    fuel_type: FuelType
    price_per_hour: Decimal
    price_per_day: Optional[Decimal] = None
    mileage: Optional[float] = None
    license_plate: str
    images: List[str] = []
    availability: bool
    created_at: datetime


class AvailableVehiclesResponse(BaseModel):
    vehicles: List[VehicleResponse]
    total: int
    page: int
    limit: int
    total_pages: int
    has_next: bool
    has_prev: bool
    district: Optional[str] = None
    stores: List[StoreResponse] = []


class FaqResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    question: str
    answer: str
    sort_order: int


class VehicleDetailResponse(BaseModel):
    vehicle: VehicleResponse
    store: StoreResponse
    faqs: List[FaqResponse] = []


# ============================================================================
# ORDER SCHEMAS
# ============================================================================


class OrderCreate(BaseModel):
    vehicle_id: uuid.UUID
    start_time: datetime
    end_time: datetime


class OrderCancel(BaseModel):
    reason: Optional[str] = Field(None, max_length=500)


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    vehicle_id: uuid.UUID
    store_id: uuid.UUID
    start_time: datetime
    end_time: datetime
    total_amount: Decimal
    status: OrderStatus
    payment_status: PaymentStatus
    payment_reference: Optional[str] = None
    cancellation_reason: Optional[str] = None
    rejection_reason: Optional[str] = None
    created_at: datetime
    updated_at: datetime


# ============================================================================
# ACCOUNT SCHEMAS
# ============================================================================


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    phone: str
    name: Optional[str] = None
    email: Optional[str] = None
    role: UserRole
    created_at: datetime


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    email: Optional[EmailStr] = None


class FavoriteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    vehicle: VehicleResponse
    created_at: datetime
