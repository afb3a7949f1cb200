"""Pydantic schemas for the admin back-office."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from services.rental_service.models import FuelType, UserRole
from services.rental_service.schemas.main import StoreResponse, VehicleResponse

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class StoreCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    address: str = Field(..., min_length=1, max_length=500)
    district: str = Field(..., min_length=1, max_length=120)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    opening_time: str = Field(..., pattern=TIME_PATTERN)
    closing_time: str = Field(..., pattern=TIME_PATTERN)
    contact_number: Optional[str] = Field(None, max_length=20)
    images: List[str] = []


class StoreUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    address: Optional[str] = Field(None, min_length=1, max_length=500)
    district: Optional[str] = Field(None, min_length=1, max_length=120)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    opening_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    closing_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    contact_number: Optional[str] = Field(None, max_length=20)
    images: Optional[List[str]] = None


class AdminStoreResponse(StoreResponse):
    is_active: bool
    created_at: datetime
    updated_at: datetime


class VehicleCreate(BaseModel):
    store_id: uuid.UUID
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    brand: str = Field(..., min_length=1, max_length=100)
    model_year: Optional[int] = Field(None, ge=1950, le=2100)
    fuel_type: FuelType
    price_per_hour: Decimal = Field(..., ge=0)
    price_per_day: Optional[Decimal] = Field(None, ge=0)
    mileage: Optional[float] = Field(None, ge=0)
    license_plate: str = Field(..., min_length=1, max_length=20)
    images: List[str] = []
    availability: bool = True


class VehicleUpdate(BaseModel):
    store_id: Optional[uuid.UUID] = None
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    brand: Optional[str] = Field(None, min_length=1, max_length=100)
    model_year: Optional[int] = Field(None, ge=1950, le=2100)
    fuel_type: Optional[FuelType] = None
    price_per_hour: Optional[Decimal] = Field(None, ge=0)
    price_per_day: Optional[Decimal] = Field(None, ge=0)
    mileage: Optional[float] = Field(None, ge=0)
    license_plate: Optional[str] = Field(None, min_length=1, max_length=20)
    images: Optional[List[str]] = None
    availability: Optional[bool] = None


class AdminVehicleResponse(VehicleResponse):
    is_active: bool
    updated_at: datetime


class OrderReject(BaseModel):
    reason: str = Field(..., min_length=1, max_length=500)


class AdminUserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    auth_id: str
    phone: str
    name: Optional[str] = None
    email: Optional[str] = None
    role: UserRole
    is_blocked: bool
    created_at: datetime


class FaqCreate(BaseModel):
    question: str = Field(..., min_length=1, max_length=500)
    answer: str = Field(..., min_length=1)
    sort_order: int = 0


class PaymentRecord(BaseModel):
    payment_reference: str = Field(..., min_length=1, max_length=100)
