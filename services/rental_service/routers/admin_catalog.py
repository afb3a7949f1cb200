"""Admin catalog router: stores, vehicles, FAQs."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.rental_service.errors import Conflict, NotFound, ValidationFailed
from services.rental_service.models import Faq, Store, Vehicle
from services.rental_service.routers._helpers import page_response, paginate_query
from services.rental_service.schemas import (
    AdminStoreResponse,
    AdminVehicleResponse,
    FaqCreate,
    FaqResponse,
    PaginatedResponse,
    StoreCreate,
    StoreUpdate,
    VehicleCreate,
    VehicleUpdate,
)
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

router = APIRouter(tags=["admin-rental"])

# Columns that may not be cleared with an explicit null on PATCH
STORE_REQUIRED = frozenset(
    {
        "name",
        "address",
        "district",
        "latitude",
        "longitude",
        "opening_time",
        "closing_time",
        "images",
    }
)
VEHICLE_REQUIRED = frozenset(
    {
        "store_id",
        "name",
        "brand",
        "fuel_type",
        "price_per_hour",
        "license_plate",
        "images",
        "availability",
    }
)


def _update_data(payload, required: frozenset) -> dict:
    """Fields sent in a PATCH body, rejecting nulls on required columns."""
    update_data = payload.model_dump(exclude_unset=True)
    errors = [
        {"field": field, "message": f"{field} cannot be null"}
        for field in sorted(required)
        if field in update_data and update_data[field] is None
    ]
    if errors:
        raise ValidationFailed(errors)
    return update_data


# ============================================================================
# STORES
# ============================================================================


@router.get("/stores", response_model=PaginatedResponse[AdminStoreResponse])
async def list_all_stores(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    search: Optional[str] = Query(None),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """List stores (including inactive)."""
    query = select(Store).order_by(Store.name)
    if search:
        pattern = f"%{search}%"
        query = query.where(
            or_(
                Store.name.ilike(pattern),
                Store.district.ilike(pattern),
                Store.address.ilike(pattern),
            )
        )
    result = await paginate_query(db, query, page, limit)
    return page_response(
        result, [AdminStoreResponse.model_validate(s) for s in result.items]
    )


@router.post(
    "/stores", response_model=AdminStoreResponse, status_code=status.HTTP_201_CREATED
)
async def create_store(
    store_in: StoreCreate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    data = store_in.model_dump(exclude={"latitude", "longitude"})
    store = Store(**data)
    store.set_location(store_in.longitude, store_in.latitude)
    db.add(store)
    await db.commit()
    await db.refresh(store)

    logger.info("Store %s created by %s", store.id, current_user.user_id)
    return store


@router.patch("/stores/{store_id}", response_model=AdminStoreResponse)
async def update_store(
    store_id: uuid.UUID,
    store_in: StoreUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Update a store. Moving it rewrites the GeoJSON point as well."""
    store = await _get_store_or_404(db, store_id)

    update_data = _update_data(store_in, STORE_REQUIRED)
    latitude = update_data.pop("latitude", store.latitude)
    longitude = update_data.pop("longitude", store.longitude)
    for field, value in update_data.items():
        setattr(store, field, value)
    store.set_location(longitude, latitude)

    await db.commit()
    await db.refresh(store)
    return store


@router.delete("/stores/{store_id}", response_model=AdminStoreResponse)
async def deactivate_store(
    store_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Soft delete a store. Its vehicles drop out of search with it."""
    store = await _get_store_or_404(db, store_id)
    store.is_active = False
    await db.commit()
    await db.refresh(store)

    logger.info("Store %s deactivated by %s", store.id, current_user.user_id)
    return store


async def _get_store_or_404(db: AsyncSession, store_id: uuid.UUID) -> Store:
    store = await db.get(Store, store_id)
    if not store:
        raise NotFound("Store not found")
    return store


# ============================================================================
# VEHICLES
# ============================================================================


@router.get("/vehicles", response_model=PaginatedResponse[AdminVehicleResponse])
async def list_all_vehicles(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    store_id: Optional[uuid.UUID] = Query(None),
    search: Optional[str] = Query(None),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """List vehicles (including inactive), newest first."""
    query = select(Vehicle).order_by(Vehicle.created_at.desc())
    if store_id:
        query = query.where(Vehicle.store_id == store_id)
    if search:
        pattern = f"%{search}%"
        query = query.where(
            or_(
                Vehicle.name.ilike(pattern),
                Vehicle.brand.ilike(pattern),
                Vehicle.license_plate.ilike(pattern),
            )
        )
    result = await paginate_query(db, query, page, limit)
    return page_response(
        result, [AdminVehicleResponse.model_validate(v) for v in result.items]
    )


@router.post(
    "/vehicles",
    response_model=AdminVehicleResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_vehicle(
    vehicle_in: VehicleCreate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await _get_store_or_404(db, vehicle_in.store_id)
    await _ensure_plate_free(db, vehicle_in.license_plate)

    vehicle = Vehicle(**vehicle_in.model_dump())
    db.add(vehicle)
    await db.commit()
    await db.refresh(vehicle)

    logger.info(
        "Vehicle %s (%s) created by %s",
        vehicle.id,
        vehicle.license_plate,
        current_user.user_id,
    )
    return vehicle


@router.patch("/vehicles/{vehicle_id}", response_model=AdminVehicleResponse)
async def update_vehicle(
    vehicle_id: uuid.UUID,
    vehicle_in: VehicleUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    vehicle = await _get_vehicle_or_404(db, vehicle_id)

    update_data = _update_data(vehicle_in, VEHICLE_REQUIRED)
    if "store_id" in update_data:
        await _get_store_or_404(db, update_data["store_id"])
    plate = update_data.get("license_plate")
    if plate and plate != vehicle.license_plate:
        await _ensure_plate_free(db, plate)

    for field, value in update_data.items():
        setattr(vehicle, field, value)

    await db.commit()
    await db.refresh(vehicle)
    return vehicle


@router.delete("/vehicles/{vehicle_id}", response_model=AdminVehicleResponse)
async def deactivate_vehicle(
    vehicle_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Soft delete a vehicle. Existing orders are left untouched."""
    vehicle = await _get_vehicle_or_404(db, vehicle_id)
    vehicle.is_active = False
    await db.commit()
    await db.refresh(vehicle)

    logger.info("Vehicle %s deactivated by %s", vehicle.id, current_user.user_id)
    return vehicle


async def _get_vehicle_or_404(db: AsyncSession, vehicle_id: uuid.UUID) -> Vehicle:
    vehicle = await db.get(Vehicle, vehicle_id)
    if not vehicle:
        raise NotFound("Vehicle not found")
    return vehicle


async def _ensure_plate_free(db: AsyncSession, license_plate: str) -> None:
    existing = await db.execute(
        select(Vehicle.id).where(Vehicle.license_plate == license_plate)
    )
    if existing.scalar_one_or_none():
        raise Conflict("Vehicle with this license plate already exists")


# ============================================================================
# FAQ
# ============================================================================


@router.post("/faqs", response_model=FaqResponse, status_code=status.HTTP_201_CREATED)
async def create_faq(
    faq_in: FaqCreate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    faq = Faq(**faq_in.model_dump())
    db.add(faq)
    await db.commit()
    await db.refresh(faq)
    return faq


@router.delete("/faqs/{faq_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_faq(
    faq_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    faq = await db.get(Faq, faq_id)
    if not faq:
        raise NotFound("FAQ not found")
    await db.delete(faq)
    await db.commit()
