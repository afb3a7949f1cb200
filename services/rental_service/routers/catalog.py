"""Public catalog router: stores, availability search, vehicle detail, FAQs."""

import uuid
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from libs.common.config import get_settings
from libs.common.rate_limit import search_limit
from libs.db.session import get_async_db
from services.rental_service.errors import NotFound, ValidationFailed
from services.rental_service.models import Faq, Store
from services.rental_service.repository import SqlRentalRepository
from services.rental_service.schemas import (
    AvailableVehiclesResponse,
    FaqResponse,
    StoreResponse,
    StoreWithDistance,
    VehicleDetailResponse,
    VehicleResponse,
)
from services.rental_service.services.availability import (
    SearchQuery,
    coordinate_errors,
    find_available_vehicles,
)
from services.rental_service.services.geo import distance_km
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["rental"])


# ============================================================================
# STORES
# ============================================================================


@router.get("/stores", response_model=list[StoreWithDistance])
async def list_stores(
    latitude: Optional[float] = Query(None),
    longitude: Optional[float] = Query(None),
    db: AsyncSession = Depends(get_async_db),
):
    """List active stores, nearest first when a location is given."""
    if (latitude is None) != (longitude is None):
        missing = "longitude" if longitude is None else "latitude"
        raise ValidationFailed.single(missing, f"{missing} is required with a location")
    errors = coordinate_errors(latitude, longitude)
    if errors:
        raise ValidationFailed(errors)

    stores = await SqlRentalRepository(db).list_active_stores()
    responses = [StoreWithDistance.model_validate(s) for s in stores]
    if latitude is None:
        return responses

    for resp in responses:
        resp.distance_km = round(
            distance_km(latitude, longitude, resp.latitude, resp.longitude), 3
        )
    responses.sort(key=lambda r: r.distance_km)
    return responses


# ============================================================================
# AVAILABILITY
# ============================================================================


@router.get("/available-vehicles", response_model=AvailableVehiclesResponse)
@search_limit
async def search_available_vehicles(
    request: Request,
    start_time: datetime = Query(...),
    end_time: datetime = Query(...),
    store_id: Optional[uuid.UUID] = Query(None),
    latitude: Optional[float] = Query(None),
    longitude: Optional[float] = Query(None),
    radius_km: Optional[float] = Query(None),
    page: int = Query(1),
    limit: Optional[int] = Query(None),
    sort: str = Query("created_at"),
    db: AsyncSession = Depends(get_async_db),
):
    """Vehicles bookable for ``[start_time, end_time)`` at the chosen stores.

    Pick stores with ``store_id`` or with ``latitude``/``longitude``/
    ``radius_km``. With neither, every active store is searched.
    """
    query = SearchQuery(
        start_time=start_time,
        end_time=end_time,
        store_id=store_id,
        latitude=latitude,
        longitude=longitude,
        radius_km=radius_km,
        page=page,
        limit=limit if limit is not None else get_settings().DEFAULT_PAGE_SIZE,
        sort=sort,
    )
    result = await find_available_vehicles(SqlRentalRepository(db), query)

    return AvailableVehiclesResponse(
        vehicles=[VehicleResponse.model_validate(v) for v in result.page.items],
        total=result.page.total,
        page=result.page.page,
        limit=result.page.limit,
        total_pages=result.page.total_pages,
        has_next=result.page.has_next,
        has_prev=result.page.has_prev,
        district=result.district,
        stores=[StoreResponse.model_validate(s) for s in result.stores],
    )


@router.get("/available-vehicles/{vehicle_id}", response_model=VehicleDetailResponse)
async def get_vehicle_detail(
    vehicle_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_db),
):
    """Get a vehicle with its store and the FAQ list."""
    vehicle = await SqlRentalRepository(db).get_vehicle(vehicle_id)
    if vehicle is None or not vehicle.is_active:
        raise NotFound("Vehicle not found")

    store = await db.get(Store, vehicle.store_id)
    faqs = await _active_faqs(db)

    return VehicleDetailResponse(
        vehicle=VehicleResponse.model_validate(vehicle),
        store=StoreResponse.model_validate(store),
        faqs=[FaqResponse.model_validate(f) for f in faqs],
    )


# ============================================================================
# FAQ
# ============================================================================


@router.get("/faqs", response_model=list[FaqResponse])
async def list_faqs(db: AsyncSession = Depends(get_async_db)):
    return await _active_faqs(db)


async def _active_faqs(db: AsyncSession) -> list[Faq]:
    query = (
        select(Faq)
        .where(Faq.is_active.is_(True))
        .order_by(Faq.sort_order, Faq.created_at)
    )
    result = await db.execute(query)
    return list(result.scalars().all())
