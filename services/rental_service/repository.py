"""Read access to stores, vehicles and bookings for availability resolution.

``RentalRepository`` is the seam the availability service depends on.
``SqlRentalRepository`` implements it over an ``AsyncSession``; a session is
passed in explicitly per request.
"""

import uuid
from datetime import datetime
from typing import Optional, Protocol, Sequence

from services.rental_service.models import (
    ALWAYS_OCCUPYING_STATUSES,
    Order,
    OrderStatus,
    PaymentStatus,
    Store,
    Vehicle,
)
from services.rental_service.services.geo import bounding_box, distance_km
from sqlalchemy import and_, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession


class RepositoryError(Exception):
    """The backing store could not answer a query."""


class RentalRepository(Protocol):
    async def find_stores_near(
        self, longitude: float, latitude: float, radius_km: float
    ) -> list[Store]: ...

    async def list_active_stores(self) -> list[Store]: ...

    async def get_store(self, store_id: uuid.UUID) -> Optional[Store]: ...

    async def find_vehicles_by_stores(
        self, store_ids: Sequence[uuid.UUID]
    ) -> list[Vehicle]: ...

    async def get_vehicle(self, vehicle_id: uuid.UUID) -> Optional[Vehicle]: ...

    async def find_overlapping_bookings(
        self, vehicle_id: uuid.UUID, start: datetime, end: datetime
    ) -> list[Order]: ...


def occupying_clause():
    """SQL form of the occupying-booking rule.

    Confirmed and ongoing orders always hold the vehicle; a pending order
    holds it only once paid.
    """
    return or_(
        Order.status.in_(ALWAYS_OCCUPYING_STATUSES),
        and_(
            Order.status == OrderStatus.PENDING,
            Order.payment_status == PaymentStatus.PAID,
        ),
    )


class SqlRentalRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _scalars(self, query) -> list:
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            raise RepositoryError(str(e)) from e
        return list(result.scalars().all())

    async def find_stores_near(
        self, longitude: float, latitude: float, radius_km: float
    ) -> list[Store]:
        """Active stores within ``radius_km``, nearest first."""
        min_lat, max_lat, min_lng, max_lng = bounding_box(
            latitude, longitude, radius_km
        )
        query = select(Store).where(
            Store.is_active.is_(True),
            Store.latitude >= min_lat,
            Store.latitude <= max_lat,
        )
        if min_lng is not None:
            query = query.where(Store.longitude >= min_lng, Store.longitude <= max_lng)

        hits = []
        for store in await self._scalars(query):
            d = distance_km(latitude, longitude, store.latitude, store.longitude)
            if d <= radius_km:
                hits.append((d, store))
        hits.sort(key=lambda hit: hit[0])
        return [store for _, store in hits]

    async def list_active_stores(self) -> list[Store]:
        query = select(Store).where(Store.is_active.is_(True)).order_by(Store.name)
        return await self._scalars(query)

    async def get_store(self, store_id: uuid.UUID) -> Optional[Store]:
        query = select(Store).where(Store.id == store_id, Store.is_active.is_(True))
        stores = await self._scalars(query)
        return stores[0] if stores else None

    async def find_vehicles_by_stores(
        self, store_ids: Sequence[uuid.UUID]
    ) -> list[Vehicle]:
        query = select(Vehicle).where(
            Vehicle.store_id.in_(list(store_ids)),
            Vehicle.availability.is_(True),
            Vehicle.is_active.is_(True),
        )
        return await self._scalars(query)

    async def get_vehicle(self, vehicle_id: uuid.UUID) -> Optional[Vehicle]:
        vehicles = await self._scalars(select(Vehicle).where(Vehicle.id == vehicle_id))
        return vehicles[0] if vehicles else None

    async def find_overlapping_bookings(
        self, vehicle_id: uuid.UUID, start: datetime, end: datetime
    ) -> list[Order]:
        """Occupying orders on the vehicle that intersect ``[start, end)``."""
        query = select(Order).where(
            Order.vehicle_id == vehicle_id,
            Order.start_time < end,
            Order.end_time > start,
            occupying_clause(),
        )
        return await self._scalars(query)
