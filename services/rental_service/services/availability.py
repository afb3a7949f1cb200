"""Availability resolution: which vehicles can be booked for a time window.

Pipeline, all reads:

1. candidate stores   (explicit store, stores within a radius, or all stores)
2. candidate vehicles (store in set, ``availability`` and ``is_active`` set)
3. conflict check     (no occupying booking overlaps ``[start, end)``)
4. pagination         (stable order, page/limit slice, totals)
"""

import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence

from libs.common.config import get_settings
from libs.common.datetime_utils import ensure_utc
from libs.common.logging import get_logger
from services.rental_service.errors import (
    AvailabilityLookupError,
    NotFound,
    ValidationFailed,
)
from services.rental_service.models import (
    ALWAYS_OCCUPYING_STATUSES,
    Order,
    OrderStatus,
    PaymentStatus,
    Store,
    Vehicle,
)
from services.rental_service.repository import RentalRepository, RepositoryError

logger = get_logger(__name__)

ALL_LOCATIONS = "All Locations"
SORT_KEYS = ("created_at", "price_asc", "price_desc")


@dataclass
class SearchQuery:
    start_time: datetime
    end_time: datetime
    store_id: Optional[uuid.UUID] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    radius_km: Optional[float] = None
    page: int = 1
    limit: int = 10
    sort: str = "created_at"


@dataclass
class Page:
    items: list
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1


@dataclass
class AvailabilityResult:
    page: Page
    district: Optional[str] = None
    stores: list[Store] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def window_errors(start: datetime, end: datetime) -> list[dict[str, str]]:
    if ensure_utc(end) <= ensure_utc(start):
        return [{"field": "end_time", "message": "end_time must be after start_time"}]
    return []


def coordinate_errors(
    latitude: Optional[float], longitude: Optional[float]
) -> list[dict[str, str]]:
    errors = []
    if latitude is not None and not -90 <= latitude <= 90:
        errors.append(
            {"field": "latitude", "message": "latitude must be between -90 and 90"}
        )
    if longitude is not None and not -180 <= longitude <= 180:
        errors.append(
            {"field": "longitude", "message": "longitude must be between -180 and 180"}
        )
    return errors


def pagination_errors(page: int, limit: int) -> list[dict[str, str]]:
    max_limit = get_settings().MAX_PAGE_SIZE
    errors = []
    if page < 1:
        errors.append({"field": "page", "message": "page must be at least 1"})
    if not 1 <= limit <= max_limit:
        errors.append(
            {"field": "limit", "message": f"limit must be between 1 and {max_limit}"}
        )
    return errors


def validate_search_query(query: SearchQuery) -> None:
    """Reject a malformed search with every field error at once."""
    errors = window_errors(query.start_time, query.end_time)

    if query.store_id is None:
        location = {
            "latitude": query.latitude,
            "longitude": query.longitude,
            "radius_km": query.radius_km,
        }
        given = [name for name, value in location.items() if value is not None]
        if given and len(given) < len(location):
            errors.extend(
                {"field": name, "message": f"{name} is required for a location search"}
                for name, value in location.items()
                if value is None
            )
        errors.extend(coordinate_errors(query.latitude, query.longitude))
        if query.radius_km is not None and not 0 < query.radius_km < math.inf:
            errors.append(
                {"field": "radius_km", "message": "radius_km must be a positive number"}
            )

    errors.extend(pagination_errors(query.page, query.limit))
    if query.sort not in SORT_KEYS:
        errors.append(
            {"field": "sort", "message": f"sort must be one of: {', '.join(SORT_KEYS)}"}
        )

    if errors:
        raise ValidationFailed(errors)


# ---------------------------------------------------------------------------
# Stage 1: candidate stores
# ---------------------------------------------------------------------------


async def resolve_candidate_stores(
    repo: RentalRepository, query: SearchQuery
) -> tuple[list[Store], Optional[str]]:
    """Return the candidate stores and the district label for the search."""
    if query.store_id is not None:
        store = await repo.get_store(query.store_id)
        if store is None:
            raise NotFound("Store not found")
        return [store], store.district

    if query.latitude is not None:
        stores = await repo.find_stores_near(
            query.longitude, query.latitude, query.radius_km
        )
        return stores, (stores[0].district if stores else None)

    return await repo.list_active_stores(), ALL_LOCATIONS


# ---------------------------------------------------------------------------
# Stage 2: candidate vehicles
# ---------------------------------------------------------------------------


async def filter_candidate_vehicles(
    repo: RentalRepository, store_ids: Sequence[uuid.UUID]
) -> list[Vehicle]:
    if not store_ids:
        return []
    wanted = set(store_ids)
    vehicles = await repo.find_vehicles_by_stores(list(wanted))
    return [
        v for v in vehicles if v.store_id in wanted and v.is_active and v.availability
    ]


# ---------------------------------------------------------------------------
# Stage 3: booking conflicts
# ---------------------------------------------------------------------------


def is_occupying(order: Order) -> bool:
    """Whether an order holds its vehicle for its window.

    Confirmed/ongoing always do. Pending does only once paid, so abandoned
    unpaid checkouts never block stock. Cancelled and completed never do.
    """
    if order.status in ALWAYS_OCCUPYING_STATUSES:
        return True
    return (
        order.status == OrderStatus.PENDING
        and order.payment_status == PaymentStatus.PAID
    )


def windows_overlap(
    start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime
) -> bool:
    """Half-open overlap test; touching windows do not overlap."""
    start_a, end_a = ensure_utc(start_a), ensure_utc(end_a)
    return start_a < ensure_utc(end_b) and end_a > ensure_utc(start_b)


async def is_vehicle_available(
    repo: RentalRepository,
    vehicle_id: uuid.UUID,
    start: datetime,
    end: datetime,
) -> bool:
    """True when no occupying booking of the vehicle overlaps ``[start, end)``.

    An unknown vehicle is reported as unavailable rather than raising.
    """
    errors = window_errors(start, end)
    if errors:
        raise ValidationFailed(errors)

    start, end = ensure_utc(start), ensure_utc(end)
    if await repo.get_vehicle(vehicle_id) is None:
        return False

    bookings = await repo.find_overlapping_bookings(vehicle_id, start, end)
    return not any(
        is_occupying(b) and windows_overlap(b.start_time, b.end_time, start, end)
        for b in bookings
    )


# ---------------------------------------------------------------------------
# Stage 4: pagination
# ---------------------------------------------------------------------------


def _creation_key(vehicle: Vehicle):
    return (ensure_utc(vehicle.created_at), str(vehicle.id))


def sort_vehicles(vehicles: Sequence[Vehicle], sort: str = "created_at") -> list:
    ordered = sorted(vehicles, key=_creation_key)
    if sort == "price_asc":
        ordered.sort(key=lambda v: v.price_per_hour)
    elif sort == "price_desc":
        ordered.sort(key=lambda v: v.price_per_hour, reverse=True)
    return ordered


def paginate(items: Sequence, page: int, limit: int) -> Page:
    """Slice ``items`` for ``page``; pages past the end come back empty."""
    errors = pagination_errors(page, limit)
    if errors:
        raise ValidationFailed(errors)
    offset = (page - 1) * limit
    return Page(
        items=list(items[offset : offset + limit]),
        total=len(items),
        page=page,
        limit=limit,
    )


# ---------------------------------------------------------------------------
# Boundary
# ---------------------------------------------------------------------------


async def find_available_vehicles(
    repo: RentalRepository, query: SearchQuery
) -> AvailabilityResult:
    validate_search_query(query)
    start, end = ensure_utc(query.start_time), ensure_utc(query.end_time)

    try:
        stores, district = await resolve_candidate_stores(repo, query)
        if not stores:
            logger.info("No stores matched availability search")
            return AvailabilityResult(
                page=Page(items=[], total=0, page=query.page, limit=query.limit),
                district=district,
            )

        candidates = await filter_candidate_vehicles(repo, [s.id for s in stores])
        available = [
            v
            for v in candidates
            if await is_vehicle_available(repo, v.id, start, end)
        ]
    except RepositoryError as e:
        raise AvailabilityLookupError(e) from e

    logger.info(
        "Availability search: %d stores, %d candidates, %d available",
        len(stores),
        len(candidates),
        len(available),
    )
    page = paginate(sort_vehicles(available, query.sort), query.page, query.limit)
    return AvailabilityResult(page=page, district=district, stores=stores)
