"""Integration tests for the public catalog and availability search."""

import uuid
from datetime import timedelta

import pytest
from services.rental_service.models import OrderStatus, PaymentStatus
from tests.factories import (
    FaqFactory,
    OrderFactory,
    StoreFactory,
    UserFactory,
    VehicleFactory,
    future_window,
)

CENTRE = {"latitude": 12.97, "longitude": 77.59, "radius_km": 5}


def _window_params(start, end, **extra):
    params = {"start_time": start.isoformat(), "end_time": end.isoformat()}
    params.update(extra)
    return params


async def _seed_booked_vehicle(db):
    """One store near the centre with a vehicle booked 10:00 to 12:00."""
    user = UserFactory.create()
    store = StoreFactory.create(
        latitude=12.9716, longitude=77.5946, district="Bengaluru Central"
    )
    vehicle = VehicleFactory.create(store_id=store.id)
    ten, noon = future_window(hour=10, hours=2)
    order = OrderFactory.create(
        user_id=user.id,
        vehicle_id=vehicle.id,
        store_id=store.id,
        start_time=ten,
        end_time=noon,
        status=OrderStatus.CONFIRMED,
        payment_status=PaymentStatus.PAID,
    )
    db.add_all([user, store, vehicle, order])
    await db.commit()
    return store, vehicle, ten


# ---------------------------------------------------------------------------
# Availability search
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_overlapping_window_hides_booked_vehicle(client, db_session):
    """GET /rental/available-vehicles: 11:00-13:00 overlaps the booking."""
    _, _, ten = await _seed_booked_vehicle(db_session)
    start = ten + timedelta(hours=1)

    response = await client.get(
        "/rental/available-vehicles",
        params=_window_params(start, start + timedelta(hours=2), **CENTRE),
    )

    assert response.status_code == 200, response.text
    data = response.json()
    assert data["vehicles"] == []
    assert data["total"] == 0
    assert data["total_pages"] == 0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_back_to_back_window_shows_vehicle(client, db_session):
    """GET /rental/available-vehicles: 12:00-14:00 starts as the booking ends."""
    store, vehicle, ten = await _seed_booked_vehicle(db_session)
    noon = ten + timedelta(hours=2)

    response = await client.get(
        "/rental/available-vehicles",
        params=_window_params(noon, noon + timedelta(hours=2), **CENTRE),
    )

    assert response.status_code == 200, response.text
    data = response.json()
    assert [v["id"] for v in data["vehicles"]] == [str(vehicle.id)]
    assert data["total"] == 1
    assert data["page"] == 1
    assert data["limit"] == 10
    assert data["has_next"] is False
    assert data["has_prev"] is False
    assert data["district"] == "Bengaluru Central"
    assert data["stores"][0]["id"] == str(store.id)


@pytest.mark.asyncio
@pytest.mark.integration
async def test_search_by_store_pages_results(client, db_session):
    store = StoreFactory.create()
    db_session.add(store)
    db_session.add_all(
        [VehicleFactory.create(store_id=store.id) for _ in range(12)]
    )
    await db_session.commit()
    start, end = future_window()

    response = await client.get(
        "/rental/available-vehicles",
        params=_window_params(start, end, store_id=str(store.id), page=3, limit=5),
    )

    assert response.status_code == 200, response.text
    data = response.json()
    assert len(data["vehicles"]) == 2
    assert data["total"] == 12
    assert data["total_pages"] == 3
    assert data["has_next"] is False
    assert data["has_prev"] is True


@pytest.mark.asyncio
@pytest.mark.integration
async def test_search_without_location_uses_all_stores(client, db_session):
    stores = [
        StoreFactory.create(),
        StoreFactory.create(latitude=19.07, longitude=72.87, district="Mumbai"),
    ]
    db_session.add_all(stores)
    db_session.add_all([VehicleFactory.create(store_id=s.id) for s in stores])
    await db_session.commit()
    start, end = future_window()

    response = await client.get(
        "/rental/available-vehicles", params=_window_params(start, end)
    )

    assert response.status_code == 200, response.text
    data = response.json()
    assert data["total"] == 2
    assert data["district"] == "All Locations"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_search_validation_errors(client, db_session):
    """Invalid window and partial location come back as field errors."""
    start, _ = future_window()

    response = await client.get(
        "/rental/available-vehicles",
        params=_window_params(start, start - timedelta(hours=1), latitude=12.97),
    )

    assert response.status_code == 400
    data = response.json()
    assert data["detail"] == "Validation failed"
    fields = {e["field"] for e in data["errors"]}
    assert fields == {"end_time", "longitude", "radius_km"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_search_unknown_store_is_404(client, db_session):
    start, end = future_window()

    response = await client.get(
        "/rental/available-vehicles",
        params=_window_params(start, end, store_id=str(uuid.uuid4())),
    )

    assert response.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_search_malformed_time_is_422(client, db_session):
    response = await client.get(
        "/rental/available-vehicles",
        params={"start_time": "tomorrow", "end_time": "later"},
    )

    assert response.status_code == 422


# ---------------------------------------------------------------------------
# Stores, vehicle detail, FAQ
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_stores_nearest_first(client, db_session):
    far = StoreFactory.create(name="Airport", latitude=13.1986, longitude=77.7066)
    near = StoreFactory.create(name="MG Road", latitude=12.9756, longitude=77.6050)
    closed = StoreFactory.create(name="Closed", is_active=False)
    db_session.add_all([far, near, closed])
    await db_session.commit()

    response = await client.get(
        "/rental/stores", params={"latitude": 12.97, "longitude": 77.59}
    )

    assert response.status_code == 200, response.text
    data = response.json()
    assert [s["name"] for s in data] == ["MG Road", "Airport"]
    assert data[0]["distance_km"] < data[1]["distance_km"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_stores_rejects_half_a_location(client, db_session):
    response = await client.get("/rental/stores", params={"latitude": 12.97})

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "longitude"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_vehicle_detail_includes_store_and_faqs(client, db_session):
    store = StoreFactory.create()
    vehicle = VehicleFactory.create(store_id=store.id)
    db_session.add_all(
        [
            store,
            vehicle,
            FaqFactory.create(question="Second?", sort_order=2),
            FaqFactory.create(question="First?", sort_order=1),
            FaqFactory.create(question="Hidden?", is_active=False),
        ]
    )
    await db_session.commit()

    response = await client.get(f"/rental/available-vehicles/{vehicle.id}")

    assert response.status_code == 200, response.text
    data = response.json()
    assert data["vehicle"]["license_plate"] == vehicle.license_plate
    assert data["store"]["id"] == str(store.id)
    assert [f["question"] for f in data["faqs"]] == ["First?", "Second?"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_vehicle_detail_missing_is_404(client, db_session):
    store = StoreFactory.create()
    deleted = VehicleFactory.create(store_id=store.id, is_active=False)
    db_session.add_all([store, deleted])
    await db_session.commit()

    response = await client.get(f"/rental/available-vehicles/{deleted.id}")
    assert response.status_code == 404

    response = await client.get(f"/rental/available-vehicles/{uuid.uuid4()}")
    assert response.status_code == 404
    assert response.json() == {"detail": "Vehicle not found"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "X-Request-ID" in response.headers
