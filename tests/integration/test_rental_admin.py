"""Integration tests for the admin back-office."""

import uuid
from decimal import Decimal

import pytest
from services.rental_service.app.main import app
from services.rental_service.models import Store
from tests.conftest import make_admin_user, override_auth
from tests.factories import StoreFactory, UserFactory, VehicleFactory, future_window

STORE_BODY = {
    "name": "Koramangala Hub",
    "address": "80 Feet Road",
    "district": "Koramangala",
    "latitude": 12.9352,
    "longitude": 77.6245,
    "opening_time": "07:30",
    "closing_time": "22:00",
}


def _vehicle_body(store_id, **overrides):
    body = {
        "store_id": str(store_id),
        "name": "Ather 450X",
        "brand": "Ather",
        "fuel_type": "electric",
        "price_per_hour": "60.00",
        "price_per_day": "450.00",
        "license_plate": "KA05AB1234",
    }
    body.update(overrides)
    return body


# ---------------------------------------------------------------------------
# Access
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_customer_cannot_use_admin_routes(client, db_session):
    response = await client.get("/admin/rental/stores")

    assert response.status_code == 403


# ---------------------------------------------------------------------------
# Stores
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_and_move_store(client, db_session):
    with override_auth(app, make_admin_user()):
        created = await client.post("/admin/rental/stores", json=STORE_BODY)
        assert created.status_code == 201, created.text
        store_id = created.json()["id"]

        moved = await client.patch(
            f"/admin/rental/stores/{store_id}",
            json={"latitude": 12.9279, "longitude": 77.6271},
        )

    assert moved.status_code == 200, moved.text
    assert moved.json()["latitude"] == 12.9279

    # the GeoJSON point follows the denormalised columns
    store = await db_session.get(Store, uuid.UUID(store_id))
    assert store.location == {"type": "Point", "coordinates": [77.6271, 12.9279]}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_store_validates_body(client, db_session):
    with override_auth(app, make_admin_user()):
        response = await client.post(
            "/admin/rental/stores", json={**STORE_BODY, "latitude": 123}
        )

    assert response.status_code == 422


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_store_rejects_null_required_fields(client, db_session):
    store = StoreFactory.create(description="Near the metro")
    db_session.add(store)
    await db_session.commit()

    with override_auth(app, make_admin_user()):
        rejected = await client.patch(
            f"/admin/rental/stores/{store.id}",
            json={"name": None, "latitude": None},
        )
        cleared = await client.patch(
            f"/admin/rental/stores/{store.id}",
            json={"description": None, "contact_number": None},
        )

    assert rejected.status_code == 400
    body = rejected.json()
    assert body["detail"] == "Validation failed"
    assert [e["field"] for e in body["errors"]] == ["latitude", "name"]

    assert cleared.status_code == 200, cleared.text
    assert cleared.json()["description"] is None
    assert cleared.json()["name"] == "MG Road Rentals"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_deactivated_store_drops_out_of_search(client, db_session):
    store = StoreFactory.create()
    db_session.add_all([store, VehicleFactory.create(store_id=store.id)])
    await db_session.commit()
    start, end = future_window()

    with override_auth(app, make_admin_user()):
        response = await client.delete(f"/admin/rental/stores/{store.id}")
        listing = await client.get("/admin/rental/stores", params={"search": "MG"})
    assert response.status_code == 200
    assert response.json()["is_active"] is False
    assert listing.json()["total"] == 1

    search = await client.get(
        "/rental/available-vehicles",
        params={"start_time": start.isoformat(), "end_time": end.isoformat()},
    )
    assert search.json()["total"] == 0


# ---------------------------------------------------------------------------
# Vehicles
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_vehicle_rules(client, db_session):
    store = StoreFactory.create()
    db_session.add(store)
    await db_session.commit()

    with override_auth(app, make_admin_user()):
        created = await client.post(
            "/admin/rental/vehicles", json=_vehicle_body(store.id)
        )
        duplicate = await client.post(
            "/admin/rental/vehicles", json=_vehicle_body(store.id)
        )
        orphan = await client.post(
            "/admin/rental/vehicles",
            json=_vehicle_body(uuid.uuid4(), license_plate="KA05ZZ9999"),
        )

    assert created.status_code == 201, created.text
    assert created.json()["fuel_type"] == "electric"
    assert duplicate.status_code == 409
    assert duplicate.json() == {
        "detail": "Vehicle with this license plate already exists"
    }
    assert orphan.status_code == 404
    assert orphan.json() == {"detail": "Store not found"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_unknown_vehicle_is_404(client, db_session):
    with override_auth(app, make_admin_user()):
        response = await client.patch(
            f"/admin/rental/vehicles/{uuid.uuid4()}", json={"availability": False}
        )

    assert response.status_code == 404
    assert response.json() == {"detail": "Vehicle not found"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_vehicle_rejects_null_required_fields(client, db_session):
    store = StoreFactory.create()
    vehicle = VehicleFactory.create(store_id=store.id)
    db_session.add_all([store, vehicle])
    await db_session.commit()

    with override_auth(app, make_admin_user()):
        rejected = await client.patch(
            f"/admin/rental/vehicles/{vehicle.id}",
            json={"price_per_hour": None, "license_plate": None},
        )
        cleared = await client.patch(
            f"/admin/rental/vehicles/{vehicle.id}",
            json={"mileage": None, "description": None},
        )

    assert rejected.status_code == 400
    body = rejected.json()
    assert body["detail"] == "Validation failed"
    assert [e["field"] for e in body["errors"]] == ["license_plate", "price_per_hour"]

    assert cleared.status_code == 200, cleared.text
    assert cleared.json()["mileage"] is None
    assert Decimal(cleared.json()["price_per_hour"]) == Decimal("50")


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_list_and_delete_vehicle(client, db_session):
    store = StoreFactory.create()
    other_store = StoreFactory.create(name="Other")
    vehicle = VehicleFactory.create(store_id=store.id, name="Activa")
    scooter = VehicleFactory.create(
        store_id=other_store.id, name="Jupiter", brand="TVS"
    )
    db_session.add_all([store, other_store, vehicle, scooter])
    await db_session.commit()

    with override_auth(app, make_admin_user()):
        updated = await client.patch(
            f"/admin/rental/vehicles/{vehicle.id}",
            json={"availability": False, "price_per_hour": "55.00"},
        )
        by_store = await client.get(
            "/admin/rental/vehicles", params={"store_id": str(store.id)}
        )
        by_search = await client.get(
            "/admin/rental/vehicles", params={"search": "activa"}
        )
        deleted = await client.delete(f"/admin/rental/vehicles/{vehicle.id}")

    assert updated.status_code == 200, updated.text
    assert updated.json()["availability"] is False
    assert by_store.json()["total"] == 1
    assert [v["id"] for v in by_search.json()["items"]] == [str(vehicle.id)]
    assert deleted.json()["is_active"] is False


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_blocked_customer_is_locked_out(client, db_session):
    # provision the customer account
    profile = await client.get("/rental/user/profile")
    assert profile.status_code == 200, profile.text
    account_id = profile.json()["id"]

    with override_auth(app, make_admin_user()):
        blocked = await client.post(f"/admin/rental/users/{account_id}/block")
    assert blocked.json()["is_blocked"] is True

    assert (await client.get("/rental/user/profile")).status_code == 403

    with override_auth(app, make_admin_user()):
        await client.post(f"/admin/rental/users/{account_id}/unblock")
    assert (await client.get("/rental/user/profile")).status_code == 200


@pytest.mark.asyncio
@pytest.mark.integration
async def test_search_users(client, db_session):
    db_session.add_all(
        [
            UserFactory.create(name="Asha Rao", phone="+919844444444"),
            UserFactory.create(
                name="Vikram", phone="+919855555555", email="vikram@example.com"
            ),
        ]
    )
    await db_session.commit()

    with override_auth(app, make_admin_user()):
        by_name = await client.get("/admin/rental/users", params={"search": "asha"})
        by_phone = await client.get("/admin/rental/users", params={"search": "4444"})
        missing = await client.post(f"/admin/rental/users/{uuid.uuid4()}/block")

    assert [u["name"] for u in by_name.json()["items"]] == ["Asha Rao"]
    assert by_phone.json()["total"] == 1
    assert missing.status_code == 404


# ---------------------------------------------------------------------------
# FAQ
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_manage_faqs(client, db_session):
    with override_auth(app, make_admin_user()):
        created = await client.post(
            "/admin/rental/faqs",
            json={"question": "Is fuel included?", "answer": "No.", "sort_order": 1},
        )
    assert created.status_code == 201, created.text

    listing = await client.get("/rental/faqs")
    assert [f["question"] for f in listing.json()] == ["Is fuel included?"]

    with override_auth(app, make_admin_user()):
        deleted = await client.delete(f"/admin/rental/faqs/{created.json()['id']}")
    assert deleted.status_code == 204
    assert (await client.get("/rental/faqs")).json() == []
