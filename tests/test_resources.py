"""
Tests for the resource registry endpoints, including soft and hard delete.
"""

import pytest
from httpx import AsyncClient

from tests.conftest import booking_payload


@pytest.mark.asyncio
async def test_list_resources_public(client: AsyncClient, room, projector):
    response = await client.get("/api/resources")
    assert response.status_code == 200
    data = response.json()
    # Ordered by kind, then name
    assert [r["kind"] for r in data] == ["EQUIPMENT", "ROOM"]


@pytest.mark.asyncio
async def test_list_resources_by_kind(client: AsyncClient, room, projector):
    response = await client.get("/api/resources", params={"kind": "room"})
    assert response.status_code == 200
    data = response.json()
    assert len(data) == 1
    assert data[0]["name"] == "Room A"


@pytest.mark.asyncio
async def test_create_resource(staff_client: AsyncClient):
    response = await staff_client.post("/api/resources", json={"kind": "room", "name": "Board Room"})
    assert response.status_code == 201
    data = response.json()
    assert data["kind"] == "ROOM"
    assert data["name"] == "Board Room"
    assert data["quantity"] == 1
    assert data["status"] == "Available"
    assert data["subcategory"] is None


@pytest.mark.asyncio
async def test_create_duplicate_resource(admin_client: AsyncClient):
    first = await admin_client.post("/api/resources", json={"kind": "ROOM", "name": "Room A"})
    assert first.status_code == 201

    second = await admin_client.post("/api/resources", json={"kind": "ROOM", "name": "Room A"})
    assert second.status_code == 409
    assert second.json()["message"] == "Duplicate resource name for this kind"


@pytest.mark.asyncio
async def test_same_name_different_kind_allowed(admin_client: AsyncClient, room):
    response = await admin_client.post("/api/resources", json={"kind": "EQUIPMENT", "name": "Room A"})
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_create_resource_unauthenticated(client: AsyncClient):
    response = await client.post("/api/resources", json={"kind": "ROOM", "name": "Room B"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_create_resource_viewer_forbidden(viewer_client: AsyncClient):
    response = await viewer_client.post("/api/resources", json={"kind": "ROOM", "name": "Room B"})
    assert response.status_code == 403


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    {"name": "No kind"},
    {"kind": "ROOM"},
    {"kind": "   ", "name": "Blank kind"},
    {"kind": "ROOM", "name": "Negative", "quantity": -1},
    {"kind": "ROOM", "name": "Bad status", "status": "Broken"},
])
async def test_create_resource_invalid(admin_client: AsyncClient, body):
    response = await admin_client.post("/api/resources", json=body)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_resource(admin_client: AsyncClient, room):
    response = await admin_client.patch(
        f"/api/resources/{room.id}",
        json={"quantity": 4, "status": "Maintenance", "kind": "IGNORED"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["quantity"] == 4
    assert data["status"] == "Maintenance"
    assert data["kind"] == "ROOM"


@pytest.mark.asyncio
async def test_update_resource_no_fields(admin_client: AsyncClient, room):
    response = await admin_client.patch(f"/api/resources/{room.id}", json={"kind": "EQUIPMENT"})
    assert response.status_code == 400
    assert response.json()["message"] == "no fields to update"


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    {"status": "Broken"},
    {"quantity": -5},
    {"name": None},
])
async def test_update_resource_invalid(admin_client: AsyncClient, room, body):
    response = await admin_client.patch(f"/api/resources/{room.id}", json=body)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_resource_not_found(admin_client: AsyncClient):
    response = await admin_client.patch("/api/resources/99999", json={"quantity": 2})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_rename_to_existing_name(admin_client: AsyncClient, room):
    other = await admin_client.post("/api/resources", json={"kind": "ROOM", "name": "Room B"})
    response = await admin_client.patch(
        f"/api/resources/{other.json()['id']}", json={"name": "Room A"}
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_update_resource_unauthenticated(client: AsyncClient, room):
    response = await client.patch(f"/api/resources/{room.id}", json={"quantity": 2})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_delete_resource_unauthenticated(client: AsyncClient, room):
    response = await client.delete(f"/api/resources/{room.id}")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_delete_resource_viewer_forbidden(viewer_client: AsyncClient, room):
    response = await viewer_client.delete(f"/api/resources/{room.id}")
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_soft_delete_keeps_history(admin_client: AsyncClient, room):
    booking = await admin_client.post(
        "/api/bookings",
        json=booking_payload(room, "2030-01-15T10:00:00Z", "2030-01-15T11:00:00Z"),
    )
    assert booking.status_code == 201

    response = await admin_client.delete(f"/api/resources/{room.id}")
    assert response.status_code == 204

    resources = (await admin_client.get("/api/resources")).json()
    assert resources[0]["id"] == room.id
    assert resources[0]["status"] == "Inactive"

    bookings = (await admin_client.get("/api/bookings")).json()
    assert [b["id"] for b in bookings] == [booking.json()["id"]]


@pytest.mark.asyncio
async def test_soft_delete_not_found(admin_client: AsyncClient):
    response = await admin_client.delete("/api/resources/99999")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_hard_delete_blocked_by_active_booking(admin_client: AsyncClient, room):
    booking = await admin_client.post(
        "/api/bookings",
        json=booking_payload(room, "2030-01-15T10:00:00Z", "2030-01-15T11:00:00Z"),
    )
    assert booking.status_code == 201

    response = await admin_client.delete(f"/api/resources/{room.id}", params={"hard": "true"})
    assert response.status_code == 409
    assert response.json()["error"] == "in_use"

    resources = (await admin_client.get("/api/resources")).json()
    assert resources[0]["id"] == room.id
    assert resources[0]["status"] == "Available"
    bookings = (await admin_client.get("/api/bookings")).json()
    assert len(bookings) == 1
    assert bookings[0]["status"] == "REQUEST"


@pytest.mark.asyncio
async def test_hard_delete_blocked_by_ongoing_booking(admin_client: AsyncClient, room):
    booking = await admin_client.post(
        "/api/bookings",
        json=booking_payload(room, "2030-01-15T10:00:00Z", "2030-01-15T11:00:00Z"),
    )
    await admin_client.post(f"/api/bookings/{booking.json()['id']}/start")

    response = await admin_client.delete(f"/api/resources/{room.id}", params={"mode": "hard"})
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_hard_delete_purges_finished_bookings(admin_client: AsyncClient, room, projector):
    done = await admin_client.post(
        "/api/bookings",
        json=booking_payload(room, "2030-01-15T10:00:00Z", "2030-01-15T11:00:00Z"),
    )
    await admin_client.post(f"/api/bookings/{done.json()['id']}/start")
    await admin_client.post(f"/api/bookings/{done.json()['id']}/finish")
    dropped = await admin_client.post(
        "/api/bookings",
        json=booking_payload(room, "2030-01-16T10:00:00Z", "2030-01-16T11:00:00Z"),
    )
    await admin_client.post(f"/api/bookings/{dropped.json()['id']}/cancel")
    unrelated = await admin_client.post(
        "/api/bookings",
        json=booking_payload(projector, "2030-01-15T10:00:00Z", "2030-01-15T11:00:00Z"),
    )

    response = await admin_client.delete(f"/api/resources/{room.id}", params={"hard": "1"})
    assert response.status_code == 204

    resources = (await admin_client.get("/api/resources")).json()
    assert [r["id"] for r in resources] == [projector.id]
    bookings = (await admin_client.get("/api/bookings")).json()
    assert [b["id"] for b in bookings] == [unrelated.json()["id"]]


@pytest.mark.asyncio
async def test_hard_delete_not_found(admin_client: AsyncClient):
    response = await admin_client.delete("/api/resources/99999", params={"hard": "true"})
    assert response.status_code == 404
