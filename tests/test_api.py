"""HTTP tests for the v1 API: tenant context, envelopes and status codes."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.db.session import get_db
from app.main import app
from app.models.base.enums import TenantStatus

API = "/api/v1"


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def headers(tenant):
    return {"X-Tenant-ID": tenant.id}


@pytest.fixture
def room_id(client, headers):
    building = client.post(f"{API}/buildings", json={"buildingName": "Block A", "buildingCode": "A"}, headers=headers)
    building_id = building.json()["data"]["id"]
    floor = client.post(f"{API}/floors", json={"buildingId": building_id, "floorNumber": 1}, headers=headers)
    room = client.post(
        f"{API}/rooms/building/{building_id}",
        json={"floorId": floor.json()["data"]["id"], "roomNumber": "101", "roomType": "SINGLE", "capacity": 1},
        headers=headers,
    )
    assert room.status_code == 201
    return room.json()["data"]["id"]


def test_health(client):
    response = client.get(f"{API}/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert "allocations" in response.json()["loaded_modules"]


def test_missing_tenant_header_is_rejected(client):
    response = client.get(f"{API}/allocations")

    assert response.status_code == 400
    assert response.json()["errorCode"] == "VALIDATION_ERROR"


def test_unknown_tenant_is_not_found(client):
    response = client.get(f"{API}/allocations", headers={"X-Tenant-ID": "nobody"})

    assert response.status_code == 404
    assert response.json()["errorCode"] == "TENANT_NOT_FOUND"


def test_suspended_tenant_is_forbidden(client, make_tenant):
    suspended = make_tenant("Closed", status=TenantStatus.SUSPENDED)

    response = client.get(f"{API}/buildings", headers={"X-Tenant-ID": suspended.id})

    assert response.status_code == 403
    assert response.json()["success"] is False


def test_allocation_lifecycle(client, headers, room_id, make_student):
    student = make_student()

    created = client.post(f"{API}/allocations", json={"studentId": student.id, "roomId": room_id}, headers=headers)
    assert created.status_code == 201
    body = created.json()
    assert body["success"] is True
    allocation = body["data"]
    assert allocation["studentId"] == student.id
    assert allocation["status"] == "ACTIVE"
    assert allocation["room"]["status"] == "FULL"

    fetched = client.get(f"{API}/allocations/{allocation['id']}", headers=headers)
    assert fetched.json()["data"]["room"]["roomNumber"] == "101"

    listed = client.get(f"{API}/allocations", params={"status": "ACTIVE", "take": 5}, headers=headers)
    assert listed.json()["data"]["pagination"] == {"skip": 0, "take": 5, "total": 1}

    removed = client.delete(f"{API}/allocations/{allocation['id']}", headers=headers)
    assert removed.status_code == 200
    assert removed.json()["data"]["status"] == "CHECKED_OUT"
    assert removed.json()["data"]["checkoutDate"] is not None

    again = client.delete(f"{API}/allocations/{allocation['id']}", headers=headers)
    assert again.status_code == 400
    assert again.json()["errorCode"] == "INVALID_STATE"

    history = client.get(f"{API}/allocations/student/{student.id}/history", headers=headers)
    assert [item["id"] for item in history.json()["data"]] == [allocation["id"]]


def test_full_room_returns_conflict_envelope(client, headers, room_id, make_student):
    client.post(f"{API}/allocations", json={"studentId": make_student().id, "roomId": room_id}, headers=headers)

    response = client.post(f"{API}/allocations", json={"studentId": make_student().id, "roomId": room_id}, headers=headers)

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["errorCode"] == "ROOM_AT_CAPACITY"
    assert body["details"]["capacity"] == 1


def test_missing_room_is_404(client, headers, make_student):
    response = client.post(f"{API}/allocations", json={"studentId": make_student().id, "roomId": "nope"}, headers=headers)

    assert response.status_code == 404
    assert response.json()["errorCode"] == "ROOM_NOT_FOUND"


def test_invalid_body_is_400_with_field_errors(client, headers):
    response = client.post(f"{API}/allocations", json={"roomId": "r1"}, headers=headers)

    assert response.status_code == 400
    body = response.json()
    assert body["errorCode"] == "VALIDATION_ERROR"
    assert "studentId" in body["details"]["field_errors"]


def test_bulk_and_check_endpoints(client, headers, room_id, make_student):
    first, second = make_student(), make_student()

    check = client.post(f"{API}/allocations/check", json={"studentId": first.id, "roomId": room_id}, headers=headers)
    assert check.status_code == 200
    assert check.json()["data"]["eligible"] is True

    bulk = client.post(
        f"{API}/allocations/bulk",
        json={"allocations": [
            {"studentId": first.id, "roomId": room_id},
            {"studentId": second.id, "roomId": room_id},
        ]},
        headers=headers,
    )
    assert bulk.status_code == 201
    assert bulk.json()["data"]["successful"] == 1
    assert bulk.json()["data"]["failed"] == 1


def test_move_with_put(client, headers, room_id, make_student):
    rooms = client.get(f"{API}/rooms", headers=headers).json()["data"]["rooms"]
    building_id, floor_id = rooms[0]["buildingId"], rooms[0]["floorId"]
    target = client.post(
        f"{API}/rooms/building/{building_id}",
        json={"floorId": floor_id, "roomNumber": "102", "capacity": 2},
        headers=headers,
    ).json()["data"]
    allocation = client.post(
        f"{API}/allocations", json={"studentId": make_student().id, "roomId": room_id}, headers=headers
    ).json()["data"]

    moved = client.put(f"{API}/allocations/{allocation['id']}", json={"roomId": target["id"]}, headers=headers)

    assert moved.status_code == 200
    assert moved.json()["data"]["roomId"] == target["id"]
    assert client.get(f"{API}/rooms/{room_id}", headers=headers).json()["data"]["occupied"] == 0
    assert client.get(f"{API}/rooms/{target['id']}", headers=headers).json()["data"]["status"] == "OCCUPIED"


def test_inventory_endpoints(client, headers, room_id):
    buildings = client.get(f"{API}/buildings", headers=headers).json()["data"]
    building_id = buildings["buildings"][0]["id"]
    assert buildings["total"] == 1
    assert buildings["buildings"][0]["totalRooms"] == 1

    stats = client.get(f"{API}/buildings/{building_id}/stats", headers=headers).json()["data"]
    assert stats["totalFloors"] == 1

    floors = client.get(f"{API}/floors/building/{building_id}", headers=headers).json()["data"]
    assert floors[0]["totalRooms"] == 1

    occupancy = client.get(f"{API}/rooms/occupancy", params={"buildingId": building_id}, headers=headers)
    assert occupancy.json()["data"]["totalCapacity"] == 1

    delete = client.delete(f"{API}/buildings/{building_id}", headers=headers)
    assert delete.status_code == 400
    assert delete.json()["errorCode"] == "CONFLICT"


def test_recalculate_endpoint(client, headers, room_id):
    response = client.post(f"{API}/buildings/recalculate", headers=headers)

    assert response.status_code == 200
    assert response.json()["data"] == {"buildings": 1, "floors": 1, "rooms": 1, "roomsCorrected": 0}


def test_response_headers(client):
    response = client.get(f"{API}/health")

    assert "X-Request-ID" in response.headers
    assert "X-Process-Time" in response.headers
