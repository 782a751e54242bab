"""Tests for building, floor and room management."""

from __future__ import annotations

from sqlalchemy.exc import OperationalError

from app.core.exceptions import ErrorCode
from app.models import Building, Floor, RoomAllocation
from app.models.base.enums import RoomStatus, RoomType
from app.schemas.hostel.building import BuildingCreate, BuildingUpdate
from app.schemas.hostel.floor import FloorCreate, FloorUpdate
from app.schemas.room.allocation import AllocationCreate
from app.schemas.room.room_base import BulkRoomCreate, RoomCreate, RoomUpdate
from tests.conftest import reload


# --- buildings ---

def test_building_counters_start_at_zero(building):
    assert (building.total_floors, building.total_rooms, building.occupied_rooms) == (0, 0, 0)


def test_duplicate_building_code_conflicts(building_service, tenant, building):
    result = building_service.create_building(
        tenant.id, BuildingCreate(building_name="Annex", building_code="BLK-A")
    )

    assert result.error_code == ErrorCode.DUPLICATE_ENTRY
    assert result.error.status_code == 400


def test_same_code_allowed_in_another_tenant(building_service, make_tenant, building):
    other = make_tenant("South Campus")

    result = building_service.create_building(
        other.id, BuildingCreate(building_name="Block A", building_code="BLK-A")
    )

    assert result.is_success


def test_list_buildings_newest_first(building_service, tenant, building):
    building_service.create_building(tenant.id, BuildingCreate(building_name="Block B", building_code="BLK-B"))

    listing = building_service.list_buildings(tenant.id, skip=0, take=10).data

    assert listing.total == 2
    assert [b.building_code for b in listing.buildings] == ["BLK-B", "BLK-A"]


def test_update_building_ignores_counters(building_service, tenant, building):
    result = building_service.update_building(
        tenant.id,
        building.id,
        BuildingUpdate.model_validate({"buildingName": "Block A East", "totalRooms": 99}),
    )

    assert result.data.building_name == "Block A East"
    assert result.data.total_rooms == 0


def test_update_building_to_taken_code_conflicts(building_service, tenant, building):
    other = building_service.create_building(
        tenant.id, BuildingCreate(building_name="Block B", building_code="BLK-B")
    ).data

    result = building_service.update_building(tenant.id, other.id, BuildingUpdate(building_code="BLK-A"))

    assert result.error_code == ErrorCode.DUPLICATE_ENTRY


def test_building_with_floors_cannot_be_deleted(db, building_service, tenant, building, floor):
    result = building_service.delete_building(tenant.id, building.id)

    assert result.error_code == ErrorCode.CONFLICT
    assert result.error.details["floors"] == 1
    assert db.get(Building, building.id) is not None


def test_empty_building_is_deleted(db, building_service, tenant, building):
    assert building_service.delete_building(tenant.id, building.id).is_success
    db.expire_all()
    assert db.get(Building, building.id) is None


def test_building_stats(building_service, allocation_service, tenant, building, make_student, make_room):
    room = make_room("101", capacity=1)
    make_room("102", capacity=1)
    allocation_service.create_allocation(tenant.id, AllocationCreate(student_id=make_student().id, room_id=room.id))

    stats = building_service.get_building_stats(tenant.id, building.id).data

    assert stats.total_rooms == 2
    assert stats.occupied_rooms == 1
    assert stats.available_rooms == 1
    assert stats.occupancy_rate == 50.0
    assert stats.actual_floors == 1


def test_building_of_other_tenant_is_not_found(building_service, make_tenant, building):
    result = building_service.get_building(make_tenant("Elsewhere").id, building.id)

    assert result.error_code == ErrorCode.BUILDING_NOT_FOUND


def test_database_failure_is_reported_as_database_error(building_service, tenant, building, monkeypatch):
    def broken(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(building_service.repository, "find_in_tenant", broken)

    result = building_service.get_building(tenant.id, building.id)

    assert result.error_code == ErrorCode.DATABASE_ERROR
    assert result.error.status_code == 500
    assert result.error.details == {"operation": "get building"}


# --- floors ---

def test_floor_gets_default_name_and_building_total(db, tenant, building, floor):
    assert floor.floor_name == "Floor 1"
    assert reload(db, building).total_floors == 1


def test_duplicate_floor_number_conflicts(floor_service, tenant, building, floor):
    result = floor_service.create_floor(tenant.id, FloorCreate(building_id=building.id, floor_number=1))

    assert result.error_code == ErrorCode.DUPLICATE_ENTRY


def test_floor_in_unknown_building(floor_service, tenant):
    result = floor_service.create_floor(tenant.id, FloorCreate(building_id="missing", floor_number=0))

    assert result.error_code == ErrorCode.BUILDING_NOT_FOUND


def test_floors_listed_by_number(floor_service, tenant, building):
    for number in (3, 0, 2):
        floor_service.create_floor(tenant.id, FloorCreate(building_id=building.id, floor_number=number))

    floors = floor_service.list_floors(tenant.id, building.id).data

    assert [f.floor_number for f in floors] == [0, 2, 3]


def test_update_floor_name(floor_service, tenant, floor):
    result = floor_service.update_floor(tenant.id, floor.id, FloorUpdate(floor_name="First"))

    assert result.data.floor_name == "First"
    assert result.data.floor_number == 1


def test_floor_with_rooms_cannot_be_deleted(floor_service, tenant, floor, make_room):
    make_room("101")

    result = floor_service.delete_floor(tenant.id, floor.id)

    assert result.error_code == ErrorCode.CONFLICT


def test_deleting_floor_updates_building(db, floor_service, tenant, building, floor):
    assert floor_service.delete_floor(tenant.id, floor.id).is_success

    db.expire_all()
    assert db.get(Floor, floor.id) is None
    assert db.get(Building, building.id).total_floors == 0


def test_floor_stats(floor_service, tenant, floor, make_room):
    make_room("101")

    stats = floor_service.get_floor_stats(tenant.id, floor.id).data

    assert stats.building_name == "Block A"
    assert stats.total_rooms == 1
    assert stats.occupancy_rate == 0.0


# --- rooms ---

def test_new_room_is_available_and_empty(make_room):
    room = make_room("101", capacity=2)

    assert room.occupied == 0
    assert room.status == RoomStatus.AVAILABLE
    assert room.room_name == "Room 101"


def test_duplicate_room_number_on_floor_conflicts(room_service, tenant, building, floor, make_room):
    make_room("101")

    result = room_service.create_room(
        tenant.id, building.id, RoomCreate(floor_id=floor.id, room_number="101", capacity=1)
    )

    assert result.error_code == ErrorCode.DUPLICATE_ENTRY


def test_room_floor_must_belong_to_building(room_service, building_service, tenant, floor):
    other = building_service.create_building(
        tenant.id, BuildingCreate(building_name="Block B", building_code="BLK-B")
    ).data

    result = room_service.create_room(
        tenant.id, other.id, RoomCreate(floor_id=floor.id, room_number="101", capacity=1)
    )

    assert result.error_code == ErrorCode.FLOOR_NOT_FOUND


def test_bulk_create_skips_existing_numbers(db, room_service, tenant, building, floor, make_room):
    make_room("102")

    result = room_service.bulk_create_rooms(
        tenant.id,
        building.id,
        BulkRoomCreate(
            floor_id=floor.id,
            start_room_number=101,
            end_room_number=104,
            room_type=RoomType.SINGLE,
            capacity=1,
        ),
    )

    assert result.data.created_count == 3
    assert result.data.error_count == 1
    assert result.data.errors == ["Room 102 already exists"]
    assert reload(db, floor).total_rooms == 4


def test_list_rooms_with_filters(room_service, tenant, make_room):
    make_room("101", room_type=RoomType.SINGLE, capacity=1)
    make_room("102", room_type=RoomType.DOUBLE)
    make_room("201", room_type=RoomType.DOUBLE)

    doubles = room_service.list_rooms(tenant.id, room_type=RoomType.DOUBLE).data
    searched = room_service.list_rooms(tenant.id, search="10").data
    paged = room_service.list_rooms(tenant.id, skip=2, take=2).data

    assert doubles.total == 2
    assert {r.room_number for r in searched.rooms} == {"101", "102"}
    assert paged.total == 3
    assert paged.page == 2
    assert paged.total_pages == 2
    assert len(paged.rooms) == 1


def test_rooms_by_floor(room_service, tenant, floor, make_room):
    make_room("101")

    rooms = room_service.get_rooms_by_floor(tenant.id, floor.id).data

    assert [r.room_number for r in rooms] == ["101"]
    assert room_service.get_rooms_by_floor(tenant.id, "missing").error_code == ErrorCode.FLOOR_NOT_FOUND


def test_capacity_cannot_drop_below_occupancy(room_service, allocation_service, tenant, make_student, make_room):
    room = make_room("101", capacity=3)
    for _ in range(2):
        allocation_service.create_allocation(tenant.id, AllocationCreate(student_id=make_student().id, room_id=room.id))

    result = room_service.update_room(tenant.id, room.id, RoomUpdate(capacity=1))

    assert result.error_code == ErrorCode.CONFLICT


def test_capacity_change_rederives_status(room_service, allocation_service, tenant, make_student, make_room):
    room = make_room("101", capacity=3)
    for _ in range(2):
        allocation_service.create_allocation(tenant.id, AllocationCreate(student_id=make_student().id, room_id=room.id))

    result = room_service.update_room(tenant.id, room.id, RoomUpdate(capacity=2))

    assert result.data.capacity == 2
    assert result.data.status == RoomStatus.FULL


def test_derived_status_cannot_be_set(room_service, tenant, make_room):
    room = make_room("101")

    result = room_service.update_room(tenant.id, room.id, RoomUpdate(status=RoomStatus.FULL))

    assert result.error_code == ErrorCode.VALIDATION_ERROR


def test_available_clears_maintenance_override(room_service, allocation_service, tenant, make_student, make_room):
    room = make_room("101", capacity=2)
    allocation_service.create_allocation(tenant.id, AllocationCreate(student_id=make_student().id, room_id=room.id))

    blocked = room_service.update_room(tenant.id, room.id, RoomUpdate(status=RoomStatus.MAINTENANCE)).data
    cleared = room_service.update_room(tenant.id, room.id, RoomUpdate(status=RoomStatus.AVAILABLE)).data

    assert blocked.status == RoomStatus.MAINTENANCE
    assert blocked.occupied == 1
    assert cleared.status == RoomStatus.OCCUPIED


def test_only_empty_room_can_be_reserved(room_service, allocation_service, tenant, make_student, make_room):
    empty = make_room("101")
    taken = make_room("102")
    allocation_service.create_allocation(tenant.id, AllocationCreate(student_id=make_student().id, room_id=taken.id))

    reserved = room_service.update_room(tenant.id, empty.id, RoomUpdate(status=RoomStatus.RESERVED))
    refused = room_service.update_room(tenant.id, taken.id, RoomUpdate(status=RoomStatus.RESERVED))

    assert reserved.data.status == RoomStatus.RESERVED
    assert refused.error_code == ErrorCode.CONFLICT


def test_occupied_is_not_writable(room_service, tenant, make_room):
    room = make_room("101")

    result = room_service.update_room(tenant.id, room.id, RoomUpdate.model_validate({"occupied": 2}))

    assert result.data.occupied == 0


def test_room_with_active_allocation_cannot_be_deleted(room_service, allocation_service, tenant, make_student, make_room):
    room = make_room("101")
    allocation_service.create_allocation(tenant.id, AllocationCreate(student_id=make_student().id, room_id=room.id))

    result = room_service.delete_room(tenant.id, room.id)

    assert result.error_code == ErrorCode.CONFLICT
    assert result.error.details["active_allocations"] == 1


def test_deleting_room_removes_history_and_updates_totals(db, room_service, allocation_service, tenant, building, floor, make_student, make_room):
    room = make_room("101")
    make_room("102")
    allocation = allocation_service.create_allocation(
        tenant.id, AllocationCreate(student_id=make_student().id, room_id=room.id)
    ).data
    allocation_service.deallocate_student(tenant.id, allocation.id)

    assert room_service.delete_room(tenant.id, room.id).is_success

    db.expire_all()
    assert db.get(RoomAllocation, allocation.id) is None
    assert db.get(Floor, floor.id).total_rooms == 1
    assert db.get(Building, building.id).total_rooms == 1


def test_room_stats(room_service, allocation_service, tenant, make_student, make_room):
    room = make_room("101", capacity=4)
    allocation_service.create_allocation(tenant.id, AllocationCreate(student_id=make_student().id, room_id=room.id))

    stats = room_service.get_room_stats(tenant.id, room.id).data

    assert stats.available == 3
    assert stats.occupancy_rate == 25.0
    assert stats.is_full is False
    assert stats.has_availability is True


def test_room_occupancy_summary(room_service, allocation_service, tenant, make_student, make_room):
    single = make_room("101", room_type=RoomType.SINGLE, capacity=1)
    make_room("102", room_type=RoomType.DOUBLE, capacity=2)
    allocation_service.create_allocation(tenant.id, AllocationCreate(student_id=make_student().id, room_id=single.id))

    summary = room_service.get_room_occupancy(tenant.id).data

    assert summary.total_rooms == 2
    assert summary.total_capacity == 3
    assert summary.total_occupied == 1
    assert summary.by_status == {"FULL": 1, "AVAILABLE": 1}
    assert summary.by_type["SINGLE"].occupied == 1
    assert summary.by_floor["1"].capacity == 3
