"""Tests for the allocation engine: preconditions, counters and ledger transitions."""

from __future__ import annotations

import pytest

from app.config.settings import settings
from app.core.exceptions import ErrorCode
from app.models import Building, Floor, Room, RoomAllocation
from app.models.base.enums import AllocationStatus, RoomStatus, UserRole
from app.schemas.room.allocation import (
    AllocationCheckRequest,
    AllocationCreate,
    AllocationPair,
    AllocationUpdate,
    BulkAllocationRequest,
)
from tests.conftest import reload


def allocate(service, tenant, student, room, remarks=None):
    return service.create_allocation(
        tenant.id,
        AllocationCreate(student_id=student.id, room_id=room.id, remarks=remarks),
    )


# --- create ---

def test_allocation_updates_room_floor_and_building(db, allocation_service, tenant, make_student, make_room):
    room = make_room("101", capacity=2)
    student = make_student()

    result = allocate(allocation_service, tenant, student, room, remarks="first term")

    assert result.is_success
    data = result.data
    assert data.status == AllocationStatus.ACTIVE
    assert data.remarks == "first term"
    assert data.student.id == student.id
    assert data.room.room_number == "101"
    assert data.room.occupied == 1

    room = reload(db, room)
    assert room.occupied == 1
    assert room.status == RoomStatus.OCCUPIED
    assert db.get(Floor, room.floor_id).occupied_rooms == 1
    assert db.get(Building, room.building_id).occupied_rooms == 1


def test_room_becomes_full_at_capacity(db, allocation_service, tenant, make_student, make_room):
    room = make_room("102", capacity=2)
    for _ in range(2):
        assert allocate(allocation_service, tenant, make_student(), room).is_success

    room = reload(db, room)
    assert room.occupied == 2
    assert room.status == RoomStatus.FULL


def test_room_at_capacity_is_rejected_without_writing(db, allocation_service, tenant, make_student, make_room):
    room = make_room("103", capacity=1)
    assert allocate(allocation_service, tenant, make_student(), room).is_success
    late = make_student()

    result = allocate(allocation_service, tenant, late, room)

    assert not result.is_success
    assert result.error_code == ErrorCode.ROOM_AT_CAPACITY
    assert result.error.status_code == 400
    assert result.error.details["capacity"] == 1
    assert reload(db, room).occupied == 1
    assert db.query(RoomAllocation).filter_by(student_id=late.id).count() == 0


def test_unknown_student_is_not_found(allocation_service, tenant, make_room):
    room = make_room("104")

    result = allocation_service.create_allocation(
        tenant.id, AllocationCreate(student_id="missing", room_id=room.id)
    )

    assert result.error_code == ErrorCode.STUDENT_NOT_FOUND
    assert result.error.status_code == 404


def test_non_student_user_cannot_be_allocated(allocation_service, tenant, make_student, make_room):
    warden = make_student(role=UserRole.WARDEN)

    result = allocate(allocation_service, tenant, warden, make_room("105"))

    assert result.error_code == ErrorCode.STUDENT_NOT_FOUND


def test_student_with_active_allocation_is_rejected(allocation_service, tenant, make_student, make_room):
    student = make_student()
    first = allocate(allocation_service, tenant, student, make_room("106")).data

    result = allocate(allocation_service, tenant, student, make_room("107"))

    assert result.error_code == ErrorCode.STUDENT_ALREADY_ALLOCATED
    assert result.error.details["allocation_id"] == first.id


def test_student_check_runs_before_room_check(allocation_service, tenant, make_student, make_room):
    student = make_student()
    allocate(allocation_service, tenant, student, make_room("108"))

    result = allocation_service.create_allocation(
        tenant.id, AllocationCreate(student_id=student.id, room_id="missing")
    )

    assert result.error_code == ErrorCode.STUDENT_ALREADY_ALLOCATED


@pytest.mark.parametrize("blocked", [RoomStatus.MAINTENANCE, RoomStatus.INACTIVE])
def test_blocked_room_is_unavailable(db, allocation_service, tenant, make_student, make_room, blocked):
    room = make_room("109")
    room.status = blocked
    db.commit()

    result = allocate(allocation_service, tenant, make_student(), room)

    assert result.error_code == ErrorCode.ROOM_UNAVAILABLE
    assert blocked.value.lower() in result.message


def test_reserved_room_accepts_first_allocation(db, allocation_service, tenant, make_student, make_room):
    room = make_room("110")
    room.status = RoomStatus.RESERVED
    db.commit()

    assert allocate(allocation_service, tenant, make_student(), room).is_success
    assert reload(db, room).status == RoomStatus.OCCUPIED


def test_rooms_of_other_tenants_are_invisible(allocation_service, make_tenant, make_student, make_room):
    room = make_room("111")
    other = make_tenant("South Campus")
    outsider = make_student(tenant_id=other.id)

    result = allocation_service.create_allocation(
        other.id, AllocationCreate(student_id=outsider.id, room_id=room.id)
    )

    assert result.error_code == ErrorCode.ROOM_NOT_FOUND


def test_database_index_rejects_second_active_allocation(db, allocation_service, tenant, make_student, make_room):
    student = make_student()
    allocate(allocation_service, tenant, student, make_room("112"))
    second_room = make_room("113")
    # Skip the service check so only the partial unique index stands in the way
    allocation_service._require_no_active_allocation = lambda *args, **kwargs: None

    result = allocate(allocation_service, tenant, student, second_room)

    assert result.error_code == ErrorCode.STUDENT_ALREADY_ALLOCATED
    assert reload(db, second_room).occupied == 0


# --- deallocate ---

def test_deallocation_checks_out_and_frees_place(db, allocation_service, tenant, make_student, make_room):
    room = make_room("201", capacity=1)
    allocation = allocate(allocation_service, tenant, make_student(), room).data

    result = allocation_service.deallocate_student(tenant.id, allocation.id)

    assert result.is_success
    assert result.data.status == AllocationStatus.CHECKED_OUT
    assert result.data.checkout_date is not None
    room = reload(db, room)
    assert room.occupied == 0
    assert room.status == RoomStatus.AVAILABLE
    assert db.get(Building, room.building_id).occupied_rooms == 0


def test_deallocation_from_full_room_leaves_it_occupied(db, allocation_service, tenant, make_student, make_room):
    room = make_room("204", capacity=2)
    first = allocate(allocation_service, tenant, make_student(), room).data
    allocate(allocation_service, tenant, make_student(), room)
    assert reload(db, room).status == RoomStatus.FULL

    result = allocation_service.deallocate_student(tenant.id, first.id)

    assert result.is_success
    room = reload(db, room)
    assert room.occupied == 1
    assert room.status == RoomStatus.OCCUPIED


def test_double_checkout_is_invalid_state(allocation_service, tenant, make_student, make_room):
    allocation = allocate(allocation_service, tenant, make_student(), make_room("202")).data
    allocation_service.deallocate_student(tenant.id, allocation.id)

    result = allocation_service.deallocate_student(tenant.id, allocation.id)

    assert result.error_code == ErrorCode.INVALID_STATE
    assert result.error.status_code == 400


def test_deallocating_unknown_allocation_is_not_found(allocation_service, tenant):
    result = allocation_service.deallocate_student(tenant.id, "missing")

    assert result.error_code == ErrorCode.ALLOCATION_NOT_FOUND


def test_maintenance_status_survives_deallocation(db, allocation_service, tenant, make_student, make_room):
    room = make_room("203", capacity=2)
    allocation = allocate(allocation_service, tenant, make_student(), room).data
    room = reload(db, room)
    room.status = RoomStatus.MAINTENANCE
    db.commit()

    allocation_service.deallocate_student(tenant.id, allocation.id)

    room = reload(db, room)
    assert room.occupied == 0
    assert room.status == RoomStatus.MAINTENANCE


# --- update ---

def test_move_transfers_the_place(db, allocation_service, tenant, make_student, make_room):
    source = make_room("301", capacity=1)
    target = make_room("302", capacity=2)
    allocation = allocate(allocation_service, tenant, make_student(), source).data

    result = allocation_service.update_allocation(
        tenant.id, allocation.id, AllocationUpdate(room_id=target.id)
    )

    assert result.is_success
    assert result.data.room_id == target.id
    assert result.data.room.room_number == "302"
    assert reload(db, source).occupied == 0
    assert reload(db, source).status == RoomStatus.AVAILABLE
    assert reload(db, target).occupied == 1


def test_move_into_full_room_changes_nothing(db, allocation_service, tenant, make_student, make_room):
    source = make_room("303", capacity=1)
    target = make_room("304", capacity=1)
    allocation = allocate(allocation_service, tenant, make_student(), source).data
    allocate(allocation_service, tenant, make_student(), target)

    result = allocation_service.update_allocation(
        tenant.id, allocation.id, AllocationUpdate(room_id=target.id)
    )

    assert result.error_code == ErrorCode.ROOM_AT_CAPACITY
    assert reload(db, source).occupied == 1
    assert reload(db, target).occupied == 1
    assert db.get(RoomAllocation, allocation.id).room_id == source.id


def test_move_of_checked_out_allocation_is_rejected(allocation_service, tenant, make_student, make_room):
    allocation = allocate(allocation_service, tenant, make_student(), make_room("305")).data
    allocation_service.deallocate_student(tenant.id, allocation.id)

    result = allocation_service.update_allocation(
        tenant.id, allocation.id, AllocationUpdate(room_id=make_room("306").id)
    )

    assert result.error_code == ErrorCode.INVALID_STATE


def test_move_and_checkout_together_is_invalid(allocation_service, tenant, make_student, make_room):
    allocation = allocate(allocation_service, tenant, make_student(), make_room("307")).data

    result = allocation_service.update_allocation(
        tenant.id,
        allocation.id,
        AllocationUpdate(room_id=make_room("308").id, status=AllocationStatus.CHECKED_OUT),
    )

    assert result.error_code == ErrorCode.VALIDATION_ERROR


def test_checkout_naming_the_current_room_is_not_a_move(db, allocation_service, tenant, make_student, make_room):
    room = make_room("314")
    allocation = allocate(allocation_service, tenant, make_student(), room).data

    result = allocation_service.update_allocation(
        tenant.id,
        allocation.id,
        AllocationUpdate(room_id=room.id, status=AllocationStatus.CHECKED_OUT),
    )

    assert result.is_success
    assert result.data.status == AllocationStatus.CHECKED_OUT
    assert result.data.room_id == room.id
    assert reload(db, room).occupied == 0


def test_checkout_through_update(db, allocation_service, tenant, make_student, make_room):
    room = make_room("309")
    allocation = allocate(allocation_service, tenant, make_student(), room).data

    result = allocation_service.update_allocation(
        tenant.id, allocation.id, AllocationUpdate(status=AllocationStatus.CHECKED_OUT, remarks="left early")
    )

    assert result.data.status == AllocationStatus.CHECKED_OUT
    assert result.data.remarks == "left early"
    assert reload(db, room).occupied == 0


def test_reactivation_takes_a_place_again(db, allocation_service, tenant, make_student, make_room):
    room = make_room("310", capacity=1)
    allocation = allocate(allocation_service, tenant, make_student(), room).data
    allocation_service.deallocate_student(tenant.id, allocation.id)

    result = allocation_service.update_allocation(
        tenant.id, allocation.id, AllocationUpdate(status=AllocationStatus.ACTIVE)
    )

    assert result.data.status == AllocationStatus.ACTIVE
    assert result.data.checkout_date is None
    assert reload(db, room).status == RoomStatus.FULL


def test_reactivation_rejected_while_student_holds_another_room(allocation_service, tenant, make_student, make_room):
    student = make_student()
    old = allocate(allocation_service, tenant, student, make_room("311")).data
    allocation_service.deallocate_student(tenant.id, old.id)
    allocate(allocation_service, tenant, student, make_room("312"))

    result = allocation_service.update_allocation(
        tenant.id, old.id, AllocationUpdate(status=AllocationStatus.ACTIVE)
    )

    assert result.error_code == ErrorCode.STUDENT_ALREADY_ALLOCATED


def test_remarks_only_update_leaves_counters(db, allocation_service, tenant, make_student, make_room):
    room = make_room("313")
    allocation = allocate(allocation_service, tenant, make_student(), room).data

    result = allocation_service.update_allocation(
        tenant.id, allocation.id, AllocationUpdate(remarks="quiet floor")
    )

    assert result.data.remarks == "quiet floor"
    assert result.data.status == AllocationStatus.ACTIVE
    assert reload(db, room).occupied == 1


# --- bulk ---

def test_bulk_allocation_reports_partial_success(db, allocation_service, tenant, make_student, make_room):
    room = make_room("401", capacity=2)
    students = [make_student() for _ in range(3)]

    result = allocation_service.bulk_allocate(
        tenant.id,
        BulkAllocationRequest(
            allocations=[AllocationPair(student_id=s.id, room_id=room.id) for s in students],
            remarks="intake",
        ),
    )

    summary = result.data
    assert summary.successful == 2
    assert summary.failed == 1
    assert summary.errors[0].student_id == students[2].id
    assert "full capacity" in summary.errors[0].error
    assert all(item.remarks == "intake" for item in summary.results)
    assert reload(db, room).occupied == 2


def test_bulk_allocation_continues_after_a_failed_pair(db, allocation_service, tenant, make_student, make_room):
    open_room = make_room("402", capacity=2)
    full_room = make_room("403", capacity=1)
    allocate(allocation_service, tenant, make_student(), full_room)
    first, second, third = make_student(), make_student(), make_student()

    result = allocation_service.bulk_allocate(
        tenant.id,
        BulkAllocationRequest(allocations=[
            AllocationPair(student_id=first.id, room_id=open_room.id),
            AllocationPair(student_id=second.id, room_id=full_room.id),
            AllocationPair(student_id=third.id, room_id=open_room.id),
        ]),
    )

    summary = result.data
    assert summary.successful == 2
    assert summary.failed == 1
    assert len(summary.errors) == 1
    error = summary.errors[0]
    assert (error.student_id, error.room_id) == (second.id, full_room.id)
    assert "full capacity" in error.error
    assert [item.student_id for item in summary.results] == [first.id, third.id]
    assert db.query(RoomAllocation).filter_by(student_id=third.id, room_id=open_room.id).one().status == AllocationStatus.ACTIVE
    assert reload(db, open_room).occupied == 2
    assert reload(db, full_room).occupied == 1


def test_bulk_allocation_requires_pairs(allocation_service, tenant):
    result = allocation_service.bulk_allocate(tenant.id, BulkAllocationRequest(allocations=[]))

    assert result.error_code == ErrorCode.VALIDATION_ERROR


def test_bulk_allocation_limit(allocation_service, tenant, monkeypatch):
    monkeypatch.setattr(settings, "BULK_ALLOCATION_LIMIT", 2)
    pairs = [AllocationPair(student_id=f"s{i}", room_id="r") for i in range(3)]

    result = allocation_service.bulk_allocate(tenant.id, BulkAllocationRequest(allocations=pairs))

    assert result.error_code == ErrorCode.VALIDATION_ERROR


# --- queries ---

def test_history_is_newest_first_with_durations(db, allocation_service, tenant, make_student, make_room):
    student = make_student()
    first = allocate(allocation_service, tenant, student, make_room("501")).data
    allocation_service.deallocate_student(tenant.id, first.id)
    second = allocate(allocation_service, tenant, student, make_room("502")).data

    history = allocation_service.get_student_allocation_history(tenant.id, student.id).data

    assert [item.id for item in history] == [second.id, first.id]
    assert history[0].duration_days is None
    assert history[1].duration_days == 0
    assert history[1].floor == 1
    assert history[1].room_number == "501"


def test_history_of_unknown_student(allocation_service, tenant):
    result = allocation_service.get_student_allocation_history(tenant.id, "missing")

    assert result.error_code == ErrorCode.STUDENT_NOT_FOUND


def test_list_allocations_filters_and_paginates(allocation_service, tenant, make_student, make_room):
    room = make_room("601", capacity=3)
    created = [allocate(allocation_service, tenant, make_student(), room).data for _ in range(3)]
    allocation_service.deallocate_student(tenant.id, created[0].id)

    active = allocation_service.list_allocations(tenant.id, status=AllocationStatus.ACTIVE).data
    page = allocation_service.list_allocations(tenant.id, room_id=room.id, skip=1, take=1).data

    assert active.pagination.total == 2
    assert {a.id for a in active.allocations} == {created[1].id, created[2].id}
    assert page.pagination.total == 3
    assert len(page.allocations) == 1


def test_get_allocation_in_other_tenant_is_not_found(allocation_service, tenant, make_tenant, make_student, make_room):
    allocation = allocate(allocation_service, tenant, make_student(), make_room("602")).data

    result = allocation_service.get_allocation(make_tenant("Elsewhere").id, allocation.id)

    assert result.error_code == ErrorCode.ALLOCATION_NOT_FOUND


def test_eligibility_check_does_not_write(db, allocation_service, tenant, make_student, make_room):
    room = make_room("701", capacity=2)
    student = make_student()

    result = allocation_service.check_allocation_conflicts(
        tenant.id, AllocationCheckRequest(student_id=student.id, room_id=room.id)
    )

    assert result.data.eligible is True
    assert result.data.available_places == 2
    assert db.query(RoomAllocation).count() == 0


def test_eligibility_check_reports_first_failure(allocation_service, tenant, make_student, make_room):
    room = make_room("702", capacity=1)
    allocate(allocation_service, tenant, make_student(), room)

    result = allocation_service.check_allocation_conflicts(
        tenant.id, AllocationCheckRequest(student_id=make_student().id, room_id=room.id)
    )

    assert result.error_code == ErrorCode.ROOM_AT_CAPACITY
