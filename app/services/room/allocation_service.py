# app/services/room/allocation_service.py
"""
Room allocation engine.

Creates, moves, checks out and reactivates allocations while keeping the
room occupancy counters equal to the ACTIVE rows of the ledger.

Every write follows the same sequence:
1. hold the in-process locks of the rooms and the student involved
2. inside one transaction, load the rooms ``FOR UPDATE`` and count the
   ledger afresh
3. write the ledger row and recompute the counters of every touched room
4. commit, or roll everything back on the first error
"""

from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from app.config.settings import settings
from app.core.exceptions import (
    AllocationNotFoundError,
    InvalidStateError,
    RoomCapacityExceededError,
    RoomNotFoundError,
    RoomUnavailableError,
    StudentAlreadyAllocatedError,
    StudentNotFoundError,
    ValidationError,
)
from app.core.locks import KeyedLockRegistry, allocation_locks, room_key, student_key
from app.models.base.enums import AllocationStatus, RoomStatus
from app.models.room import Room, RoomAllocation
from app.models.user import User
from app.repositories.room import RoomAllocationRepository, RoomRepository
from app.repositories.user import UserRepository
from app.schemas.common.response import PaginationMeta
from app.schemas.room.allocation import (
    AllocatedRoomSummary,
    AllocationCheckRequest,
    AllocationCreate,
    AllocationEligibility,
    AllocationHistoryItem,
    AllocationListResponse,
    AllocationResponse,
    AllocationUpdate,
    BulkAllocationError,
    BulkAllocationRequest,
    BulkAllocationResult,
    StudentSummary,
)
from app.services.base import BaseService, ServiceResult
from app.services.hostel.constants import (
    ERROR_ALLOCATION_CHECKED_OUT,
    ERROR_MOVE_CHECKED_OUT,
    SUCCESS_ALLOCATION_CREATED,
    SUCCESS_ALLOCATION_UPDATED,
    SUCCESS_STUDENT_DEALLOCATED,
)
from app.services.hostel.structure_counter_service import StructureCounterService
from app.utils.datetime_utils import DateTimeHelper, utcnow
from app.utils.pagination_utils import PaginationParams

# Attempts to lock an allocation whose room moves between read and lock
_MAX_LOCK_ATTEMPTS = 3


class AllocationService(BaseService[RoomAllocationRepository]):
    """
    Student-to-room allocation use-cases.

    Features:
    - Single and bulk allocation with ordered precondition checks
    - Moves between rooms, checkout and reactivation
    - Allocation history and eligibility checks
    """

    def __init__(
        self,
        repository: RoomAllocationRepository,
        db_session: Session,
        locks: KeyedLockRegistry = allocation_locks,
    ):
        super().__init__(repository, db_session)
        self.user_repository = UserRepository(db_session)
        self.room_repository = RoomRepository(db_session)
        self.counters = StructureCounterService(db_session, locks)
        self._locks = locks

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def _require_student(self, tenant_id: str, student_id: str) -> User:
        student = self.user_repository.find_student(tenant_id, student_id)
        if student is None:
            raise StudentNotFoundError(student_id)
        return student

    def _require_no_active_allocation(
        self,
        tenant_id: str,
        student_id: str,
        ignore_id: Optional[str] = None,
    ) -> None:
        active = self.repository.find_active_for_student(tenant_id, student_id)
        if active is not None and active.id != ignore_id:
            raise StudentAlreadyAllocatedError(student_id, active.id)

    def _require_room(self, tenant_id: str, room_id: str, for_update: bool = True) -> Room:
        if for_update:
            room = self.room_repository.find_in_tenant_for_update(tenant_id, room_id)
        else:
            room = self.room_repository.find_in_tenant(tenant_id, room_id)
        if room is None:
            raise RoomNotFoundError(room_id)
        return room

    def _require_open_place(self, room: Room) -> int:
        """
        Ensure the room accepts one more student.

        Returns:
            Number of free places counted from the ledger
        """
        if room.status in RoomStatus.blocked():
            raise RoomUnavailableError(room.room_number, room.id, room.status.value.lower())

        active_count = self.repository.count_active_for_room(room.id)
        if active_count >= room.capacity:
            raise RoomCapacityExceededError(room.room_number, room.id, active_count, room.capacity)
        return room.capacity - active_count

    def _validate_new_allocation(
        self,
        tenant_id: str,
        student_id: str,
        room_id: str,
        for_update: bool = True,
    ) -> Tuple[User, Room, int]:
        """Run the allocation preconditions in order; the first failure raises."""
        student = self._require_student(tenant_id, student_id)
        self._require_no_active_allocation(tenant_id, student_id)
        room = self._require_room(tenant_id, room_id, for_update=for_update)
        free_places = self._require_open_place(room)
        return student, room, free_places

    # -------------------------------------------------------------------------
    # Create
    # -------------------------------------------------------------------------

    def create_allocation(
        self,
        tenant_id: str,
        request: AllocationCreate,
    ) -> ServiceResult[AllocationResponse]:
        """
        Allocate a student to a room.

        Args:
            tenant_id: Owning tenant
            request: Student, room and optional remarks

        Returns:
            ServiceResult containing AllocationResponse or error
        """
        context = {
            "tenant_id": tenant_id,
            "student_id": request.student_id,
            "room_id": request.room_id,
        }
        try:
            self._logger.info(
                f"Allocating student {request.student_id} to room {request.room_id}",
                extra=context,
            )

            with self._locks.hold(room_key(request.room_id), student_key(request.student_id)):
                with self.transaction():
                    _, room, _ = self._validate_new_allocation(
                        tenant_id, request.student_id, request.room_id
                    )
                    allocation = self.repository.create({
                        "tenant_id": tenant_id,
                        "student_id": request.student_id,
                        "room_id": room.id,
                        "status": AllocationStatus.ACTIVE,
                        "allocated_date": utcnow(),
                        "remarks": request.remarks,
                    })
                    self.counters.refresh_occupancy(room)

            self._logger.info(
                f"Allocated student {request.student_id} to room {room.room_number} "
                f"({room.occupied}/{room.capacity})",
                extra={**context, "allocation_id": allocation.id},
            )
            return ServiceResult.success(
                self._to_response(allocation),
                message=SUCCESS_ALLOCATION_CREATED,
            )

        except Exception as e:
            return self._handle_exception(e, "allocate student", request.student_id, context)

    # -------------------------------------------------------------------------
    # Update / deallocate
    # -------------------------------------------------------------------------

    def update_allocation(
        self,
        tenant_id: str,
        allocation_id: str,
        request: AllocationUpdate,
    ) -> ServiceResult[AllocationResponse]:
        """
        Move, check out, reactivate or annotate an allocation.

        Args:
            tenant_id: Owning tenant
            allocation_id: Allocation to change
            request: Fields to change; unset fields are left alone

        Returns:
            ServiceResult containing the updated AllocationResponse or error
        """
        changes = request.model_dump(exclude_unset=True)
        context = {"tenant_id": tenant_id, "allocation_id": allocation_id}
        try:
            self._logger.info(
                f"Updating allocation {allocation_id}",
                extra={**context, "changes": sorted(changes)},
            )

            def apply(allocation: RoomAllocation) -> None:
                self._apply_update(tenant_id, allocation, changes)

            allocation = self._locked_write(tenant_id, allocation_id, changes.get("room_id"), apply)
            return ServiceResult.success(
                self._to_response(allocation),
                message=SUCCESS_ALLOCATION_UPDATED,
            )

        except Exception as e:
            return self._handle_exception(e, "update allocation", allocation_id, context)

    def deallocate_student(
        self,
        tenant_id: str,
        allocation_id: str,
    ) -> ServiceResult[AllocationResponse]:
        """
        Check a student out of their room.

        The ledger row is kept with status CHECKED_OUT; the room frees one
        place.
        """
        context = {"tenant_id": tenant_id, "allocation_id": allocation_id}
        try:
            self._logger.info(f"Deallocating allocation {allocation_id}", extra=context)

            def apply(allocation: RoomAllocation) -> None:
                if allocation.status == AllocationStatus.CHECKED_OUT:
                    raise InvalidStateError(
                        ERROR_ALLOCATION_CHECKED_OUT,
                        {"allocation_id": allocation.id},
                    )
                self._check_out(allocation)

            allocation = self._locked_write(tenant_id, allocation_id, None, apply)
            self._logger.info(
                f"Deallocated student {allocation.student_id} from room {allocation.room_id}",
                extra={**context, "student_id": allocation.student_id, "room_id": allocation.room_id},
            )
            return ServiceResult.success(
                self._to_response(allocation),
                message=SUCCESS_STUDENT_DEALLOCATED,
            )

        except Exception as e:
            return self._handle_exception(e, "deallocate student", allocation_id, context)

    def _locked_write(self, tenant_id: str, allocation_id: str, new_room_id: Optional[str], apply) -> RoomAllocation:
        """
        Run ``apply`` on an allocation while holding the locks it needs.

        The allocation's current room is only known after reading it, so the
        row is read, the locks for its room, the destination room and the
        student are taken, and the row is read again. If the room changed in
        between, the locks are released and the sequence starts over.
        """
        for _ in range(_MAX_LOCK_ATTEMPTS):
            snapshot = self.repository.find_in_tenant(tenant_id, allocation_id)
            if snapshot is None:
                raise AllocationNotFoundError(allocation_id)
            locked_room_id = snapshot.room_id
            student_id = snapshot.student_id
            # End the read transaction before waiting on the locks
            self.db.rollback()

            with self._locks.hold(room_key(locked_room_id), room_key(new_room_id), student_key(student_id)):
                with self.transaction():
                    allocation = self.repository.find_in_tenant_for_update(tenant_id, allocation_id)
                    if allocation is None:
                        raise AllocationNotFoundError(allocation_id)
                    if allocation.room_id != locked_room_id:
                        continue
                    apply(allocation)
                return allocation

        raise InvalidStateError(
            "Allocation is being modified concurrently, please retry",
            {"allocation_id": allocation_id},
        )

    def _apply_update(self, tenant_id: str, allocation: RoomAllocation, changes: Dict[str, Any]) -> None:
        new_room_id = changes.get("room_id")
        target_status = changes.get("status")
        moving = bool(new_room_id) and new_room_id != allocation.room_id

        if moving and target_status == AllocationStatus.CHECKED_OUT:
            raise ValidationError("Cannot move and check out an allocation in the same request")

        if moving:
            if allocation.status == AllocationStatus.CHECKED_OUT:
                raise InvalidStateError(ERROR_MOVE_CHECKED_OUT, {"allocation_id": allocation.id})
            self._move(tenant_id, allocation, new_room_id)

        if target_status == AllocationStatus.CHECKED_OUT:
            if allocation.status == AllocationStatus.CHECKED_OUT:
                raise InvalidStateError(ERROR_ALLOCATION_CHECKED_OUT, {"allocation_id": allocation.id})
            self._check_out(allocation)
        elif target_status == AllocationStatus.ACTIVE and allocation.status == AllocationStatus.CHECKED_OUT:
            self._reactivate(tenant_id, allocation)

        if "remarks" in changes:
            allocation.remarks = changes["remarks"]
        self.db.flush()

    def _move(self, tenant_id: str, allocation: RoomAllocation, new_room_id: str) -> None:
        old_room = self._require_room(tenant_id, allocation.room_id)
        new_room = self._require_room(tenant_id, new_room_id)
        self._require_open_place(new_room)

        allocation.room = new_room
        self.db.flush()

        self.counters.refresh_occupancy(old_room)
        self.counters.refresh_occupancy(new_room)
        self._logger.info(
            f"Moved student {allocation.student_id} from room {old_room.room_number} "
            f"to room {new_room.room_number}",
            extra={
                "tenant_id": tenant_id,
                "allocation_id": allocation.id,
                "student_id": allocation.student_id,
                "room_id": new_room.id,
            },
        )

    def _check_out(self, allocation: RoomAllocation) -> None:
        room = self._require_room(allocation.tenant_id, allocation.room_id)
        allocation.status = AllocationStatus.CHECKED_OUT
        allocation.checkout_date = utcnow()
        self.db.flush()
        self.counters.refresh_occupancy(room)

    def _reactivate(self, tenant_id: str, allocation: RoomAllocation) -> None:
        self._require_no_active_allocation(tenant_id, allocation.student_id, ignore_id=allocation.id)
        room = self._require_room(tenant_id, allocation.room_id)
        self._require_open_place(room)

        allocation.status = AllocationStatus.ACTIVE
        allocation.checkout_date = None
        self.db.flush()
        self.counters.refresh_occupancy(room)

    # -------------------------------------------------------------------------
    # Bulk
    # -------------------------------------------------------------------------

    def bulk_allocate(
        self,
        tenant_id: str,
        request: BulkAllocationRequest,
    ) -> ServiceResult[BulkAllocationResult]:
        """
        Allocate many students, each pair in its own transaction.

        A failing pair is reported in ``errors`` and the remaining pairs are
        still processed.
        """
        try:
            if not request.allocations:
                raise ValidationError("Allocations array is required")
            if len(request.allocations) > settings.BULK_ALLOCATION_LIMIT:
                raise ValidationError(
                    f"Cannot allocate more than {settings.BULK_ALLOCATION_LIMIT} students at once",
                    {"allocations": [f"{len(request.allocations)} pairs given"]},
                )

            self._logger.info(
                f"Bulk allocating {len(request.allocations)} students",
                extra={"tenant_id": tenant_id, "count": len(request.allocations)},
            )

            results: List[AllocationResponse] = []
            errors: List[BulkAllocationError] = []
            for pair in request.allocations:
                outcome = self.create_allocation(
                    tenant_id,
                    AllocationCreate(
                        student_id=pair.student_id,
                        room_id=pair.room_id,
                        remarks=request.remarks,
                    ),
                )
                if outcome.is_success:
                    results.append(outcome.data)
                else:
                    errors.append(
                        BulkAllocationError(
                            student_id=pair.student_id,
                            room_id=pair.room_id,
                            error=outcome.message,
                        )
                    )

            summary = BulkAllocationResult(
                successful=len(results),
                failed=len(errors),
                results=results,
                errors=errors,
            )
            return ServiceResult.success(
                summary,
                message=f"Bulk allocation completed: {summary.successful} successful, {summary.failed} failed",
            )

        except Exception as e:
            return self._handle_exception(e, "bulk allocate students", tenant_id)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_allocation(self, tenant_id: str, allocation_id: str) -> ServiceResult[AllocationResponse]:
        try:
            allocation = self.repository.find_detailed(tenant_id, allocation_id)
            if allocation is None:
                raise AllocationNotFoundError(allocation_id)
            return ServiceResult.success(self._to_response(allocation))
        except Exception as e:
            return self._handle_exception(e, "get allocation", allocation_id)

    def list_allocations(
        self,
        tenant_id: str,
        status: Optional[AllocationStatus] = None,
        room_id: Optional[str] = None,
        student_id: Optional[str] = None,
        skip: int = 0,
        take: int = settings.DEFAULT_PAGE_SIZE,
    ) -> ServiceResult[AllocationListResponse]:
        """Newest-first page of allocations with optional filters."""
        try:
            params = PaginationParams(skip=skip, take=take, max_take=settings.MAX_PAGE_SIZE)
            allocations, total = self.repository.list_filtered(
                tenant_id,
                {"status": status, "room_id": room_id, "student_id": student_id},
                skip=params.skip,
                take=params.take,
            )
            return ServiceResult.success(
                AllocationListResponse(
                    allocations=[self._to_response(a) for a in allocations],
                    pagination=PaginationMeta(skip=params.skip, take=params.take, total=total),
                )
            )
        except Exception as e:
            return self._handle_exception(e, "list allocations", tenant_id)

    def get_student_allocation_history(
        self,
        tenant_id: str,
        student_id: str,
    ) -> ServiceResult[List[AllocationHistoryItem]]:
        """
        Every allocation of a student, newest first.

        ``duration_days`` is set only for checked-out allocations.
        """
        try:
            if self.user_repository.find_in_tenant(tenant_id, student_id) is None:
                raise StudentNotFoundError(student_id)

            history = [
                AllocationHistoryItem(
                    id=allocation.id,
                    room_id=allocation.room_id,
                    room_number=allocation.room.room_number,
                    floor=allocation.room.floor.floor_number if allocation.room.floor else None,
                    allocated_date=allocation.allocated_date,
                    checkout_date=allocation.checkout_date,
                    status=allocation.status,
                    duration_days=DateTimeHelper.days_between(
                        allocation.allocated_date, allocation.checkout_date
                    ),
                )
                for allocation in self.repository.history_for_student(tenant_id, student_id)
            ]
            return ServiceResult.success(history)
        except Exception as e:
            return self._handle_exception(e, "get allocation history", student_id)

    def check_allocation_conflicts(
        self,
        tenant_id: str,
        request: AllocationCheckRequest,
    ) -> ServiceResult[AllocationEligibility]:
        """
        Report whether the student could be allocated to the room now.

        Runs the same checks as ``create_allocation`` without writing; the
        answer can be stale by the time a real allocation is attempted.
        """
        try:
            _, room, free_places = self._validate_new_allocation(
                tenant_id, request.student_id, request.room_id, for_update=False
            )
            return ServiceResult.success(
                AllocationEligibility(
                    eligible=True,
                    student_id=request.student_id,
                    room_id=room.id,
                    room_number=room.room_number,
                    available_places=free_places,
                ),
                message="Student can be allocated to this room",
            )
        except Exception as e:
            return self._handle_exception(e, "check allocation", request.student_id)
        finally:
            self.db.rollback()

    # -------------------------------------------------------------------------
    # Mapping
    # -------------------------------------------------------------------------

    @staticmethod
    def _to_response(allocation: RoomAllocation) -> AllocationResponse:
        room = allocation.room
        student = allocation.student
        return AllocationResponse(
            id=allocation.id,
            created_at=allocation.created_at,
            updated_at=allocation.updated_at,
            tenant_id=allocation.tenant_id,
            student_id=allocation.student_id,
            room_id=allocation.room_id,
            status=allocation.status,
            allocated_date=allocation.allocated_date,
            checkout_date=allocation.checkout_date,
            remarks=allocation.remarks,
            student=StudentSummary.model_validate(student) if student else None,
            room=AllocatedRoomSummary(
                id=room.id,
                room_number=room.room_number,
                room_name=room.room_name,
                capacity=room.capacity,
                occupied=room.occupied,
                status=room.status,
                floor_number=room.floor.floor_number if room.floor else None,
                building_name=room.building.building_name if room.building else None,
            ) if room else None,
        )
