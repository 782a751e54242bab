# app/services/room/room_service.py
"""
Room inventory service.

Room creation and deletion (single and bulk) recompute the floor and
building totals in the same transaction. Capacity and status changes
take the room's allocation lock so they cannot interleave with an
allocation write.
"""

from collections import defaultdict
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.config.settings import settings
from app.core.exceptions import (
    ConflictError,
    DuplicateEntryError,
    FloorNotFoundError,
    RoomNotFoundError,
    ValidationError,
)
from app.core.locks import KeyedLockRegistry, allocation_locks, room_key
from app.models.base.enums import RoomStatus, RoomType
from app.models.hostel import Floor
from app.models.room import Room
from app.repositories.hostel import FloorRepository
from app.repositories.room import RoomAllocationRepository, RoomRepository
from app.schemas.room.room_base import BulkRoomCreate, RoomCreate, RoomUpdate
from app.schemas.room.room_response import (
    BulkRoomCreateResult,
    OccupancyBucket,
    RoomListResponse,
    RoomOccupancySummary,
    RoomResponse,
    RoomStats,
)
from app.services.base import BaseService, ServiceResult
from app.services.hostel.constants import (
    ERROR_ROOM_HAS_ALLOCATIONS,
    SUCCESS_ROOM_CREATED,
    SUCCESS_ROOM_DELETED,
    SUCCESS_ROOM_UPDATED,
)
from app.services.hostel.structure_counter_service import (
    StructureCounterService,
    derive_room_status,
)
from app.utils.pagination_utils import PaginationInfo, PaginationParams


class RoomService(BaseService[RoomRepository]):
    """
    Room CRUD, bulk creation, statistics and occupancy reporting.
    """

    def __init__(
        self,
        repository: RoomRepository,
        db_session: Session,
        locks: KeyedLockRegistry = allocation_locks,
    ):
        super().__init__(repository, db_session)
        self.floor_repository = FloorRepository(db_session)
        self.allocation_repository = RoomAllocationRepository(db_session)
        self.counters = StructureCounterService(db_session, locks)
        self._locks = locks

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _require_room(self, tenant_id: str, room_id: str) -> Room:
        room = self.repository.find_with_location(tenant_id, room_id)
        if room is None:
            raise RoomNotFoundError(room_id)
        return room

    def _require_floor_in_building(self, tenant_id: str, building_id: str, floor_id: str) -> Floor:
        floor = self.floor_repository.find_in_tenant(tenant_id, floor_id)
        if floor is None or floor.building_id != building_id:
            raise FloorNotFoundError(floor_id, "Floor not found in this building")
        return floor

    def _refresh_totals(self, floor_id: str, building_id: str) -> None:
        self.counters.refresh_floor_totals(floor_id)
        self.counters.refresh_building_totals(building_id)

    # -------------------------------------------------------------------------
    # Create
    # -------------------------------------------------------------------------

    def create_room(
        self,
        tenant_id: str,
        building_id: str,
        request: RoomCreate,
    ) -> ServiceResult[RoomResponse]:
        """
        Create a room on a floor of the building.

        Args:
            tenant_id: Owning tenant
            building_id: Building the floor belongs to
            request: Room definition

        Returns:
            ServiceResult containing RoomResponse or error
        """
        try:
            with self.transaction():
                floor = self._require_floor_in_building(tenant_id, building_id, request.floor_id)
                if self.repository.find_by_number(floor.id, request.room_number) is not None:
                    raise DuplicateEntryError(
                        f"Room {request.room_number} already exists on this floor",
                        field="room_number",
                        value=request.room_number,
                    )

                room = self.repository.create({
                    "tenant_id": tenant_id,
                    "building_id": building_id,
                    "floor_id": floor.id,
                    "room_number": request.room_number,
                    "room_name": request.room_name or f"Room {request.room_number}",
                    "room_type": request.room_type,
                    "capacity": request.capacity,
                    "occupied": 0,
                    "status": RoomStatus.AVAILABLE,
                    "description": request.description,
                })
                self._refresh_totals(floor.id, building_id)

            self._logger.info(
                f"Created room {room.room_number}",
                extra={"tenant_id": tenant_id, "room_id": room.id, "building_id": building_id},
            )
            return ServiceResult.success(RoomResponse.model_validate(room), message=SUCCESS_ROOM_CREATED)
        except Exception as e:
            return self._handle_exception(e, "create room", request.room_number)

    def bulk_create_rooms(
        self,
        tenant_id: str,
        building_id: str,
        request: BulkRoomCreate,
    ) -> ServiceResult[BulkRoomCreateResult]:
        """
        Create a numbered range of rooms in one transaction.

        Numbers already used on the floor are skipped and reported in
        ``errors``; everything else is created together.
        """
        try:
            numbers = request.room_numbers
            if len(numbers) > settings.BULK_ROOM_CREATE_LIMIT:
                raise ValidationError(
                    f"Cannot create more than {settings.BULK_ROOM_CREATE_LIMIT} rooms at once"
                )

            created: List[Room] = []
            errors: List[str] = []
            with self.transaction():
                floor = self._require_floor_in_building(tenant_id, building_id, request.floor_id)
                taken = self.repository.existing_numbers(floor.id, numbers)

                for number in numbers:
                    if number in taken:
                        errors.append(f"Room {number} already exists")
                        continue
                    created.append(self.repository.create({
                        "tenant_id": tenant_id,
                        "building_id": building_id,
                        "floor_id": floor.id,
                        "room_number": number,
                        "room_name": f"Room {number}",
                        "room_type": request.room_type,
                        "capacity": request.capacity,
                        "occupied": 0,
                        "status": RoomStatus.AVAILABLE,
                        "description": request.description,
                    }, flush=False))

                self.db.flush()
                self._refresh_totals(floor.id, building_id)

            self._logger.info(
                f"Bulk created {len(created)} rooms ({len(errors)} skipped)",
                extra={"tenant_id": tenant_id, "building_id": building_id, "floor_id": request.floor_id},
            )
            return ServiceResult.success(
                BulkRoomCreateResult(
                    created_rooms=[RoomResponse.model_validate(r) for r in created],
                    errors=errors,
                    created_count=len(created),
                    error_count=len(errors),
                ),
                message=f"{len(created)} rooms created successfully",
            )
        except Exception as e:
            return self._handle_exception(e, "bulk create rooms", building_id)

    # -------------------------------------------------------------------------
    # Read
    # -------------------------------------------------------------------------

    def list_rooms(
        self,
        tenant_id: str,
        building_id: Optional[str] = None,
        floor_id: Optional[str] = None,
        room_type: Optional[RoomType] = None,
        status: Optional[RoomStatus] = None,
        search: Optional[str] = None,
        skip: int = 0,
        take: int = settings.DEFAULT_PAGE_SIZE,
    ) -> ServiceResult[RoomListResponse]:
        try:
            params = PaginationParams(skip=skip, take=take, max_take=settings.MAX_PAGE_SIZE)
            rooms, total = self.repository.search(
                tenant_id,
                {
                    "building_id": building_id,
                    "floor_id": floor_id,
                    "room_type": room_type,
                    "status": status,
                },
                search=search,
                skip=params.skip,
                take=params.take,
            )
            info = PaginationInfo(skip=params.skip, take=params.take, total=total)
            return ServiceResult.success(
                RoomListResponse(
                    rooms=[RoomResponse.model_validate(r) for r in rooms],
                    total=total,
                    page=info.page,
                    total_pages=info.total_pages,
                )
            )
        except Exception as e:
            return self._handle_exception(e, "list rooms", tenant_id)

    def get_room(self, tenant_id: str, room_id: str) -> ServiceResult[RoomResponse]:
        try:
            return ServiceResult.success(RoomResponse.model_validate(self._require_room(tenant_id, room_id)))
        except Exception as e:
            return self._handle_exception(e, "get room", room_id)

    def get_rooms_by_floor(self, tenant_id: str, floor_id: str) -> ServiceResult[List[RoomResponse]]:
        try:
            if self.floor_repository.find_in_tenant(tenant_id, floor_id) is None:
                raise FloorNotFoundError(floor_id)
            rooms = self.repository.list_for_floor(tenant_id, floor_id)
            return ServiceResult.success([RoomResponse.model_validate(r) for r in rooms])
        except Exception as e:
            return self._handle_exception(e, "get rooms by floor", floor_id)

    # -------------------------------------------------------------------------
    # Update / delete
    # -------------------------------------------------------------------------

    def update_room(
        self,
        tenant_id: str,
        room_id: str,
        request: RoomUpdate,
    ) -> ServiceResult[RoomResponse]:
        """
        Update room attributes.

        Capacity may not drop below the ledger's ACTIVE count. A status of
        AVAILABLE clears an administrative override and lets occupancy
        decide; OCCUPIED and FULL cannot be set directly.
        """
        changes = request.model_dump(exclude_unset=True)
        try:
            new_status = changes.pop("status", None)
            if new_status in (RoomStatus.OCCUPIED, RoomStatus.FULL):
                raise ValidationError(
                    f"Room status {new_status.value} is derived from occupancy and cannot be set directly",
                    {"status": ["must be AVAILABLE, MAINTENANCE, INACTIVE or RESERVED"]},
                )

            with self._locks.hold(room_key(room_id)):
                with self.transaction():
                    room = self.repository.find_in_tenant_for_update(tenant_id, room_id)
                    if room is None:
                        raise RoomNotFoundError(room_id)

                    number = changes.get("room_number")
                    if number and number != room.room_number:
                        if self.repository.find_by_number(room.floor_id, number) is not None:
                            raise DuplicateEntryError(
                                f"Room {number} already exists on this floor",
                                field="room_number",
                                value=number,
                            )

                    active_count = self.allocation_repository.count_active_for_room(room.id)
                    capacity = changes.get("capacity")
                    if capacity is not None and capacity < active_count:
                        raise ConflictError(
                            f"Cannot reduce capacity below current occupancy ({active_count})",
                            details={"capacity": capacity, "occupied": active_count},
                        )

                    self.repository.update(room, changes)
                    if new_status is not None:
                        self._apply_status(room, new_status, active_count)
                    self.counters.refresh_occupancy(room)

            self._log_operation("update room", room_id, {"tenant_id": tenant_id, "room_id": room_id})
            return ServiceResult.success(
                RoomResponse.model_validate(self._require_room(tenant_id, room_id)),
                message=SUCCESS_ROOM_UPDATED,
            )
        except Exception as e:
            return self._handle_exception(e, "update room", room_id)

    @staticmethod
    def _apply_status(room: Room, new_status: RoomStatus, active_count: int) -> None:
        if new_status == RoomStatus.AVAILABLE:
            # Clear the override; occupancy decides from here
            room.status = derive_room_status(None, active_count, room.capacity)
        elif new_status == RoomStatus.RESERVED and active_count > 0:
            raise ConflictError(
                "Only an empty room can be reserved",
                details={"occupied": active_count},
            )
        else:
            room.status = new_status

    def delete_room(self, tenant_id: str, room_id: str) -> ServiceResult[bool]:
        """Delete a room with no ACTIVE allocations and recompute totals."""
        try:
            with self._locks.hold(room_key(room_id)):
                with self.transaction():
                    room = self.repository.find_in_tenant_for_update(tenant_id, room_id)
                    if room is None:
                        raise RoomNotFoundError(room_id)

                    active_count = self.allocation_repository.count_active_for_room(room.id)
                    if active_count > 0:
                        raise ConflictError(
                            f"{ERROR_ROOM_HAS_ALLOCATIONS}: {active_count} student(s) are currently "
                            f"allocated. Please deallocate them first.",
                            details={"active_allocations": active_count},
                        )

                    floor_id, building_id = room.floor_id, room.building_id
                    self.repository.delete(room)
                    self._refresh_totals(floor_id, building_id)

            self._log_operation("delete room", room_id, {"tenant_id": tenant_id, "room_id": room_id})
            return ServiceResult.success(True, message=SUCCESS_ROOM_DELETED)
        except Exception as e:
            return self._handle_exception(e, "delete room", room_id)

    # -------------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------------

    def get_room_stats(self, tenant_id: str, room_id: str) -> ServiceResult[RoomStats]:
        try:
            room = self._require_room(tenant_id, room_id)
            return ServiceResult.success(
                RoomStats(
                    room_number=room.room_number,
                    capacity=room.capacity,
                    occupied=room.occupied,
                    available=room.available,
                    occupancy_rate=room.occupancy_rate,
                    status=room.status,
                    is_full=room.is_full,
                    has_availability=room.available > 0 and room.status not in RoomStatus.blocked(),
                )
            )
        except Exception as e:
            return self._handle_exception(e, "get room stats", room_id)

    def get_room_occupancy(
        self,
        tenant_id: str,
        building_id: Optional[str] = None,
        floor_id: Optional[str] = None,
        room_type: Optional[RoomType] = None,
    ) -> ServiceResult[RoomOccupancySummary]:
        """Occupancy totals with breakdowns by status, room type and floor."""
        try:
            rows = self.repository.occupancy_rows(
                tenant_id,
                {"building_id": building_id, "floor_id": floor_id, "room_type": room_type},
            )

            by_status: Dict[str, int] = defaultdict(int)
            by_type: Dict[str, Dict[str, int]] = defaultdict(lambda: defaultdict(int))
            by_floor: Dict[str, Dict[str, int]] = defaultdict(lambda: defaultdict(int))
            total_capacity = total_occupied = 0

            for room, floor_number in rows:
                total_capacity += room.capacity
                total_occupied += room.occupied
                by_status[room.status.value] += 1
                for bucket in (by_type[room.room_type.value], by_floor[str(floor_number)]):
                    bucket["rooms"] += 1
                    bucket["capacity"] += room.capacity
                    bucket["occupied"] += room.occupied

            return ServiceResult.success(
                RoomOccupancySummary(
                    total_rooms=len(rows),
                    total_capacity=total_capacity,
                    total_occupied=total_occupied,
                    total_available=total_capacity - total_occupied,
                    occupancy_rate=round(total_occupied / total_capacity * 100, 2) if total_capacity else 0.0,
                    by_status=dict(by_status),
                    by_type=self._buckets(by_type),
                    by_floor=self._buckets(by_floor),
                )
            )
        except Exception as e:
            return self._handle_exception(e, "get room occupancy", tenant_id)

    @staticmethod
    def _buckets(raw: Dict[str, Dict[str, Any]]) -> Dict[str, OccupancyBucket]:
        return {key: OccupancyBucket(**values) for key, values in raw.items()}
