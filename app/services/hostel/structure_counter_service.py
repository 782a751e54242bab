# app/services/hostel/structure_counter_service.py
"""
Structural counter maintenance.

Keeps the cached aggregates on rooms, floors and buildings equal to what
the ledger and the structure tables say. Every ``refresh_*`` method runs
inside the caller's transaction and never commits, so a counter update is
committed or rolled back together with the change that caused it.
"""

from typing import Optional

from sqlalchemy.orm import Session

from app.core.locks import KeyedLockRegistry, allocation_locks, room_key
from app.models.base.enums import RoomStatus
from app.models.hostel import Building, Floor
from app.models.room import Room
from app.repositories.hostel import BuildingRepository, FloorRepository
from app.repositories.room import RoomAllocationRepository, RoomRepository
from app.schemas.hostel.building import RecalculationSummary
from app.services.base import BaseService, ServiceResult
from app.services.hostel.constants import SUCCESS_COUNTERS_RECALCULATED


def derive_room_status(current: Optional[RoomStatus], occupied: int, capacity: int) -> RoomStatus:
    """
    Room status implied by its occupancy.

    MAINTENANCE and INACTIVE are administrative overrides and are kept
    whatever the occupancy. RESERVED holds only while the room is empty;
    the first allocation replaces it with the derived status.
    """
    if current in RoomStatus.blocked():
        return current
    if occupied <= 0:
        return RoomStatus.RESERVED if current == RoomStatus.RESERVED else RoomStatus.AVAILABLE
    if occupied >= capacity:
        return RoomStatus.FULL
    return RoomStatus.OCCUPIED


class StructureCounterService(BaseService[RoomRepository]):
    """
    Recomputes cached counters from authoritative rows.

    Counters are presentation data; allocation decisions always count the
    ledger directly.
    """

    def __init__(self, db_session: Session, locks: KeyedLockRegistry = allocation_locks):
        super().__init__(RoomRepository(db_session), db_session)
        self.allocation_repository = RoomAllocationRepository(db_session)
        self.floor_repository = FloorRepository(db_session)
        self.building_repository = BuildingRepository(db_session)
        self._locks = locks

    # -------------------------------------------------------------------------
    # Room occupancy
    # -------------------------------------------------------------------------

    def refresh_room(self, room: Room) -> Room:
        """Recount ``room.occupied`` from ACTIVE allocations and re-derive its status."""
        self.db.flush()
        occupied = self.allocation_repository.count_active_for_room(room.id)
        room.occupied = occupied
        room.status = derive_room_status(room.status, occupied, room.capacity)
        self.db.flush()
        return room

    def refresh_occupancy(self, room: Room) -> Room:
        """Refresh a room and the ``occupied_rooms`` of its floor and building."""
        self.refresh_room(room)
        self.refresh_floor_occupancy(room.floor_id)
        self.refresh_building_occupancy(room.building_id)
        return room

    def refresh_floor_occupancy(self, floor_id: str) -> None:
        floor = self.db.get(Floor, floor_id)
        if floor is not None:
            floor.occupied_rooms = self.repository.count_occupied_for_floor(floor_id)
            self.db.flush()

    def refresh_building_occupancy(self, building_id: str) -> None:
        building = self.db.get(Building, building_id)
        if building is not None:
            building.occupied_rooms = self.repository.count_occupied_for_building(building_id)
            self.db.flush()

    # -------------------------------------------------------------------------
    # Structure totals
    # -------------------------------------------------------------------------

    def refresh_floor_totals(self, floor_id: str) -> None:
        """``floor.total_rooms`` and ``floor.occupied_rooms`` from the room table."""
        self.db.flush()
        floor = self.db.get(Floor, floor_id)
        if floor is None:
            return
        floor.total_rooms = self.repository.count_for_floor(floor_id)
        floor.occupied_rooms = self.repository.count_occupied_for_floor(floor_id)
        self.db.flush()

    def refresh_building_totals(self, building_id: str) -> None:
        """``total_floors``, ``total_rooms`` and ``occupied_rooms`` of a building."""
        self.db.flush()
        building = self.db.get(Building, building_id)
        if building is None:
            return
        building.total_floors = self.floor_repository.count_for_building(building_id)
        building.total_rooms = self.repository.count_for_building(building_id)
        building.occupied_rooms = self.repository.count_occupied_for_building(building_id)
        self.db.flush()

    # -------------------------------------------------------------------------
    # Tenant-wide rebuild
    # -------------------------------------------------------------------------

    def recalculate_tenant(self, tenant_id: str) -> ServiceResult[RecalculationSummary]:
        """
        Rebuild every counter of a tenant from the ledger and structure tables.

        Holds the lock of every room of the tenant so no allocation write can
        interleave with the rebuild.

        Args:
            tenant_id: Tenant whose counters are rebuilt

        Returns:
            ServiceResult containing a RecalculationSummary
        """
        try:
            room_ids = self.repository.list_ids_in_tenant(tenant_id)
            with self._locks.hold(*[room_key(room_id) for room_id in room_ids]):
                with self.transaction():
                    summary = self._recalculate_locked(tenant_id)

            self._logger.info(
                f"Recalculated counters for tenant {tenant_id}",
                extra={"tenant_id": tenant_id, **summary.model_dump()},
            )
            return ServiceResult.success(summary, message=SUCCESS_COUNTERS_RECALCULATED)

        except Exception as e:
            return self._handle_exception(e, "recalculate counters", tenant_id)

    def _recalculate_locked(self, tenant_id: str) -> RecalculationSummary:
        corrected = 0
        rooms = self.repository.find_all_in_tenant(tenant_id)
        for room in rooms:
            before_occupied, before_status = room.occupied, room.status
            self.refresh_room(room)
            if before_occupied != room.occupied or before_status != room.status:
                corrected += 1
                self._logger.warning(
                    f"Room {room.room_number} counters drifted: {before_occupied} -> {room.occupied}",
                    extra={"tenant_id": tenant_id, "room_id": room.id},
                )

        floors = self.floor_repository.find_all_in_tenant(tenant_id)
        for floor in floors:
            self.refresh_floor_totals(floor.id)

        building_ids = self.building_repository.list_ids(tenant_id)
        for building_id in building_ids:
            self.refresh_building_totals(building_id)

        return RecalculationSummary(
            buildings=len(building_ids),
            floors=len(floors),
            rooms=len(rooms),
            rooms_corrected=corrected,
        )
