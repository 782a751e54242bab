# app/services/hostel/floor_service.py
"""
Floor service.

Floor creation and deletion recompute the parent building's
``total_floors`` in the same transaction.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import (
    BuildingNotFoundError,
    ConflictError,
    DuplicateEntryError,
    FloorNotFoundError,
)
from app.models.hostel import Floor
from app.repositories.hostel import BuildingRepository, FloorRepository
from app.repositories.room import RoomRepository
from app.schemas.hostel.floor import FloorCreate, FloorResponse, FloorStats, FloorUpdate
from app.services.base import BaseService, ServiceResult
from app.services.hostel.constants import (
    ERROR_FLOOR_HAS_ROOMS,
    SUCCESS_FLOOR_CREATED,
    SUCCESS_FLOOR_DELETED,
    SUCCESS_FLOOR_UPDATED,
)
from app.services.hostel.structure_counter_service import StructureCounterService


class FloorService(BaseService[FloorRepository]):
    """Floor management within a building."""

    def __init__(self, repository: FloorRepository, db_session: Session):
        super().__init__(repository, db_session)
        self.building_repository = BuildingRepository(db_session)
        self.room_repository = RoomRepository(db_session)
        self.counters = StructureCounterService(db_session)

    def _require_floor(self, tenant_id: str, floor_id: str) -> Floor:
        floor = self.repository.find_in_tenant(tenant_id, floor_id)
        if floor is None:
            raise FloorNotFoundError(floor_id)
        return floor

    def create_floor(self, tenant_id: str, request: FloorCreate) -> ServiceResult[FloorResponse]:
        """
        Add a floor to a building.

        Args:
            tenant_id: Owning tenant
            request: Building, floor number and optional name/description

        Returns:
            ServiceResult containing FloorResponse or error
        """
        try:
            with self.transaction():
                building = self.building_repository.find_in_tenant(tenant_id, request.building_id)
                if building is None:
                    raise BuildingNotFoundError(request.building_id)

                if self.repository.find_by_number(building.id, request.floor_number) is not None:
                    raise DuplicateEntryError(
                        f"Floor number {request.floor_number} already exists in this building",
                        field="floor_number",
                        value=request.floor_number,
                    )

                floor = self.repository.create({
                    "tenant_id": tenant_id,
                    "building_id": building.id,
                    "floor_number": request.floor_number,
                    "floor_name": request.floor_name or f"Floor {request.floor_number}",
                    "description": request.description,
                    "total_rooms": 0,
                    "occupied_rooms": 0,
                })
                self.counters.refresh_building_totals(building.id)

            self._log_operation(
                "create floor",
                floor.id,
                {"tenant_id": tenant_id, "building_id": building.id},
            )
            return ServiceResult.success(FloorResponse.model_validate(floor), message=SUCCESS_FLOOR_CREATED)
        except Exception as e:
            return self._handle_exception(e, "create floor", request.building_id)

    def list_floors(self, tenant_id: str, building_id: Optional[str] = None) -> ServiceResult[List[FloorResponse]]:
        try:
            if building_id and self.building_repository.find_in_tenant(tenant_id, building_id) is None:
                raise BuildingNotFoundError(building_id)
            floors = self.repository.list_for_building(tenant_id, building_id)
            return ServiceResult.success([FloorResponse.model_validate(f) for f in floors])
        except Exception as e:
            return self._handle_exception(e, "list floors", building_id)

    def get_floor(self, tenant_id: str, floor_id: str) -> ServiceResult[FloorResponse]:
        try:
            return ServiceResult.success(FloorResponse.model_validate(self._require_floor(tenant_id, floor_id)))
        except Exception as e:
            return self._handle_exception(e, "get floor", floor_id)

    def update_floor(self, tenant_id: str, floor_id: str, request: FloorUpdate) -> ServiceResult[FloorResponse]:
        """Update name, description or status; number and counters are fixed."""
        try:
            with self.transaction():
                floor = self._require_floor(tenant_id, floor_id)
                self.repository.update(floor, request.model_dump(exclude_unset=True))

            return ServiceResult.success(FloorResponse.model_validate(floor), message=SUCCESS_FLOOR_UPDATED)
        except Exception as e:
            return self._handle_exception(e, "update floor", floor_id)

    def delete_floor(self, tenant_id: str, floor_id: str) -> ServiceResult[bool]:
        """Delete an empty floor and recompute its building's totals."""
        try:
            with self.transaction():
                floor = self._require_floor(tenant_id, floor_id)
                rooms = self.room_repository.count_for_floor(floor.id)
                if rooms > 0:
                    raise ConflictError(ERROR_FLOOR_HAS_ROOMS, details={"rooms": rooms})

                building_id = floor.building_id
                self.repository.delete(floor)
                self.counters.refresh_building_totals(building_id)

            self._log_operation("delete floor", floor_id, {"tenant_id": tenant_id, "building_id": building_id})
            return ServiceResult.success(True, message=SUCCESS_FLOOR_DELETED)
        except Exception as e:
            return self._handle_exception(e, "delete floor", floor_id)

    def get_floor_stats(self, tenant_id: str, floor_id: str) -> ServiceResult[FloorStats]:
        try:
            floor = self._require_floor(tenant_id, floor_id)
            total = floor.total_rooms
            occupied = floor.occupied_rooms
            return ServiceResult.success(
                FloorStats(
                    floor_number=floor.floor_number,
                    floor_name=floor.floor_name,
                    building_name=floor.building.building_name,
                    total_rooms=total,
                    occupied_rooms=occupied,
                    available_rooms=total - occupied,
                    occupancy_rate=round(occupied / total * 100, 2) if total else 0.0,
                    status=floor.status,
                )
            )
        except Exception as e:
            return self._handle_exception(e, "get floor stats", floor_id)
