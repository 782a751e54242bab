# app/services/hostel/building_service.py
"""
Building service: create/update/delete, listing and statistics.
"""

from typing import Optional

from sqlalchemy.orm import Session

from app.config.settings import settings
from app.core.exceptions import BuildingNotFoundError, ConflictError, DuplicateEntryError
from app.models.hostel import Building
from app.repositories.hostel import BuildingRepository, FloorRepository
from app.schemas.hostel.building import (
    BuildingCreate,
    BuildingListResponse,
    BuildingResponse,
    BuildingStats,
    BuildingUpdate,
)
from app.services.base import BaseService, ServiceResult
from app.services.hostel.constants import (
    ERROR_BUILDING_HAS_FLOORS,
    SUCCESS_BUILDING_CREATED,
    SUCCESS_BUILDING_DELETED,
    SUCCESS_BUILDING_UPDATED,
)
from app.utils.pagination_utils import PaginationParams


class BuildingService(BaseService[BuildingRepository]):
    """
    Tenant building management.

    Aggregate counters are owned by the structure counter service and are
    never accepted from clients.
    """

    def __init__(self, repository: BuildingRepository, db_session: Session):
        super().__init__(repository, db_session)
        self.floor_repository = FloorRepository(db_session)

    def _require_building(self, tenant_id: str, building_id: str) -> Building:
        building = self.repository.find_in_tenant(tenant_id, building_id)
        if building is None:
            raise BuildingNotFoundError(building_id)
        return building

    def _ensure_code_free(self, tenant_id: str, code: str, ignore_id: Optional[str] = None) -> None:
        existing = self.repository.find_by_code(tenant_id, code)
        if existing is not None and existing.id != ignore_id:
            raise DuplicateEntryError(
                f"Building code '{code}' already exists",
                field="building_code",
                value=code,
            )

    # -------------------------------------------------------------------------
    # CRUD
    # -------------------------------------------------------------------------

    def create_building(self, tenant_id: str, request: BuildingCreate) -> ServiceResult[BuildingResponse]:
        try:
            with self.transaction():
                self._ensure_code_free(tenant_id, request.building_code)
                building = self.repository.create({
                    **request.model_dump(),
                    "tenant_id": tenant_id,
                    "total_floors": 0,
                    "total_rooms": 0,
                    "occupied_rooms": 0,
                })

            self._log_operation("create building", building.id, {"tenant_id": tenant_id})
            return ServiceResult.success(
                BuildingResponse.model_validate(building),
                message=SUCCESS_BUILDING_CREATED,
            )
        except Exception as e:
            return self._handle_exception(e, "create building", request.building_code)

    def list_buildings(
        self,
        tenant_id: str,
        skip: int = 0,
        take: int = settings.DEFAULT_PAGE_SIZE,
    ) -> ServiceResult[BuildingListResponse]:
        try:
            params = PaginationParams(skip=skip, take=take, max_take=settings.MAX_PAGE_SIZE)
            buildings = self.repository.list_newest_first(tenant_id, params.skip, params.take)
            return ServiceResult.success(
                BuildingListResponse(
                    buildings=[BuildingResponse.model_validate(b) for b in buildings],
                    total=self.repository.count_all(tenant_id),
                )
            )
        except Exception as e:
            return self._handle_exception(e, "list buildings", tenant_id)

    def get_building(self, tenant_id: str, building_id: str) -> ServiceResult[BuildingResponse]:
        try:
            building = self._require_building(tenant_id, building_id)
            return ServiceResult.success(BuildingResponse.model_validate(building))
        except Exception as e:
            return self._handle_exception(e, "get building", building_id)

    def update_building(
        self,
        tenant_id: str,
        building_id: str,
        request: BuildingUpdate,
    ) -> ServiceResult[BuildingResponse]:
        try:
            changes = request.model_dump(exclude_unset=True)
            with self.transaction():
                building = self._require_building(tenant_id, building_id)
                if changes.get("building_code"):
                    self._ensure_code_free(tenant_id, changes["building_code"], ignore_id=building.id)
                self.repository.update(building, changes)

            self._log_operation("update building", building_id, {"tenant_id": tenant_id})
            return ServiceResult.success(
                BuildingResponse.model_validate(building),
                message=SUCCESS_BUILDING_UPDATED,
            )
        except Exception as e:
            return self._handle_exception(e, "update building", building_id)

    def delete_building(self, tenant_id: str, building_id: str) -> ServiceResult[bool]:
        """Delete a building that has no floors left."""
        try:
            with self.transaction():
                building = self._require_building(tenant_id, building_id)
                floors = self.floor_repository.count_for_building(building.id)
                if floors > 0:
                    raise ConflictError(ERROR_BUILDING_HAS_FLOORS, details={"floors": floors})
                self.repository.delete(building)

            self._log_operation("delete building", building_id, {"tenant_id": tenant_id})
            return ServiceResult.success(True, message=SUCCESS_BUILDING_DELETED)
        except Exception as e:
            return self._handle_exception(e, "delete building", building_id)

    # -------------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------------

    def get_building_stats(self, tenant_id: str, building_id: str) -> ServiceResult[BuildingStats]:
        try:
            building = self._require_building(tenant_id, building_id)
            total_rooms = building.total_rooms
            occupied_rooms = building.occupied_rooms
            return ServiceResult.success(
                BuildingStats(
                    total_floors=building.total_floors,
                    actual_floors=self.floor_repository.count_for_building(building.id),
                    total_rooms=total_rooms,
                    occupied_rooms=occupied_rooms,
                    available_rooms=total_rooms - occupied_rooms,
                    occupancy_rate=round(occupied_rooms / total_rooms * 100, 2) if total_rooms else 0.0,
                )
            )
        except Exception as e:
            return self._handle_exception(e, "get building stats", building_id)
