# app/api/deps.py
"""
Shared FastAPI dependencies.

Example usage in a router:
    from fastapi import Depends, APIRouter
    from app.api import deps

    router = APIRouter()

    @router.get("/rooms")
    def list_rooms(tenant_id: str = Depends(deps.get_tenant_context)):
        ...
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.config.settings import settings
from app.core.error_handlers import error_response
from app.core.exceptions import TenantNotFoundError, TenantSuspendedError, ValidationError
from app.db.session import get_db
from app.repositories.hostel import BuildingRepository, FloorRepository
from app.repositories.room import RoomAllocationRepository, RoomRepository
from app.repositories.tenant import TenantRepository
from app.schemas.common.response import SuccessResponse
from app.services.base import ServiceResult
from app.services.hostel import BuildingService, FloorService, StructureCounterService
from app.services.room import AllocationService, RoomService

__all__ = [
    "get_db",
    "get_tenant_context",
    "Pagination",
    "get_pagination",
    "get_allocation_service",
    "get_room_service",
    "get_building_service",
    "get_floor_service",
    "get_counter_service",
    "respond",
]


# --- Database & context --------------------------------------------------------

def get_tenant_context(
    tenant_id: Optional[str] = Header(default=None, alias=settings.TENANT_HEADER),
    db: Session = Depends(get_db),
) -> str:
    """
    Resolve the calling tenant from the tenant header.

    Raises:
        ValidationError: header missing
        TenantNotFoundError: unknown tenant
        TenantSuspendedError: tenant account suspended
    """
    if not tenant_id:
        raise ValidationError(
            "Tenant context is required",
            {settings.TENANT_HEADER: ["header is missing"]},
        )

    tenant = TenantRepository(db).find_by_id(tenant_id)
    if tenant is None:
        raise TenantNotFoundError(tenant_id)
    if tenant.is_suspended:
        raise TenantSuspendedError(tenant_id)
    return tenant.id


# --- Pagination ----------------------------------------------------------------

@dataclass
class Pagination:
    skip: int
    take: int


def get_pagination(
    skip: int = Query(0, ge=0, description="Rows to skip"),
    take: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="Page size"),
) -> Pagination:
    return Pagination(skip=skip, take=take)


# --- Services ------------------------------------------------------------------

def get_allocation_service(db: Session = Depends(get_db)) -> AllocationService:
    return AllocationService(RoomAllocationRepository(db), db)


def get_room_service(db: Session = Depends(get_db)) -> RoomService:
    return RoomService(RoomRepository(db), db)


def get_building_service(db: Session = Depends(get_db)) -> BuildingService:
    return BuildingService(BuildingRepository(db), db)


def get_floor_service(db: Session = Depends(get_db)) -> FloorService:
    return FloorService(FloorRepository(db), db)


def get_counter_service(db: Session = Depends(get_db)) -> StructureCounterService:
    return StructureCounterService(db)


# --- Responses -----------------------------------------------------------------

def respond(
    result: ServiceResult,
    success_status: int = 200,
    default_message: str = "OK",
) -> JSONResponse:
    """Render a ServiceResult as the standard success or error envelope."""
    if not result.is_success:
        error = result.error
        return error_response(error.status_code, error.message, error.code.value, error.details)

    body = SuccessResponse.create(message=result.message or default_message, data=result.data)
    return JSONResponse(
        status_code=success_status,
        content=body.model_dump(mode="json", by_alias=True),
    )
