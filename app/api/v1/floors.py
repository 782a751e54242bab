# app/api/v1/floors.py
"""
Floor endpoints.
"""

from fastapi import APIRouter, Depends, status

from app.api import deps
from app.schemas.hostel.floor import FloorCreate, FloorUpdate
from app.services.hostel import FloorService

router = APIRouter(prefix="/floors", tags=["floors"])


@router.post("", status_code=status.HTTP_201_CREATED, summary="Add a floor to a building")
def create_floor(
    payload: FloorCreate,
    tenant_id: str = Depends(deps.get_tenant_context),
    service: FloorService = Depends(deps.get_floor_service),
):
    return deps.respond(service.create_floor(tenant_id, payload), status.HTTP_201_CREATED)


@router.get("/building/{building_id}", summary="Floors of a building")
def floors_by_building(
    building_id: str,
    tenant_id: str = Depends(deps.get_tenant_context),
    service: FloorService = Depends(deps.get_floor_service),
):
    return deps.respond(service.list_floors(tenant_id, building_id))


@router.get("/{floor_id}", summary="Get a floor")
def get_floor(
    floor_id: str,
    tenant_id: str = Depends(deps.get_tenant_context),
    service: FloorService = Depends(deps.get_floor_service),
):
    return deps.respond(service.get_floor(tenant_id, floor_id))


@router.put("/{floor_id}", summary="Update a floor")
def update_floor(
    floor_id: str,
    payload: FloorUpdate,
    tenant_id: str = Depends(deps.get_tenant_context),
    service: FloorService = Depends(deps.get_floor_service),
):
    return deps.respond(service.update_floor(tenant_id, floor_id, payload))


@router.delete("/{floor_id}", summary="Delete an empty floor")
def delete_floor(
    floor_id: str,
    tenant_id: str = Depends(deps.get_tenant_context),
    service: FloorService = Depends(deps.get_floor_service),
):
    return deps.respond(service.delete_floor(tenant_id, floor_id))


@router.get("/{floor_id}/stats", summary="Floor occupancy statistics")
def floor_stats(
    floor_id: str,
    tenant_id: str = Depends(deps.get_tenant_context),
    service: FloorService = Depends(deps.get_floor_service),
):
    return deps.respond(service.get_floor_stats(tenant_id, floor_id))
