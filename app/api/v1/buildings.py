# app/api/v1/buildings.py
"""
Building endpoints, including the tenant-wide counter recalculation.
"""

from fastapi import APIRouter, Depends, status

from app.api import deps
from app.schemas.hostel.building import BuildingCreate, BuildingUpdate
from app.services.hostel import BuildingService, StructureCounterService

router = APIRouter(prefix="/buildings", tags=["buildings"])


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a building")
def create_building(
    payload: BuildingCreate,
    tenant_id: str = Depends(deps.get_tenant_context),
    service: BuildingService = Depends(deps.get_building_service),
):
    return deps.respond(service.create_building(tenant_id, payload), status.HTTP_201_CREATED)


@router.get("", summary="List buildings")
def list_buildings(
    page: deps.Pagination = Depends(deps.get_pagination),
    tenant_id: str = Depends(deps.get_tenant_context),
    service: BuildingService = Depends(deps.get_building_service),
):
    return deps.respond(service.list_buildings(tenant_id, skip=page.skip, take=page.take))


@router.post("/recalculate", summary="Recompute every occupancy counter of the tenant")
def recalculate_counters(
    tenant_id: str = Depends(deps.get_tenant_context),
    service: StructureCounterService = Depends(deps.get_counter_service),
):
    return deps.respond(service.recalculate_tenant(tenant_id))


@router.get("/{building_id}", summary="Get a building")
def get_building(
    building_id: str,
    tenant_id: str = Depends(deps.get_tenant_context),
    service: BuildingService = Depends(deps.get_building_service),
):
    return deps.respond(service.get_building(tenant_id, building_id))


@router.put("/{building_id}", summary="Update a building")
def update_building(
    building_id: str,
    payload: BuildingUpdate,
    tenant_id: str = Depends(deps.get_tenant_context),
    service: BuildingService = Depends(deps.get_building_service),
):
    return deps.respond(service.update_building(tenant_id, building_id, payload))


@router.delete("/{building_id}", summary="Delete an empty building")
def delete_building(
    building_id: str,
    tenant_id: str = Depends(deps.get_tenant_context),
    service: BuildingService = Depends(deps.get_building_service),
):
    return deps.respond(service.delete_building(tenant_id, building_id))


@router.get("/{building_id}/stats", summary="Building occupancy statistics")
def building_stats(
    building_id: str,
    tenant_id: str = Depends(deps.get_tenant_context),
    service: BuildingService = Depends(deps.get_building_service),
):
    return deps.respond(service.get_building_stats(tenant_id, building_id))
