# app/api/v1/rooms.py
"""
Room endpoints.

Rooms are created inside a building; everything else addresses the room
directly.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.api import deps
from app.models.base.enums import RoomStatus, RoomType
from app.schemas.room.room_base import BulkRoomCreate, RoomCreate, RoomUpdate
from app.services.room import RoomService

router = APIRouter(prefix="/rooms", tags=["rooms"])


@router.post(
    "/building/{building_id}",
    status_code=status.HTTP_201_CREATED,
    summary="Create a room in a building",
)
def create_room(
    building_id: str,
    payload: RoomCreate,
    tenant_id: str = Depends(deps.get_tenant_context),
    service: RoomService = Depends(deps.get_room_service),
):
    return deps.respond(service.create_room(tenant_id, building_id, payload), status.HTTP_201_CREATED)


@router.post(
    "/building/{building_id}/bulk",
    status_code=status.HTTP_201_CREATED,
    summary="Create a numbered range of rooms",
)
def bulk_create_rooms(
    building_id: str,
    payload: BulkRoomCreate,
    tenant_id: str = Depends(deps.get_tenant_context),
    service: RoomService = Depends(deps.get_room_service),
):
    return deps.respond(service.bulk_create_rooms(tenant_id, building_id, payload), status.HTTP_201_CREATED)


@router.get("/occupancy", summary="Occupancy summary")
def room_occupancy(
    building_id: Optional[str] = Query(None, alias="buildingId"),
    floor_id: Optional[str] = Query(None, alias="floorId"),
    room_type: Optional[RoomType] = Query(None, alias="roomType"),
    tenant_id: str = Depends(deps.get_tenant_context),
    service: RoomService = Depends(deps.get_room_service),
):
    result = service.get_room_occupancy(
        tenant_id,
        building_id=building_id,
        floor_id=floor_id,
        room_type=room_type,
    )
    return deps.respond(result)


@router.get("", summary="Search rooms")
def list_rooms(
    building_id: Optional[str] = Query(None, alias="buildingId"),
    floor_id: Optional[str] = Query(None, alias="floorId"),
    room_type: Optional[RoomType] = Query(None, alias="roomType"),
    status_filter: Optional[RoomStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None, max_length=100),
    page: deps.Pagination = Depends(deps.get_pagination),
    tenant_id: str = Depends(deps.get_tenant_context),
    service: RoomService = Depends(deps.get_room_service),
):
    result = service.list_rooms(
        tenant_id,
        building_id=building_id,
        floor_id=floor_id,
        room_type=room_type,
        status=status_filter,
        search=search,
        skip=page.skip,
        take=page.take,
    )
    return deps.respond(result)


@router.get("/floor/{floor_id}", summary="Rooms on a floor")
def rooms_by_floor(
    floor_id: str,
    tenant_id: str = Depends(deps.get_tenant_context),
    service: RoomService = Depends(deps.get_room_service),
):
    return deps.respond(service.get_rooms_by_floor(tenant_id, floor_id))


@router.get("/{room_id}", summary="Get a room")
def get_room(
    room_id: str,
    tenant_id: str = Depends(deps.get_tenant_context),
    service: RoomService = Depends(deps.get_room_service),
):
    return deps.respond(service.get_room(tenant_id, room_id))


@router.get("/{room_id}/stats", summary="Room statistics")
def room_stats(
    room_id: str,
    tenant_id: str = Depends(deps.get_tenant_context),
    service: RoomService = Depends(deps.get_room_service),
):
    return deps.respond(service.get_room_stats(tenant_id, room_id))


@router.put("/{room_id}", summary="Update a room")
def update_room(
    room_id: str,
    payload: RoomUpdate,
    tenant_id: str = Depends(deps.get_tenant_context),
    service: RoomService = Depends(deps.get_room_service),
):
    return deps.respond(service.update_room(tenant_id, room_id, payload))


@router.delete("/{room_id}", summary="Delete an empty room")
def delete_room(
    room_id: str,
    tenant_id: str = Depends(deps.get_tenant_context),
    service: RoomService = Depends(deps.get_room_service),
):
    return deps.respond(service.delete_room(tenant_id, room_id))
