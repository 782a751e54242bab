# --- File: app/schemas/room/room_response.py ---
"""
Room response schemas.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import Field

from app.models.base.enums import RoomStatus, RoomType
from app.schemas.common.base import BaseResponseSchema, BaseSchema

__all__ = [
    "FloorRef",
    "BuildingRef",
    "RoomResponse",
    "RoomListResponse",
    "RoomStats",
    "BulkRoomCreateResult",
    "OccupancyBucket",
    "RoomOccupancySummary",
]


class FloorRef(BaseSchema):
    id: str
    floor_number: int
    floor_name: str


class BuildingRef(BaseSchema):
    id: str
    building_name: str
    building_code: str


class RoomResponse(BaseResponseSchema):
    """Room as returned by the API."""

    tenant_id: str
    building_id: str
    floor_id: str
    room_number: str
    room_name: str
    room_type: RoomType
    capacity: int
    occupied: int
    status: RoomStatus
    description: Optional[str] = None
    floor: Optional[FloorRef] = None
    building: Optional[BuildingRef] = None


class RoomListResponse(BaseSchema):
    rooms: List[RoomResponse]
    total: int
    page: int
    total_pages: int


class RoomStats(BaseSchema):
    """Occupancy figures for one room."""

    room_number: str
    capacity: int
    occupied: int
    available: int
    occupancy_rate: float = Field(..., description="Percentage of places taken")
    status: RoomStatus
    is_full: bool
    has_availability: bool


class BulkRoomCreateResult(BaseSchema):
    created_rooms: List[RoomResponse]
    errors: List[str]
    created_count: int
    error_count: int


class OccupancyBucket(BaseSchema):
    rooms: int = 0
    capacity: int = 0
    occupied: int = 0


class RoomOccupancySummary(BaseSchema):
    """Tenant occupancy overview with breakdowns."""

    total_rooms: int
    total_capacity: int
    total_occupied: int
    total_available: int
    occupancy_rate: float
    by_status: Dict[str, int]
    by_type: Dict[str, OccupancyBucket]
    by_floor: Dict[str, OccupancyBucket]
