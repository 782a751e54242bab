# --- File: app/schemas/hostel/building.py ---
"""
Building schemas.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from app.schemas.common.base import (
    BaseCreateSchema,
    BaseResponseSchema,
    BaseSchema,
    BaseUpdateSchema,
)

__all__ = [
    "BuildingCreate",
    "BuildingUpdate",
    "BuildingResponse",
    "BuildingListResponse",
    "BuildingStats",
    "RecalculationSummary",
]


class BuildingCreate(BaseCreateSchema):
    building_name: str = Field(..., min_length=1, max_length=255)
    building_code: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Short code, unique within the tenant",
    )
    description: Optional[str] = None
    address: Optional[str] = None


class BuildingUpdate(BaseUpdateSchema):
    """Editable building fields; aggregate counters are not accepted."""

    building_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    building_code: Optional[str] = Field(default=None, min_length=1, max_length=50)
    description: Optional[str] = None
    address: Optional[str] = None


class BuildingResponse(BaseResponseSchema):
    tenant_id: str
    building_name: str
    building_code: str
    description: Optional[str] = None
    address: Optional[str] = None
    total_floors: int
    total_rooms: int
    occupied_rooms: int


class BuildingListResponse(BaseSchema):
    buildings: List[BuildingResponse]
    total: int


class BuildingStats(BaseSchema):
    total_floors: int
    actual_floors: int = Field(..., description="Floors counted from the floor table")
    total_rooms: int
    occupied_rooms: int
    available_rooms: int
    occupancy_rate: float


class RecalculationSummary(BaseSchema):
    """Counts of rows visited by a tenant-wide counter rebuild."""

    buildings: int
    floors: int
    rooms: int
    rooms_corrected: int = Field(
        ...,
        description="Rooms whose cached occupancy or status disagreed with the ledger",
    )
