# --- File: app/schemas/hostel/floor.py ---
"""
Floor schemas.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from app.models.base.enums import FloorStatus
from app.schemas.common.base import (
    BaseCreateSchema,
    BaseResponseSchema,
    BaseSchema,
    BaseUpdateSchema,
)

__all__ = [
    "FloorCreate",
    "FloorUpdate",
    "FloorResponse",
    "FloorStats",
]


class FloorCreate(BaseCreateSchema):
    building_id: str = Field(..., min_length=1)
    floor_number: int = Field(..., ge=0, description="0 for the ground floor")
    floor_name: Optional[str] = Field(
        default=None,
        max_length=255,
        description="Display name (defaults to 'Floor <number>')",
    )
    description: Optional[str] = None


class FloorUpdate(BaseUpdateSchema):
    floor_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    status: Optional[FloorStatus] = None


class FloorResponse(BaseResponseSchema):
    tenant_id: str
    building_id: str
    floor_number: int
    floor_name: str
    description: Optional[str] = None
    status: FloorStatus
    total_rooms: int
    occupied_rooms: int


class FloorStats(BaseSchema):
    floor_number: int
    floor_name: str
    building_name: str
    total_rooms: int
    occupied_rooms: int
    available_rooms: int
    occupancy_rate: float
    status: FloorStatus
