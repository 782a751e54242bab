# --- File: app/schemas/room/room_base.py ---
"""
Room request schemas: creation, updates and bulk creation.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field, field_validator, model_validator

from app.models.base.enums import RoomStatus, RoomType
from app.schemas.common.base import BaseCreateSchema, BaseUpdateSchema

__all__ = [
    "RoomCreate",
    "RoomUpdate",
    "BulkRoomCreate",
]


class RoomCreate(BaseCreateSchema):
    """
    Create a single room on a floor.

    New rooms always start AVAILABLE with no occupants; neither
    ``status`` nor ``occupied`` can be supplied.
    """

    floor_id: str = Field(..., description="Floor the room is on")
    room_number: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Room number, unique on the floor",
        examples=["101", "A-201"],
    )
    room_name: Optional[str] = Field(
        default=None,
        max_length=255,
        description="Display name (defaults to 'Room <number>')",
    )
    room_type: RoomType = Field(default=RoomType.SINGLE, description="Room occupancy type")
    capacity: int = Field(..., description="Number of places")
    description: Optional[str] = Field(default=None, description="Free-form description")

    @field_validator("capacity")
    @classmethod
    def validate_capacity(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Room capacity must be greater than 0")
        return v


class RoomUpdate(BaseUpdateSchema):
    """
    Partial room update.

    ``status`` accepts AVAILABLE (clears an administrative override) or one
    of the override values; OCCUPIED and FULL are derived from the ledger
    and are rejected by the service.
    """

    room_number: Optional[str] = Field(default=None, min_length=1, max_length=50)
    room_name: Optional[str] = Field(default=None, max_length=255)
    room_type: Optional[RoomType] = None
    capacity: Optional[int] = None
    description: Optional[str] = None
    status: Optional[RoomStatus] = None

    @field_validator("capacity")
    @classmethod
    def validate_capacity(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v <= 0:
            raise ValueError("Room capacity must be greater than 0")
        return v


class BulkRoomCreate(BaseCreateSchema):
    """Create a contiguous range of numbered rooms on one floor."""

    floor_id: str = Field(..., description="Floor the rooms are on")
    start_room_number: int = Field(..., ge=0, description="First room number (inclusive)")
    end_room_number: int = Field(..., ge=0, description="Last room number (inclusive)")
    room_type: RoomType = Field(..., description="Room occupancy type")
    capacity: int = Field(..., description="Number of places in each room")
    description: Optional[str] = None

    @field_validator("capacity")
    @classmethod
    def validate_capacity(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Room capacity must be greater than 0")
        return v

    @model_validator(mode="after")
    def validate_range(self) -> "BulkRoomCreate":
        if self.start_room_number > self.end_room_number:
            raise ValueError("Invalid room number range")
        return self

    @property
    def room_numbers(self) -> list:
        return [str(n) for n in range(self.start_room_number, self.end_room_number + 1)]
