# --- File: app/schemas/room/allocation.py ---
"""
Room allocation schemas.

Request bodies for single, bulk and eligibility operations, and the
response shapes for allocations, listings and a student's history.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from app.models.base.enums import AllocationStatus, RoomStatus
from app.schemas.common.base import (
    BaseCreateSchema,
    BaseResponseSchema,
    BaseSchema,
    BaseUpdateSchema,
)
from app.schemas.common.response import PaginationMeta

__all__ = [
    "AllocationCreate",
    "AllocationUpdate",
    "AllocationPair",
    "BulkAllocationRequest",
    "AllocationCheckRequest",
    "StudentSummary",
    "AllocatedRoomSummary",
    "AllocationResponse",
    "AllocationListResponse",
    "BulkAllocationError",
    "BulkAllocationResult",
    "AllocationHistoryItem",
    "AllocationEligibility",
]


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class AllocationCreate(BaseCreateSchema):
    """Allocate a student to a room."""

    student_id: str = Field(..., min_length=1, description="Student to allocate")
    room_id: str = Field(..., min_length=1, description="Destination room")
    remarks: Optional[str] = Field(default=None, max_length=1000)


class AllocationUpdate(BaseUpdateSchema):
    """
    Partial allocation update.

    A ``room_id`` moves the student; ``status`` checks the student out
    (CHECKED_OUT) or reactivates a checked-out allocation (ACTIVE).
    """

    room_id: Optional[str] = Field(default=None, min_length=1)
    status: Optional[AllocationStatus] = None
    remarks: Optional[str] = Field(default=None, max_length=1000)


class AllocationPair(BaseSchema):
    student_id: str = Field(..., min_length=1)
    room_id: str = Field(..., min_length=1)


class BulkAllocationRequest(BaseCreateSchema):
    """Allocate many students; each pair is applied independently."""

    allocations: List[AllocationPair] = Field(..., description="Student/room pairs")
    remarks: Optional[str] = Field(default=None, max_length=1000)


class AllocationCheckRequest(BaseCreateSchema):
    student_id: str = Field(..., min_length=1)
    room_id: str = Field(..., min_length=1)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class StudentSummary(BaseSchema):
    id: str
    name: str
    email: str
    phone: Optional[str] = None


class AllocatedRoomSummary(BaseSchema):
    id: str
    room_number: str
    room_name: str
    capacity: int
    occupied: int
    status: RoomStatus
    floor_number: Optional[int] = None
    building_name: Optional[str] = None


class AllocationResponse(BaseResponseSchema):
    """Allocation ledger row with student and room summaries."""

    tenant_id: str
    student_id: str
    room_id: str
    status: AllocationStatus
    allocated_date: datetime
    checkout_date: Optional[datetime] = None
    remarks: Optional[str] = None
    student: Optional[StudentSummary] = None
    room: Optional[AllocatedRoomSummary] = None


class AllocationListResponse(BaseSchema):
    allocations: List[AllocationResponse]
    pagination: PaginationMeta


class BulkAllocationError(BaseSchema):
    student_id: str
    room_id: str
    error: str


class BulkAllocationResult(BaseSchema):
    """Outcome of a bulk allocation; partial success is normal."""

    successful: int
    failed: int
    results: List[AllocationResponse]
    errors: List[BulkAllocationError]


class AllocationHistoryItem(BaseSchema):
    id: str
    room_id: str
    room_number: str
    floor: Optional[int] = Field(default=None, description="Floor number of the room")
    allocated_date: datetime
    checkout_date: Optional[datetime] = None
    status: AllocationStatus
    duration_days: Optional[int] = Field(
        default=None,
        description="Whole days between allocation and checkout",
    )


class AllocationEligibility(BaseSchema):
    eligible: bool
    student_id: str
    room_id: str
    room_number: str
    available_places: int
