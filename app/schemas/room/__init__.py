from app.schemas.room.allocation import (
    AllocationCheckRequest,
    AllocationCreate,
    AllocationEligibility,
    AllocationHistoryItem,
    AllocationListResponse,
    AllocationPair,
    AllocationResponse,
    AllocationUpdate,
    AllocatedRoomSummary,
    BulkAllocationError,
    BulkAllocationRequest,
    BulkAllocationResult,
    StudentSummary,
)
from app.schemas.room.room_base import BulkRoomCreate, RoomCreate, RoomUpdate
from app.schemas.room.room_response import (
    BulkRoomCreateResult,
    OccupancyBucket,
    RoomListResponse,
    RoomOccupancySummary,
    RoomResponse,
    RoomStats,
)
