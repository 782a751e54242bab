"""
Room services: inventory and the allocation engine.
"""

from app.services.room.allocation_service import AllocationService
from app.services.room.room_service import RoomService

__all__ = ["AllocationService", "RoomService"]
