from app.repositories.room.room_repository import RoomRepository
from app.repositories.room.room_allocation_repository import RoomAllocationRepository

__all__ = ["RoomRepository", "RoomAllocationRepository"]
