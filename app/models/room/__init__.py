from app.models.room.room import Room
from app.models.room.room_allocation import RoomAllocation

__all__ = ["Room", "RoomAllocation"]
