"""
Hostel structure services: buildings, floors and their counters.
"""

from app.services.hostel.building_service import BuildingService
from app.services.hostel.floor_service import FloorService
from app.services.hostel.structure_counter_service import (
    StructureCounterService,
    derive_room_status,
)

__all__ = [
    "BuildingService",
    "FloorService",
    "StructureCounterService",
    "derive_room_status",
]
