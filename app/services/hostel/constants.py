# app/services/hostel/constants.py
"""
Inventory and allocation service messages.
"""

from typing import Final

# Buildings
SUCCESS_BUILDING_CREATED: Final[str] = "Building created successfully"
SUCCESS_BUILDING_UPDATED: Final[str] = "Building updated successfully"
SUCCESS_BUILDING_DELETED: Final[str] = "Building deleted successfully"
ERROR_BUILDING_HAS_FLOORS: Final[str] = "Cannot delete building with existing floors. Delete floors first."

# Floors
SUCCESS_FLOOR_CREATED: Final[str] = "Floor created successfully"
SUCCESS_FLOOR_UPDATED: Final[str] = "Floor updated successfully"
SUCCESS_FLOOR_DELETED: Final[str] = "Floor deleted successfully"
ERROR_FLOOR_HAS_ROOMS: Final[str] = "Cannot delete floor with existing rooms. Delete rooms first."

# Rooms
SUCCESS_ROOM_CREATED: Final[str] = "Room created successfully"
SUCCESS_ROOM_UPDATED: Final[str] = "Room updated successfully"
SUCCESS_ROOM_DELETED: Final[str] = "Room deleted successfully"
ERROR_ROOM_HAS_ALLOCATIONS: Final[str] = "Cannot delete room with active allocations"

# Allocations
SUCCESS_ALLOCATION_CREATED: Final[str] = "Student allocated to room successfully"
SUCCESS_ALLOCATION_UPDATED: Final[str] = "Allocation updated successfully"
SUCCESS_STUDENT_DEALLOCATED: Final[str] = "Student deallocated successfully"
ERROR_ALLOCATION_CHECKED_OUT: Final[str] = "Allocation is already checked out"
ERROR_MOVE_CHECKED_OUT: Final[str] = "Cannot move a checked-out allocation"

# Counters
SUCCESS_COUNTERS_RECALCULATED: Final[str] = "Counters recalculated successfully"
