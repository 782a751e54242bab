# models/__init__.py
"""
ORM models. Importing this package registers every table on ``Base.metadata``.
"""

from app.models.base import Base
from app.models.tenant import Tenant
from app.models.user import User
from app.models.hostel import Building, Floor
from app.models.room import Room, RoomAllocation

__all__ = [
    "Base",
    "Tenant",
    "User",
    "Building",
    "Floor",
    "Room",
    "RoomAllocation",
]
