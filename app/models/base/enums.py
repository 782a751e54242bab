"""
Database enums shared by models and schemas.

Values equal member names so the stored value, the JSON value and the
Python name are the same string.
"""

import enum


class TenantStatus(str, enum.Enum):
    """Tenant account status."""
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"


class UserRole(str, enum.Enum):
    """User role enumeration."""
    ADMIN = "ADMIN"
    WARDEN = "WARDEN"
    STUDENT = "STUDENT"


class UserStatus(str, enum.Enum):
    """User account status."""
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class FloorStatus(str, enum.Enum):
    """Floor operational status."""
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    UNDER_MAINTENANCE = "UNDER_MAINTENANCE"


class RoomType(str, enum.Enum):
    """Room type categorization."""
    SINGLE = "SINGLE"
    DOUBLE = "DOUBLE"
    TRIPLE = "TRIPLE"
    QUAD = "QUAD"
    DORMITORY = "DORMITORY"


class RoomStatus(str, enum.Enum):
    """Room availability status."""
    AVAILABLE = "AVAILABLE"
    OCCUPIED = "OCCUPIED"
    FULL = "FULL"
    MAINTENANCE = "MAINTENANCE"
    INACTIVE = "INACTIVE"
    RESERVED = "RESERVED"

    @classmethod
    def overrides(cls) -> frozenset:
        """Statuses set by an administrator rather than derived from occupancy."""
        return frozenset({cls.MAINTENANCE, cls.INACTIVE, cls.RESERVED})

    @classmethod
    def blocked(cls) -> frozenset:
        """Statuses that refuse new allocations."""
        return frozenset({cls.MAINTENANCE, cls.INACTIVE})


class AllocationStatus(str, enum.Enum):
    """Room allocation lifecycle status."""
    ACTIVE = "ACTIVE"
    CHECKED_OUT = "CHECKED_OUT"


__all__ = [
    "TenantStatus",
    "UserRole",
    "UserStatus",
    "FloorStatus",
    "RoomType",
    "RoomStatus",
    "AllocationStatus",
]
