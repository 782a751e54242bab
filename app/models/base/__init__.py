"""
Base models package.

Provides the declarative base, abstract model classes and enums
for all database models.
"""

from app.models.base.base_model import (
    Base,
    BaseModel,
    TimestampModel,
    TenantModel,
)

from app.models.base.enums import (
    TenantStatus,
    UserRole,
    UserStatus,
    FloorStatus,
    RoomType,
    RoomStatus,
    AllocationStatus,
)

__all__ = [
    "Base",
    "BaseModel",
    "TimestampModel",
    "TenantModel",
    "TenantStatus",
    "UserRole",
    "UserStatus",
    "FloorStatus",
    "RoomType",
    "RoomStatus",
    "AllocationStatus",
]
