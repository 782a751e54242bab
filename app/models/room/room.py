# app/models/room/room.py
"""
Room model.

``occupied`` and ``status`` are derived from the ACTIVE rows of the
allocation ledger and rewritten in the same transaction as every ledger
change.
"""

from typing import List, Optional

from sqlalchemy import (
    CheckConstraint,
    Enum as SQLEnum,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base.base_model import TenantModel
from app.models.base.enums import RoomStatus, RoomType

__all__ = ["Room"]


class Room(TenantModel):
    """
    Physical room within a floor.

    Represents a lettable room with a fixed number of places; ``occupied``
    counts the students currently allocated to it.
    """

    __tablename__ = "rooms"
    __table_args__ = (
        UniqueConstraint("floor_id", "room_number", name="uq_room_floor_number"),
        CheckConstraint("capacity > 0", name="ck_room_capacity_positive"),
        CheckConstraint(
            "occupied >= 0 AND occupied <= capacity",
            name="ck_room_occupied_range",
        ),
    )

    building_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("buildings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    floor_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("floors.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    room_number: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    room_name: Mapped[str] = mapped_column(String(255), nullable=False)
    room_type: Mapped[RoomType] = mapped_column(
        SQLEnum(RoomType, name="room_type_enum", create_constraint=True),
        nullable=False,
        default=RoomType.SINGLE,
        index=True,
    )
    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    occupied: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[RoomStatus] = mapped_column(
        SQLEnum(RoomStatus, name="room_status_enum", create_constraint=True),
        nullable=False,
        default=RoomStatus.AVAILABLE,
        index=True,
    )
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    building: Mapped["Building"] = relationship("Building", back_populates="rooms")
    floor: Mapped["Floor"] = relationship("Floor", back_populates="rooms")
    allocations: Mapped[List["RoomAllocation"]] = relationship(
        "RoomAllocation",
        back_populates="room",
        cascade="all, delete-orphan",
    )

    @property
    def available(self) -> int:
        return max(self.capacity - self.occupied, 0)

    @property
    def is_full(self) -> bool:
        return self.occupied >= self.capacity

    @property
    def occupancy_rate(self) -> float:
        if not self.capacity:
            return 0.0
        return round(self.occupied / self.capacity * 100, 2)

    def __repr__(self) -> str:
        return (
            f"<Room(id={self.id}, number={self.room_number}, "
            f"occupied={self.occupied}/{self.capacity}, status={self.status})>"
        )
