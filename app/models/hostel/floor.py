# app/models/hostel/floor.py
"""
Floor model.
"""

from typing import List, Optional

from sqlalchemy import Enum as SQLEnum, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base.base_model import TenantModel
from app.models.base.enums import FloorStatus

__all__ = ["Floor"]


class Floor(TenantModel):
    """Floor of a building; groups rooms and caches their counts."""

    __tablename__ = "floors"
    __table_args__ = (
        UniqueConstraint("building_id", "floor_number", name="uq_floor_building_number"),
    )

    building_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("buildings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    floor_number: Mapped[int] = mapped_column(Integer, nullable=False)
    floor_name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[FloorStatus] = mapped_column(
        SQLEnum(FloorStatus, name="floor_status_enum", create_constraint=True),
        nullable=False,
        default=FloorStatus.ACTIVE,
    )

    # Aggregates
    total_rooms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    occupied_rooms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    building: Mapped["Building"] = relationship("Building", back_populates="floors")
    rooms: Mapped[List["Room"]] = relationship(
        "Room",
        back_populates="floor",
        order_by="Room.room_number",
    )

    def __repr__(self) -> str:
        return f"<Floor(id={self.id}, number={self.floor_number})>"
