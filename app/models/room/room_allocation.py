# app/models/room/room_allocation.py
"""
Room allocation ledger.

Each row records one student's stay in one room. Rows are never deleted:
deallocation flips them to CHECKED_OUT. A partial unique index keeps at
most one ACTIVE row per student.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Enum as SQLEnum, ForeignKey, Index, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base.base_model import TenantModel
from app.models.base.enums import AllocationStatus
from app.utils.datetime_utils import utcnow

__all__ = ["RoomAllocation", "ACTIVE_STUDENT_INDEX"]

ACTIVE_STUDENT_INDEX = "uq_room_allocation_active_student"


class RoomAllocation(TenantModel):
    """Assignment of a student to a room."""

    __tablename__ = "room_allocations"
    __table_args__ = (
        Index(
            ACTIVE_STUDENT_INDEX,
            "student_id",
            unique=True,
            postgresql_where=text("status = 'ACTIVE'"),
            sqlite_where=text("status = 'ACTIVE'"),
        ),
        Index("ix_room_allocation_room_status", "room_id", "status"),
    )

    student_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    room_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("rooms.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    status: Mapped[AllocationStatus] = mapped_column(
        SQLEnum(AllocationStatus, name="allocation_status_enum", create_constraint=True),
        nullable=False,
        default=AllocationStatus.ACTIVE,
    )
    allocated_date: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=utcnow,
    )
    checkout_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    remarks: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    student: Mapped["User"] = relationship("User", back_populates="allocations")
    room: Mapped["Room"] = relationship("Room", back_populates="allocations")

    def __repr__(self) -> str:
        return (
            f"<RoomAllocation(id={self.id}, student={self.student_id}, "
            f"room={self.room_id}, status={self.status})>"
        )
