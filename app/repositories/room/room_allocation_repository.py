# app/repositories/room/room_allocation_repository.py
"""
Room allocation ledger repository.
"""

from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session, joinedload

from app.models.base.enums import AllocationStatus
from app.models.room import Room, RoomAllocation
from app.repositories.base.base_repository import TenantScopedRepository


class RoomAllocationRepository(TenantScopedRepository[RoomAllocation]):
    """
    Repository for the allocation ledger.

    Counting methods always hit the database; the room's cached
    ``occupied`` column is never consulted here.
    """

    def __init__(self, session: Session):
        super().__init__(RoomAllocation, session)

    def count_active_for_room(self, room_id: str) -> int:
        query = select(func.count(RoomAllocation.id)).where(
            RoomAllocation.room_id == room_id,
            RoomAllocation.status == AllocationStatus.ACTIVE,
        )
        return int(self.session.execute(query).scalar_one())

    def find_active_for_student(self, tenant_id: str, student_id: str) -> Optional[RoomAllocation]:
        query = select(RoomAllocation).where(
            RoomAllocation.tenant_id == tenant_id,
            RoomAllocation.student_id == student_id,
            RoomAllocation.status == AllocationStatus.ACTIVE,
        )
        return self.session.execute(query).scalars().first()

    def find_detailed(self, tenant_id: str, allocation_id: str) -> Optional[RoomAllocation]:
        """Allocation with student, room, floor and building loaded."""
        query = (
            select(RoomAllocation)
            .options(
                joinedload(RoomAllocation.student),
                joinedload(RoomAllocation.room).joinedload(Room.floor),
                joinedload(RoomAllocation.room).joinedload(Room.building),
            )
            .where(
                RoomAllocation.id == allocation_id,
                RoomAllocation.tenant_id == tenant_id,
            )
        )
        return self.session.execute(query).scalar_one_or_none()

    def list_filtered(
        self,
        tenant_id: str,
        filters: Dict[str, Any],
        skip: int = 0,
        take: int = 10,
    ) -> Tuple[List[RoomAllocation], int]:
        """Newest-first page of allocations plus the total match count."""
        criteria = [RoomAllocation.tenant_id == tenant_id]
        for field in ("status", "room_id", "student_id"):
            value = filters.get(field)
            if value is not None:
                criteria.append(getattr(RoomAllocation, field) == value)

        query = (
            select(RoomAllocation)
            .options(
                joinedload(RoomAllocation.student),
                joinedload(RoomAllocation.room).joinedload(Room.floor),
                joinedload(RoomAllocation.room).joinedload(Room.building),
            )
            .where(*criteria)
            .order_by(RoomAllocation.allocated_date.desc(), RoomAllocation.id)
            .offset(skip)
            .limit(take)
        )
        total_query = select(func.count(RoomAllocation.id)).where(*criteria)

        allocations = list(self.session.execute(query).scalars().unique().all())
        total = int(self.session.execute(total_query).scalar_one())
        return allocations, total

    def history_for_student(self, tenant_id: str, student_id: str) -> List[RoomAllocation]:
        """Every allocation of the student, newest first."""
        query = (
            select(RoomAllocation)
            .options(joinedload(RoomAllocation.room).joinedload(Room.floor))
            .where(
                RoomAllocation.tenant_id == tenant_id,
                RoomAllocation.student_id == student_id,
            )
            .order_by(RoomAllocation.allocated_date.desc(), RoomAllocation.id)
        )
        return list(self.session.execute(query).scalars().unique().all())
