# app/repositories/room/room_repository.py
"""
Room repository with room inventory queries and structural counts.
"""

from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.sql import Select

from app.models.hostel import Floor
from app.models.room import Room
from app.repositories.base.base_repository import TenantScopedRepository


class RoomRepository(TenantScopedRepository[Room]):
    """
    Repository for Room entity.

    Handles:
    - Room lookups and filtered listing
    - Structural counts per floor and building
    - Occupancy aggregates
    """

    def __init__(self, session: Session):
        super().__init__(Room, session)

    # ============================================================================
    # LOOKUPS
    # ============================================================================

    def find_with_location(self, tenant_id: str, room_id: str) -> Optional[Room]:
        query = (
            select(Room)
            .options(joinedload(Room.floor), joinedload(Room.building))
            .where(Room.id == room_id, Room.tenant_id == tenant_id)
        )
        return self.session.execute(query).scalar_one_or_none()

    def find_by_number(self, floor_id: str, room_number: str) -> Optional[Room]:
        query = select(Room).where(
            Room.floor_id == floor_id,
            Room.room_number == room_number,
        )
        return self.session.execute(query).scalar_one_or_none()

    def existing_numbers(self, floor_id: str, room_numbers: Iterable[str]) -> Set[str]:
        """Subset of ``room_numbers`` already used on the floor."""
        numbers = list(room_numbers)
        if not numbers:
            return set()
        query = select(Room.room_number).where(
            Room.floor_id == floor_id,
            Room.room_number.in_(numbers),
        )
        return set(self.session.execute(query).scalars().all())

    def list_for_floor(self, tenant_id: str, floor_id: str) -> List[Room]:
        return self.find_all_in_tenant(
            tenant_id,
            filters={"floor_id": floor_id},
            order_by=[Room.room_number],
        )

    def search(
        self,
        tenant_id: str,
        filters: Dict[str, Any],
        search: Optional[str] = None,
        skip: int = 0,
        take: int = 10,
    ) -> Tuple[List[Room], int]:
        """
        Filtered, paginated room listing.

        Args:
            tenant_id: Owning tenant
            filters: Equality filters (building_id, floor_id, room_type, status)
            search: Case-insensitive match on room number or name
            skip: Offset
            take: Page size

        Returns:
            Tuple of (rooms, total matching rows)
        """
        base = self._filtered(select(Room), tenant_id, filters, search)
        total_query = self._filtered(
            select(func.count(Room.id)), tenant_id, filters, search
        )

        query = (
            base.options(joinedload(Room.floor), joinedload(Room.building))
            .order_by(Room.building_id, Room.floor_id, Room.room_number)
            .offset(skip)
            .limit(take)
        )
        rooms = list(self.session.execute(query).scalars().unique().all())
        total = int(self.session.execute(total_query).scalar_one())
        return rooms, total

    # ============================================================================
    # STRUCTURAL COUNTS
    # ============================================================================

    def count_for_floor(self, floor_id: str) -> int:
        query = select(func.count(Room.id)).where(Room.floor_id == floor_id)
        return int(self.session.execute(query).scalar_one())

    def count_for_building(self, building_id: str) -> int:
        query = select(func.count(Room.id)).where(Room.building_id == building_id)
        return int(self.session.execute(query).scalar_one())

    def count_occupied_for_floor(self, floor_id: str) -> int:
        query = select(func.count(Room.id)).where(
            Room.floor_id == floor_id,
            Room.occupied > 0,
        )
        return int(self.session.execute(query).scalar_one())

    def count_occupied_for_building(self, building_id: str) -> int:
        query = select(func.count(Room.id)).where(
            Room.building_id == building_id,
            Room.occupied > 0,
        )
        return int(self.session.execute(query).scalar_one())

    def list_ids_in_tenant(self, tenant_id: str) -> List[str]:
        query = select(Room.id).where(Room.tenant_id == tenant_id)
        return list(self.session.execute(query).scalars().all())

    # ============================================================================
    # OCCUPANCY
    # ============================================================================

    def occupancy_rows(self, tenant_id: str, filters: Dict[str, Any]) -> List[Tuple[Room, int]]:
        """Rooms matching ``filters`` paired with their floor number."""
        query = self._filtered(
            select(Room, Floor.floor_number).join(Floor, Room.floor_id == Floor.id),
            tenant_id,
            filters,
        )
        return [(room, floor_number) for room, floor_number in self.session.execute(query).all()]

    def _filtered(
        self,
        query: Select,
        tenant_id: str,
        filters: Dict[str, Any],
        search: Optional[str] = None,
    ) -> Select:
        query = query.where(Room.tenant_id == tenant_id)
        for field in ("building_id", "floor_id", "room_type", "status"):
            value = filters.get(field)
            if value is not None:
                query = query.where(getattr(Room, field) == value)
        if search:
            pattern = f"%{search.lower()}%"
            query = query.where(
                or_(
                    func.lower(Room.room_number).like(pattern),
                    func.lower(Room.room_name).like(pattern),
                )
            )
        return query
