# app/repositories/hostel/floor_repository.py
"""
Floor repository.
"""

from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.models.hostel import Floor
from app.repositories.base.base_repository import TenantScopedRepository


class FloorRepository(TenantScopedRepository[Floor]):
    """Repository for floors."""

    def __init__(self, session: Session):
        super().__init__(Floor, session)

    def find_by_number(self, building_id: str, floor_number: int) -> Optional[Floor]:
        query = select(Floor).where(
            Floor.building_id == building_id,
            Floor.floor_number == floor_number,
        )
        return self.session.execute(query).scalar_one_or_none()

    def list_for_building(self, tenant_id: str, building_id: Optional[str] = None) -> List[Floor]:
        return self.find_all_in_tenant(
            tenant_id,
            filters={"building_id": building_id},
            order_by=[Floor.building_id, Floor.floor_number],
        )

    def count_for_building(self, building_id: str) -> int:
        query = select(func.count(Floor.id)).where(Floor.building_id == building_id)
        return int(self.session.execute(query).scalar_one())
