# app/repositories/hostel/building_repository.py
"""
Building repository.
"""

from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.models.hostel import Building
from app.repositories.base.base_repository import TenantScopedRepository


class BuildingRepository(TenantScopedRepository[Building]):
    """Repository for buildings."""

    def __init__(self, session: Session):
        super().__init__(Building, session)

    def find_by_code(self, tenant_id: str, building_code: str) -> Optional[Building]:
        query = select(Building).where(
            Building.tenant_id == tenant_id,
            Building.building_code == building_code,
        )
        return self.session.execute(query).scalar_one_or_none()

    def list_newest_first(self, tenant_id: str, skip: int, take: int) -> List[Building]:
        return self.find_all_in_tenant(
            tenant_id,
            order_by=[Building.created_at.desc(), Building.id],
            limit=take,
            offset=skip,
        )

    def list_ids(self, tenant_id: str) -> List[str]:
        query = select(Building.id).where(Building.tenant_id == tenant_id)
        return list(self.session.execute(query).scalars().all())

    def count_all(self, tenant_id: str) -> int:
        query = select(func.count(Building.id)).where(Building.tenant_id == tenant_id)
        return int(self.session.execute(query).scalar_one())
