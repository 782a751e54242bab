# app/repositories/tenant/tenant_repository.py
"""
Tenant repository.
"""

from sqlalchemy.orm import Session

from app.models.tenant import Tenant
from app.repositories.base.base_repository import BaseRepository


class TenantRepository(BaseRepository[Tenant]):
    """Lookup of tenant accounts."""

    def __init__(self, session: Session):
        super().__init__(Tenant, session)
