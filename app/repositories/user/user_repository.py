# app/repositories/user/user_repository.py
"""
User repository.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.base.enums import UserRole
from app.models.user import User
from app.repositories.base.base_repository import TenantScopedRepository


class UserRepository(TenantScopedRepository[User]):
    """
    Repository for tenant users.

    The allocation engine only reads students; user administration lives
    outside this service.
    """

    def __init__(self, session: Session):
        super().__init__(User, session)

    def find_student(self, tenant_id: str, student_id: str) -> Optional[User]:
        """Find a user with the STUDENT role inside the tenant."""
        query = select(User).where(
            User.id == student_id,
            User.tenant_id == tenant_id,
            User.role == UserRole.STUDENT,
        )
        return self.session.execute(query).scalar_one_or_none()

