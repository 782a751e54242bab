# app/models/user/user.py
"""
User model.

Students are users with the STUDENT role; they are the subjects of
room allocations.
"""

from typing import List, Optional

from sqlalchemy import Enum as SQLEnum, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base.base_model import TenantModel
from app.models.base.enums import UserRole, UserStatus

__all__ = ["User"]


class User(TenantModel):
    """
    Tenant member (administrator, warden or student).
    """

    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("tenant_id", "email", name="uq_user_tenant_email"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Email address, unique per tenant"
    )
    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    role: Mapped[UserRole] = mapped_column(
        SQLEnum(UserRole, name="user_role_enum", create_constraint=True),
        nullable=False,
        default=UserRole.STUDENT,
        index=True,
    )
    status: Mapped[UserStatus] = mapped_column(
        SQLEnum(UserStatus, name="user_status_enum", create_constraint=True),
        nullable=False,
        default=UserStatus.ACTIVE,
    )

    allocations: Mapped[List["RoomAllocation"]] = relationship(
        "RoomAllocation",
        back_populates="student",
        order_by="desc(RoomAllocation.allocated_date)",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
