# app/models/tenant/tenant.py
"""
Tenant model.

A tenant is one hostel organisation; every other row is owned by one.
"""

from typing import List

from sqlalchemy import Enum as SQLEnum, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base.base_model import TimestampModel
from app.models.base.enums import TenantStatus

__all__ = ["Tenant"]


class Tenant(TimestampModel):
    """Hostel organisation that owns buildings, rooms and users."""

    __tablename__ = "tenants"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[TenantStatus] = mapped_column(
        SQLEnum(TenantStatus, name="tenant_status_enum", create_constraint=True),
        nullable=False,
        default=TenantStatus.ACTIVE,
    )

    buildings: Mapped[List["Building"]] = relationship(
        "Building",
        back_populates="tenant",
        passive_deletes=True,
    )

    @property
    def is_suspended(self) -> bool:
        return self.status == TenantStatus.SUSPENDED

    def __repr__(self) -> str:
        return f"<Tenant(id={self.id}, name={self.name}, status={self.status})>"
