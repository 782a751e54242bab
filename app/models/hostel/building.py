# app/models/hostel/building.py
"""
Building model.

``total_floors``, ``total_rooms`` and ``occupied_rooms`` are cached
aggregates maintained by the structure counter service; they are never
read to make allocation decisions.
"""

from typing import List, Optional

from sqlalchemy import Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base.base_model import TenantModel

__all__ = ["Building"]


class Building(TenantModel):
    """Physical building of a hostel."""

    __tablename__ = "buildings"
    __table_args__ = (
        UniqueConstraint("tenant_id", "building_code", name="uq_building_tenant_code"),
    )

    building_name: Mapped[str] = mapped_column(String(255), nullable=False)
    building_code: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Aggregates
    total_floors: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_rooms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    occupied_rooms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    tenant: Mapped["Tenant"] = relationship("Tenant", back_populates="buildings")
    floors: Mapped[List["Floor"]] = relationship(
        "Floor",
        back_populates="building",
        order_by="Floor.floor_number",
    )
    rooms: Mapped[List["Room"]] = relationship("Room", back_populates="building")

    def __repr__(self) -> str:
        return f"<Building(id={self.id}, code={self.building_code})>"
