"""SQLAlchemy metadata with every model registered."""
from app.models import (  # noqa: F401
    Base,
    Building,
    Floor,
    Room,
    RoomAllocation,
    Tenant,
    User,
)

__all__ = ["Base"]
