from app.models.hostel.building import Building
from app.models.hostel.floor import Floor

__all__ = ["Building", "Floor"]
