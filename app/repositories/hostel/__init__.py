from app.repositories.hostel.building_repository import BuildingRepository
from app.repositories.hostel.floor_repository import FloorRepository

__all__ = ["BuildingRepository", "FloorRepository"]
