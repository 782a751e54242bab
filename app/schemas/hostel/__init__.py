from app.schemas.hostel.building import (
    BuildingCreate,
    BuildingListResponse,
    BuildingResponse,
    BuildingStats,
    BuildingUpdate,
    RecalculationSummary,
)
from app.schemas.hostel.floor import FloorCreate, FloorResponse, FloorStats, FloorUpdate
