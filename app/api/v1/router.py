"""
API v1 Router - Main Entry Point
Aggregates all v1 API endpoints for the hostel allocation service
"""
from fastapi import APIRouter

from app.api.v1 import allocations, buildings, floors, rooms
from app.config.logging import get_logger
from app.config.settings import settings

logger = get_logger(__name__)

# Create main API v1 router with proper configuration
router = APIRouter(
    responses={
        400: {"description": "Bad Request"},
        403: {"description": "Forbidden"},
        404: {"description": "Not Found"},
        500: {"description": "Internal Server Error"}
    }
)

loaded_modules = []

for module in (allocations, buildings, floors, rooms):
    router.include_router(module.router)
    loaded_modules.append(module.__name__.rsplit(".", 1)[-1])


# Health and diagnostic endpoints
@router.get("/health", tags=["System Health"])
def api_health_check():
    """
    API health check with module status
    """
    return {
        "status": "healthy",
        "version": settings.API_VERSION,
        "api_version": "v1",
        "loaded_modules": loaded_modules,
        "total_routes": len(router.routes),
        "description": "Hostel room allocation API v1"
    }


logger.info(f"API v1 router initialized with modules: {loaded_modules}")
