"""API routes package."""

from .category_routes import router as category_router, get_cache_coordinator, get_match_service
from .health_routes import router as health_router

__all__ = ["health_router", "category_router", "get_cache_coordinator", "get_match_service"]
