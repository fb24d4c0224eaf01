"""API 엔드포인트 패키지 - export only."""

from .routes import category_router, get_cache_coordinator, get_match_service, health_router

__all__ = ["health_router", "category_router", "get_cache_coordinator", "get_match_service"]
