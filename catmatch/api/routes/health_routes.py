"""헬스 체크 및 캐시 관리 엔드포인트"""
from datetime import datetime

from fastapi import APIRouter, Depends

from catmatch import __version__
from catmatch.api.routes.category_routes import get_match_service
from catmatch.core.logging import logger
from catmatch.engine import CategoryMatchService, LoadStatus
from catmatch.schemas.api_schema import CacheStatusResponse, HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(service: CategoryMatchService = Depends(get_match_service)):
    """
    헬스 체크 엔드포인트

    - 서버 상태
    - 마켓플레이스별 카테고리 로드 상태 (idle / loading / ready / error)
    """
    marketplaces = {name: service.taxonomy_status(name).value for name in service.marketplaces}
    has_error = any(status == LoadStatus.ERROR.value for status in marketplaces.values())

    return HealthResponse(
        status="degraded" if has_error else "ok",
        timestamp=datetime.now(),
        version=__version__,
        marketplaces=marketplaces,
    )


@router.get("/api/v1/cache/status", response_model=CacheStatusResponse)
async def cache_status(service: CategoryMatchService = Depends(get_match_service)):
    """캐시 네임스페이스별 항목 수 / 로드 상태"""
    return CacheStatusResponse(status="success", data=service.status())


@router.delete("/api/v1/cache", response_model=CacheStatusResponse)
async def clear_cache(service: CategoryMatchService = Depends(get_match_service)):
    """모든 캐시 비우기 (진행 중인 조회 결과는 캐시에 쓰이지 않음)"""
    service.clear_cache()
    logger.info("[API] Cache cleared by request")
    return CacheStatusResponse(status="success", data=service.status(), message="캐시를 비웠습니다.")


@router.get("/")
async def root():
    """루트 엔드포인트"""
    return {
        "service": "카테고리 매칭 서비스",
        "version": __version__,
        "docs": "/docs"
    }
