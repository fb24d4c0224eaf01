"""Category Routes - HTTP Layer over CategoryMatchService

HTTP Layer는 요청 검증과 응답 변환만 담당하고 매칭/캐시는 Engine Layer에 위임합니다.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from catmatch.core.config import settings
from catmatch.core.exceptions import (
    CategoryEngineException,
    FetchException,
    UnknownMarketplaceException,
    ValidationException,
)
from catmatch.core.logging import logger, sanitize_for_log
from catmatch.engine import CacheCoordinator, CategoryMatchService, JsonSnapshotSource, LoadStatus
from catmatch.schemas.api_schema import (
    AttributeData,
    AttributeResponse,
    CategoryResponse,
    CategorySearchData,
    CategorySearchResponse,
    CategoryTreeData,
    CategoryTreeResponse,
    MatchCategoryRequest,
    MatchCategoryResponse,
    MatchData,
    MatchResultSchema,
)

router = APIRouter(prefix="/api/v1/marketplaces/{marketplace}", tags=["category"])

# 싱글톤
_cache_coordinator: Optional[CacheCoordinator] = None
_match_service: Optional[CategoryMatchService] = None


def get_cache_coordinator() -> CacheCoordinator:
    """CacheCoordinator 싱글톤 (프로세스당 하나)"""
    global _cache_coordinator
    if _cache_coordinator is None:
        _cache_coordinator = CacheCoordinator.from_settings()
    return _cache_coordinator


def get_match_service(
    cache: CacheCoordinator = Depends(get_cache_coordinator),
) -> CategoryMatchService:
    """CategoryMatchService 싱글톤

    카테고리 원본은 스냅샷 디렉터리(settings.snapshot_dir)에서 읽습니다.
    """
    global _match_service
    if _match_service is None:
        _match_service = CategoryMatchService(
            source=JsonSnapshotSource(settings.snapshot_dir),
            cache=cache,
        )
    return _match_service


def reset_services() -> None:
    """싱글톤 초기화 (앱 종료 후 재생성용)"""
    global _cache_coordinator, _match_service
    _cache_coordinator = None
    _match_service = None


def _status_code_for(error: CategoryEngineException) -> int:
    if isinstance(error, UnknownMarketplaceException):
        return 404
    if isinstance(error, ValidationException):
        return 400
    if isinstance(error, FetchException):
        return 503
    return 500


def _error_message(error: CategoryEngineException) -> str:
    """에러 코드별 사용자 메시지"""
    if isinstance(error, UnknownMarketplaceException):
        return "지원하지 않는 마켓플레이스입니다."
    if isinstance(error, ValidationException):
        return f"입력 검증 실패: {error.message}"
    if isinstance(error, FetchException):
        return "카테고리 정보를 불러오지 못했습니다. 잠시 후 다시 시도해주세요."
    return "요청 처리 중 오류가 발생했습니다."


def _fail(response: Response, error: CategoryEngineException) -> dict:
    response.status_code = _status_code_for(error)
    logger.warning(f"[API] {error}")
    return {
        "status": "error",
        "data": None,
        "message": _error_message(error),
        "error_code": error.error_code,
    }


@router.post("/match-category", response_model=MatchCategoryResponse)
async def match_category(
    marketplace: str,
    request: MatchCategoryRequest,
    response: Response,
    service: CategoryMatchService = Depends(get_match_service),
):
    """상품명/설명으로 카테고리 추천

    Flow:
        1. 키워드 추출 (키워드가 없으면 빈 결과)
        2. 매칭 캐시 확인 (cached=True)
        3. 카테고리 트리 보장 후 리프 카테고리 점수화
    """
    logger.info(f"[API] Match request: {marketplace}, title='{sanitize_for_log(request.title)}'")
    try:
        result = await service.match_category(
            marketplace, request.title, request.description, top_n=request.top_n,
        )
    except CategoryEngineException as e:
        return MatchCategoryResponse(**_fail(response, e))

    matches = [MatchResultSchema.from_result(m) for m in result.matches]
    return MatchCategoryResponse(
        status="success",
        data=MatchData(
            marketplace=result.marketplace,
            matches=matches,
            count=len(matches),
            cached=result.cached,
            keywords=result.keywords.to_dict() if result.keywords is not None else None,
        ),
        message="카테고리 후보를 찾았습니다." if matches else "일치하는 카테고리가 없습니다.",
        error_code=None,
    )


@router.get("/categories/search", response_model=CategorySearchResponse)
async def search_categories(
    marketplace: str,
    response: Response,
    q: str = Query("", max_length=500, description="검색어"),
    limit: Optional[int] = Query(None, ge=1, le=100, description="최대 결과 수"),
    service: CategoryMatchService = Depends(get_match_service),
):
    """카테고리 수동 검색 (이름/경로 부분 일치)"""
    try:
        categories = await service.search_category(marketplace, q, limit=limit)
    except CategoryEngineException as e:
        return CategorySearchResponse(**_fail(response, e))

    return CategorySearchResponse(
        status="success",
        data=CategorySearchData(
            marketplace=marketplace.lower(),
            query=q,
            categories=categories,
            count=len(categories),
        ),
        message="" if categories else "검색 결과가 없습니다.",
    )


@router.get("/categories/tree", response_model=CategoryTreeResponse)
async def get_category_tree(
    marketplace: str,
    response: Response,
    service: CategoryMatchService = Depends(get_match_service),
):
    """표시용 카테고리 트리"""
    try:
        tree = await service.get_category_tree(marketplace)
    except CategoryEngineException as e:
        return CategoryTreeResponse(**_fail(response, e))

    return CategoryTreeResponse(
        status="success",
        data=CategoryTreeData(
            marketplace=marketplace.lower(),
            tree=tree,
            load_status=service.taxonomy_status(marketplace).value,
        ),
    )


@router.get("/categories/{category_id}", response_model=CategoryResponse)
async def get_category(
    marketplace: str,
    category_id: int,
    response: Response,
    service: CategoryMatchService = Depends(get_match_service),
):
    """카테고리 단건 조회"""
    try:
        category = await service.get_category_by_id(marketplace, category_id)
    except CategoryEngineException as e:
        return CategoryResponse(**_fail(response, e))

    if category is None:
        response.status_code = 404
        return CategoryResponse(
            status="error",
            message="카테고리를 찾을 수 없습니다.",
            error_code="CATEGORY_NOT_FOUND",
        )
    return CategoryResponse(status="success", data=category)


@router.get("/categories/{category_id}/attributes", response_model=AttributeResponse)
async def get_category_attributes(
    marketplace: str,
    category_id: int,
    response: Response,
    prefetch: bool = Query(False, description="캐시에 없으면 백그라운드 조회 시작"),
    service: CategoryMatchService = Depends(get_match_service),
):
    """카테고리 속성 (대기하지 않음)

    load_status로 '로딩 중' / '로드 완료' / '오류'를 구분합니다.
    로딩 중이면 잠시 후 다시 요청하면 됩니다.
    """
    try:
        lookup = service.get_cached_attributes(marketplace, category_id, prefetch=prefetch)
    except CategoryEngineException as e:
        return AttributeResponse(**_fail(response, e))

    if lookup.status == LoadStatus.ERROR:
        message = lookup.error_message or "속성 조회에 실패했습니다."
    elif lookup.status == LoadStatus.LOADING:
        message = "속성을 불러오는 중입니다."
    else:
        message = ""

    return AttributeResponse(
        status="error" if lookup.status == LoadStatus.ERROR else "success",
        data=AttributeData(
            marketplace=marketplace.lower(),
            category_id=category_id,
            load_status=lookup.status.value,
            attributes=lookup.attributes,
            prefetch_started=lookup.prefetch_started,
        ),
        message=message,
        error_code="ATTRIBUTE_FETCH_ERROR" if lookup.status == LoadStatus.ERROR else None,
    )
