"""Category Match Service - Main Engine Entry Point

Ties the cache coordinator, the category source and the per-marketplace
matchers together:
1. Taxonomy fetch (once per TTL, shared by concurrent callers)
2. Keyword extraction + scoring over leaf categories
3. Match result cache keyed by (marketplace, title, description prefix, top_n)
4. Attribute lists with a non-blocking status read for UIs
"""

from typing import Any, Iterable, Optional

from pydantic import ValidationError

from catmatch.core.config import settings
from catmatch.core.exceptions import (
    AttributeFetchException,
    CategoryEngineException,
    InvalidQueryException,
    TaxonomyFetchException,
    UnknownMarketplaceException,
    ValidationException,
)
from catmatch.core.logging import logger, sanitize_for_log
from catmatch.matching.matcher import CategoryMatcher
from catmatch.matching.profile import load_profile
from catmatch.matching.taxonomy import TaxonomyStore
from catmatch.schemas.attribute_schema import dedupe_by_id, parse_attribute, unwrap_attribute_payload
from catmatch.schemas.category_schema import Category, CategoryTreeNode
from catmatch.utils.hash_utils import generate_attribute_cache_key, generate_match_cache_key

from .cache import CacheCoordinator, LoadStatus
from .result import AttributeLookup, MatchResponse
from .sources import CategorySource

# 수동 검색어 최대 길이
SEARCH_QUERY_MAX_LENGTH = 200


class CategoryMatchService:
    """카테고리 매칭 서비스

    Args:
        source: 카테고리/속성 원본 데이터 제공자
        cache: 프로세스 공용 캐시 코디네이터
        marketplaces: 허용 마켓플레이스 (기본값: settings.marketplaces)
    """

    def __init__(
        self,
        source: CategorySource,
        cache: CacheCoordinator,
        marketplaces: Optional[Iterable[str]] = None,
    ):
        if source is None:
            raise ValueError("source must not be None")
        if cache is None:
            raise ValueError("cache must not be None")

        self.source = source
        self.cache = cache
        self.marketplaces: tuple[str, ...] = tuple(
            m.strip().lower() for m in (marketplaces if marketplaces is not None else settings.marketplaces)
        )
        self._matchers: dict[str, CategoryMatcher] = {}

    # ------------------------------------------------------------------
    # 마켓플레이스 / 매칭기
    # ------------------------------------------------------------------

    def _check_marketplace(self, marketplace: str) -> str:
        name = (marketplace or "").strip().lower()
        if name not in self.marketplaces:
            raise UnknownMarketplaceException(marketplace)
        return name

    def matcher_for(self, marketplace: str) -> CategoryMatcher:
        """마켓플레이스별 매칭기 (프로필 로드 후 재사용)"""
        name = self._check_marketplace(marketplace)
        matcher = self._matchers.get(name)
        if matcher is None:
            matcher = CategoryMatcher(load_profile(name))
            self._matchers[name] = matcher
        return matcher

    # ------------------------------------------------------------------
    # 카테고리 트리
    # ------------------------------------------------------------------

    async def _load_taxonomy(self, marketplace: str) -> TaxonomyStore:
        try:
            raw = await self.source.fetch_taxonomy(marketplace)
        except CategoryEngineException:
            raise
        except Exception as e:
            raise TaxonomyFetchException(marketplace, f"{type(e).__name__}: {e}") from e

        try:
            store = TaxonomyStore.from_records(raw)
        except (TypeError, ValueError) as e:
            raise TaxonomyFetchException(marketplace, f"unreadable taxonomy payload: {e}") from e
        logger.info(
            f"[TAXONOMY] {marketplace}: loaded {len(store)} categories "
            f"({len(store.leaves())} leaves, {store.rejected_count} rejected)"
        )
        return store

    async def get_taxonomy(self, marketplace: str) -> TaxonomyStore:
        """카테고리 스토어 보장 (캐시 유효하면 I/O 없음)

        Raises:
            UnknownMarketplaceException: 지원하지 않는 마켓플레이스
            TaxonomyFetchException: 조회 실패 (대기 중인 모든 호출자에게 전달)
        """
        name = self._check_marketplace(marketplace)
        return await self.cache.taxonomies.ensure(name, lambda: self._load_taxonomy(name))

    def prefetch(self, marketplace: str) -> bool:
        """카테고리 트리 백그라운드 로드 시작

        Returns:
            새로 조회를 시작했으면 True
        """
        name = self._check_marketplace(marketplace)
        started = self.cache.taxonomies.prefetch(name, lambda: self._load_taxonomy(name))
        if started:
            logger.info(f"[TAXONOMY] {name}: prefetch started")
        return started

    def taxonomy_status(self, marketplace: str) -> LoadStatus:
        name = self._check_marketplace(marketplace)
        return self.cache.taxonomies.load_status(name)

    async def get_category_tree(self, marketplace: str) -> list[CategoryTreeNode]:
        store = await self.get_taxonomy(marketplace)
        return store.tree

    async def get_category_by_id(self, marketplace: str, category_id: int) -> Optional[Category]:
        store = await self.get_taxonomy(marketplace)
        return store.find_by_id(category_id)

    # ------------------------------------------------------------------
    # 매칭 / 검색
    # ------------------------------------------------------------------

    async def match_category(
        self,
        marketplace: str,
        title: Optional[str],
        description: Optional[str] = "",
        top_n: Optional[int] = None,
    ) -> MatchResponse:
        """상품명/설명으로 카테고리 후보 추천

        - 키워드가 하나도 없으면 카테고리를 조회하지 않고 빈 결과 반환
        - 같은 (상품명, 설명 앞부분, top_n) 요청은 매칭 캐시에서 반환 (cached=True)
        - 결과 0건도 성공 (빈 목록)

        Raises:
            UnknownMarketplaceException: 지원하지 않는 마켓플레이스
            ValidationException: top_n이 1 미만
            TaxonomyFetchException: 카테고리 트리 조회 실패
        """
        matcher = self.matcher_for(marketplace)
        name = matcher.marketplace

        if top_n is None:
            top_n = settings.match_default_top_n
        if top_n < 1:
            raise ValidationException("top_n", "must be at least 1")
        top_n = min(top_n, settings.match_max_top_n)

        keywords = matcher.extract(title, description)
        if keywords.is_empty:
            logger.info(f"[MATCH] {name}: no keywords in '{sanitize_for_log(title)}', skipping")
            return MatchResponse.empty(name, keywords)

        key = generate_match_cache_key(
            name, title or "", description or "", top_n,
            description_prefix=settings.match_description_prefix,
        )
        computed = False

        async def compute() -> list:
            nonlocal computed
            computed = True
            store = await self.get_taxonomy(name)
            return matcher.rank(keywords, store, top_n=top_n, min_score=settings.match_min_score)

        matches = await self.cache.matches.ensure(key, compute)
        if not computed:
            logger.debug(f"[MATCH] {name}: served from match cache ({len(matches)} results)")
        return MatchResponse(marketplace=name, matches=list(matches), cached=not computed, keywords=keywords)

    async def search_category(
        self,
        marketplace: str,
        query: Optional[str],
        limit: Optional[int] = None,
        leaves_only: bool = True,
    ) -> list[Category]:
        """수동 카테고리 검색 (이름/경로 부분 일치)

        빈 검색어는 빈 목록을 반환합니다.

        Raises:
            InvalidQueryException: 검색어가 너무 긴 경우
            ValidationException: limit이 1 미만
        """
        name = self._check_marketplace(marketplace)
        if limit is None:
            limit = settings.search_default_limit
        if limit < 1:
            raise ValidationException("limit", "must be at least 1")
        if query and len(query) > SEARCH_QUERY_MAX_LENGTH:
            raise InvalidQueryException(f"must be at most {SEARCH_QUERY_MAX_LENGTH} characters")
        if not query or not query.strip():
            return []

        store = await self.get_taxonomy(name)
        results = store.search_substring(query, limit=limit, leaves_only=leaves_only)
        logger.info(f"[SEARCH] {name}: '{sanitize_for_log(query)}' → {len(results)} results")
        return results

    def suggest_terms(self, marketplace: str, word: str) -> list[str]:
        """단어의 번역/동의어 후보"""
        return self.matcher_for(marketplace).suggest_terms(word)

    # ------------------------------------------------------------------
    # 카테고리 속성
    # ------------------------------------------------------------------

    async def _load_attributes(self, marketplace: str, category_id: int) -> list:
        try:
            raw = await self.source.fetch_category_attributes(marketplace, category_id)
        except CategoryEngineException:
            raise
        except Exception as e:
            raise AttributeFetchException(marketplace, category_id, f"{type(e).__name__}: {e}") from e

        attributes = []
        for record in unwrap_attribute_payload(raw):
            try:
                attributes.append(parse_attribute(record))
            except ValidationError as e:
                logger.warning(
                    f"[ATTRIBUTE] {marketplace}/{category_id}: skipping malformed attribute "
                    f"({e.error_count()} errors)"
                )
        attributes = dedupe_by_id(attributes)
        logger.info(f"[ATTRIBUTE] {marketplace}/{category_id}: loaded {len(attributes)} attributes")
        return attributes

    async def ensure_attributes(self, marketplace: str, category_id: int) -> list:
        """카테고리 속성 목록 보장 (대기)

        Raises:
            AttributeFetchException: 조회 실패
        """
        name = self._check_marketplace(marketplace)
        key = generate_attribute_cache_key(name, category_id)
        return await self.cache.attributes.ensure(key, lambda: self._load_attributes(name, category_id))

    def get_cached_attributes(self, marketplace: str, category_id: int, prefetch: bool = False) -> AttributeLookup:
        """기다리지 않는 속성 조회

        캐시에 있으면 ready, 아니면 현재 상태(idle / loading / error)만 반환합니다.
        prefetch=True면 백그라운드 조회를 시작하고 loading을 반환합니다.
        실행 중인 이벤트 루프 안에서 호출해야 합니다.
        """
        name = self._check_marketplace(marketplace)
        key = generate_attribute_cache_key(name, category_id)

        cached = self.cache.attributes.get(key)
        if cached is not None:
            return AttributeLookup.ready(cached)

        started = False
        if prefetch:
            started = self.cache.attributes.prefetch(key, lambda: self._load_attributes(name, category_id))

        status = self.cache.attributes.load_status(key)
        if status == LoadStatus.ERROR:
            error = self.cache.attributes.last_error(key)
            return AttributeLookup.error(str(error) if error else "unknown error", prefetch_started=started)
        return AttributeLookup(status=status, prefetch_started=started)

    # ------------------------------------------------------------------
    # 상태 / 종료
    # ------------------------------------------------------------------

    def status(self) -> dict[str, Any]:
        """마켓플레이스별 로드 상태 + 캐시 요약"""
        marketplaces = {}
        for name in self.marketplaces:
            store = self.cache.taxonomies.get_stale(name)
            marketplaces[name] = {
                "taxonomy": self.cache.taxonomies.load_status(name).value,
                "categories": len(store) if store is not None else 0,
            }
        return {"marketplaces": marketplaces, "cache": self.cache.status()}

    def clear_cache(self) -> None:
        self.cache.clear()

    async def close(self) -> None:
        await self.cache.close()
        logger.info("[SERVICE] Category match service closed")
