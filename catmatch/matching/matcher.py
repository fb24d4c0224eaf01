"""Category matcher - keyword extraction + scoring over a taxonomy."""

from __future__ import annotations

from typing import Optional

from catmatch.core.logging import logger, sanitize_for_log
from catmatch.matching.keywords import KeywordExtractor, KeywordSet
from catmatch.matching.profile import MarketplaceProfile
from catmatch.matching.result import MatchResult
from catmatch.matching.scorer import Scorer
from catmatch.matching.taxonomy import TaxonomyStore


class CategoryMatcher:
    """한 마켓플레이스 프로필로 동작하는 매칭기

    Usage:
        matcher = CategoryMatcher(load_profile("hepsiburada"))
        keywords = matcher.extract("Kadın Mavi Elbise")
        results = matcher.rank(keywords, store, top_n=5)
    """

    def __init__(self, profile: MarketplaceProfile):
        self.profile = profile
        self.extractor = KeywordExtractor(profile)
        self.scorer = Scorer(profile, self.extractor)

    @property
    def marketplace(self) -> str:
        return self.profile.name

    def extract(self, title: Optional[str], description: Optional[str] = None) -> KeywordSet:
        return self.extractor.extract(title, description)

    def rank(self, keywords: KeywordSet, store: TaxonomyStore, top_n: int = 5,
             min_score: float = 5.0) -> list[MatchResult]:
        """스토어의 리프 카테고리 전체를 점수화하여 상위 N개 반환"""
        if keywords.is_empty:
            return []

        leaves = store.leaves()
        logger.debug(
            f"[MATCH] {self.marketplace}: scoring {len(leaves)} leaves, "
            f"genders={list(keywords.genders)}, types={list(keywords.product_types)}, brands={list(keywords.brands)}"
        )
        results = self.scorer.rank(
            keywords,
            ((category, store.text_of(category)) for category in leaves),
            top_n=top_n,
            min_score=min_score,
        )
        if results:
            top = results[0]
            logger.info(
                f"[MATCH] {self.marketplace}: top='{sanitize_for_log(top.path_string)}' "
                f"score={top.score:.1f} confidence={top.confidence.value} ({len(results)} results)"
            )
        else:
            logger.info(f"[MATCH] {self.marketplace}: no category above threshold")
        return results

    def match(self, title: Optional[str], description: Optional[str], store: TaxonomyStore,
              top_n: int = 5, min_score: float = 5.0) -> list[MatchResult]:
        """상품명/설명으로 바로 매칭 (추출 + 순위)"""
        return self.rank(self.extract(title, description), store, top_n=top_n, min_score=min_score)

    def suggest_terms(self, word: str) -> list[str]:
        return self.extractor.suggest_terms(word)
