"""Category scorer - weighted relevance of a keyword set to one category.

Scoring is cumulative, in this order: gender bonus, wrong-gender penalty,
product type, brand, generic keywords (plus optional name similarity),
combination bonuses, assignable-leaf bonus, generic-name penalty.
"""

from __future__ import annotations

from typing import Iterable, Optional

from rapidfuzz import fuzz, utils

from catmatch.matching.keywords import KeywordExtractor, KeywordSet
from catmatch.matching.normalize import contains_term
from catmatch.matching.profile import MarketplaceProfile, ScoringWeights
from catmatch.matching.result import Confidence, MatchResult, ScoreBreakdown
from catmatch.matching.taxonomy import CategoryText
from catmatch.schemas.category_schema import Category


def classify_confidence(
    score: float,
    matched_keyword_count: int,
    gender_match: bool,
    product_type_match: bool,
    weights: Optional[ScoringWeights] = None,
) -> Confidence:
    """점수와 일치 신호로 신뢰도 결정

    상품 유형만 일치해도 단순 고득점보다 낮은 점수에서 high가 될 수 있습니다.
    """
    w = weights or ScoringWeights()
    if gender_match and product_type_match and score >= w.high_gender_type_score:
        return Confidence.HIGH
    if product_type_match and score >= w.high_type_score:
        return Confidence.HIGH
    if score >= w.high_score and matched_keyword_count >= w.high_min_keywords:
        return Confidence.HIGH
    if score >= w.medium_score or matched_keyword_count >= w.medium_min_keywords:
        return Confidence.MEDIUM
    return Confidence.LOW


class Scorer:
    """키워드 집합과 카테고리의 관련도 점수 계산기"""

    def __init__(self, profile: MarketplaceProfile, extractor: Optional[KeywordExtractor] = None):
        self.profile = profile
        self.weights = profile.weights
        self.extractor = extractor or KeywordExtractor(profile)
        self._all_gender_terms: tuple[str, ...] = tuple(
            sorted({term for terms in profile.gender_groups.values() for term in terms})
        )

    def _gender_groups_of(self, genders: Iterable[str]) -> list[str]:
        groups: list[str] = []
        for term in genders:
            group = self.extractor.gender_group(term)
            if group is not None and group not in groups:
                groups.append(group)
        return groups

    def _is_gendered(self, text: str) -> bool:
        return any(contains_term(text, term) for term in self._all_gender_terms)

    def _synonym_bonus(self, keyword: str, text: CategoryText) -> float:
        for term in self.extractor.translate(keyword):
            if contains_term(text.name, term):
                return self.weights.synonym_name
            if contains_term(text.path, term):
                return self.weights.synonym_path
        return 0.0

    def _name_similarity(self, keywords: Iterable[str], name: str) -> float:
        """키워드별 카테고리명 유사도의 최댓값에 가중치를 곱한 점수"""
        w = self.weights
        best = 0.0
        for keyword in keywords:
            ratio = fuzz.token_set_ratio(
                keyword, name, processor=utils.default_process, score_cutoff=w.name_similarity_cutoff
            )
            best = max(best, ratio)
        return w.name_similarity_weight * best / 100.0

    def score(self, keywords: KeywordSet, category: Category, text: Optional[CategoryText] = None) -> ScoreBreakdown:
        """카테고리 점수 계산

        Args:
            keywords: 추출된 키워드
            category: 대상 카테고리
            text: 미리 정규화한 카테고리 텍스트 (없으면 계산)

        Returns:
            ScoreBreakdown
        """
        text = text or CategoryText.of(category)
        w = self.weights
        total = 0.0
        matched: list[str] = []

        # 1. 성별 보너스 (그룹당 1회)
        gender_match = False
        for group in self._gender_groups_of(keywords.genders):
            terms = self.profile.gender_groups.get(group, [group])
            if any(contains_term(text.full, term) for term in terms):
                total += w.gender_bonus
                gender_match = True
                matched.append(f"[GENDER:{group}]")

        # 2. 다른 성별 카테고리 패널티
        if keywords.genders and not gender_match and self._is_gendered(text.full):
            total -= w.gender_penalty

        # 3. 상품 유형
        product_type_match = False
        for product_type in keywords.product_types:
            if contains_term(text.name, product_type):
                total += w.type_name_exact
            elif product_type in text.name:
                total += w.type_name_partial
            elif product_type in text.path:
                total += w.type_path
            else:
                continue
            product_type_match = True
            matched.append(f"[TYPE:{product_type}]")

        # 4. 브랜드 (브랜드명 또는 브랜드가 가리키는 카테고리 용어)
        brand_matches = 0
        for brand in keywords.brands:
            terms = (brand, *self.profile.brands.get(brand, []))
            if any(contains_term(text.name, term) for term in terms):
                total += w.brand_name
            elif any(contains_term(text.path, term) for term in terms):
                total += w.brand_path
            else:
                continue
            brand_matches += 1
            matched.append(f"[BRAND:{brand}]")

        # 5. 일반 키워드
        counted = set(keywords.brands) | set(keywords.genders) | set(keywords.product_types)
        for keyword in keywords.all:
            if keyword in counted:
                continue
            if keyword in text.name_words:
                total += w.keyword_name_exact
                matched.append(keyword)
                continue
            if len(keyword) > w.partial_min_length and keyword in text.name:
                total += w.keyword_name_partial
                matched.append(keyword)
                continue
            if len(keyword) > w.partial_min_length and keyword in text.path:
                total += w.keyword_path
                matched.append(keyword)
                continue
            bonus = self._synonym_bonus(keyword, text)
            if bonus:
                total += bonus
                matched.append(f"[SYN:{keyword}]")

        if w.name_similarity_weight > 0 and keywords.all:
            total += self._name_similarity(keywords.all, text.name)

        # 6. 조합 보너스
        if gender_match and product_type_match:
            total += w.gender_type_combo
        if brand_matches and product_type_match:
            total += w.brand_type_combo

        # 7. 바로 등록 가능한 리프
        if category.is_assignable:
            total += w.assignable_bonus

        # 8. 단일 단어(너무 일반적인) 카테고리명
        if len(text.name_words) == 1 and total < w.generic_name_threshold:
            total -= w.generic_name_penalty

        matched_count = sum(1 for keyword in keywords.all if keyword in text.full)
        return ScoreBreakdown(
            score=total,
            confidence=classify_confidence(total, matched_count, gender_match, product_type_match, w),
            gender_match=gender_match,
            product_type_match=product_type_match,
            matched_keywords=tuple(matched),
            matched_keyword_count=matched_count,
        )

    def rank(
        self,
        keywords: KeywordSet,
        categories: Iterable[tuple[Category, CategoryText]],
        top_n: int = 5,
        min_score: float = 5.0,
    ) -> list[MatchResult]:
        """카테고리 목록 점수 계산 → 필터 → 정렬 → 상위 N개

        min_score 이하 결과는 버리고, 점수 내림차순 / 동점이면 신뢰도 순으로 정렬합니다.
        """
        if keywords.is_empty or top_n <= 0:
            return []

        results: list[MatchResult] = []
        for category, text in categories:
            breakdown = self.score(keywords, category, text)
            if breakdown.score > min_score:
                results.append(MatchResult.from_breakdown(category, breakdown))

        results.sort(key=lambda r: (r.score, r.confidence.rank), reverse=True)
        return results[:top_n]
