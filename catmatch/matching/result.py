"""Match Result - Standardized scoring output

Provides the confidence buckets and the per-category match record returned
by the matcher.
"""

from dataclasses import dataclass, field
from enum import Enum

from catmatch.schemas.category_schema import Category


class Confidence(str, Enum):
    """매칭 신뢰도

    정렬 시 동점이면 high > medium > low 순으로 우선합니다.
    """

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return {Confidence.HIGH: 3, Confidence.MEDIUM: 2, Confidence.LOW: 1}[self]


@dataclass(frozen=True)
class ScoreBreakdown:
    """(키워드, 카테고리) 한 쌍의 점수 계산 결과

    Attributes:
        score: 부호 있는 원점수 (패널티로 음수 가능)
        confidence: 신뢰도
        gender_match: 성별 일치 여부
        product_type_match: 상품 유형 일치 여부
        matched_keywords: 진단용 일치 키워드 ([GENDER:...], [TYPE:...] 등)
        matched_keyword_count: 카테고리 텍스트에 등장한 키워드 수
    """

    score: float
    confidence: Confidence
    gender_match: bool = False
    product_type_match: bool = False
    matched_keywords: tuple[str, ...] = ()
    matched_keyword_count: int = 0


@dataclass
class MatchResult:
    """카테고리 매칭 결과 한 건"""

    category: Category
    score: float
    confidence: Confidence
    path: list[str] = field(default_factory=list)
    path_string: str = ""
    is_leaf: bool = True
    matched_keywords: list[str] = field(default_factory=list)
    gender_match: bool = False
    product_type_match: bool = False

    @property
    def display_score(self) -> float:
        """UI 진행바용 점수 (0 이상으로 보정, 정렬에는 사용하지 않음)"""
        return max(0.0, self.score)

    @classmethod
    def from_breakdown(cls, category: Category, breakdown: ScoreBreakdown) -> "MatchResult":
        """점수 계산 결과로 MatchResult 생성

        Args:
            category: 점수를 매긴 카테고리
            breakdown: Scorer.score() 결과

        Returns:
            MatchResult
        """
        return cls(
            category=category,
            score=breakdown.score,
            confidence=breakdown.confidence,
            path=list(category.path),
            path_string=category.path_string,
            is_leaf=category.is_leaf,
            matched_keywords=list(breakdown.matched_keywords),
            gender_match=breakdown.gender_match,
            product_type_match=breakdown.product_type_match,
        )
