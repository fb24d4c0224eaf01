"""Pydantic API 스키마 정의 (요청 검증 + 응답 envelope)"""
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from catmatch.schemas.attribute_schema import Attribute
from catmatch.schemas.category_schema import Category, CategoryTreeNode


class MatchCategoryRequest(BaseModel):
    """카테고리 매칭 요청"""
    title: str = Field("", max_length=500, description="상품명")
    description: str = Field("", max_length=5000, description="상품 설명 (앞부분만 사용)")
    top_n: Optional[int] = Field(None, ge=1, le=50, description="반환할 후보 수 (기본 5)")

    @field_validator("title", "description", mode="before")
    @classmethod
    def validate_text(cls, v: Any) -> str:
        """None은 빈 문자열로, 제어 문자는 공백으로"""
        if v is None:
            return ""
        if not isinstance(v, str):
            raise ValueError("텍스트 필드는 문자열이어야 합니다")
        if "\0" in v:
            raise ValueError("허용되지 않는 문자가 포함되어 있습니다")
        return v.replace("\r", " ").replace("\n", " ")


class MatchResultSchema(BaseModel):
    """매칭 후보 하나"""
    category_id: int = Field(..., description="카테고리 ID")
    name: str = Field(..., description="카테고리명")
    display_name: str = Field(..., description="표시명")
    path: list[str] = Field(..., description="루트부터의 경로")
    path_string: str = Field(..., description="경로 문자열 (A > B > C)")
    is_leaf: bool = Field(..., description="리프 여부")
    score: float = Field(..., description="원점수 (음수 가능)")
    display_score: float = Field(..., ge=0, description="표시용 점수 (0 이상)")
    confidence: str = Field(..., description="high | medium | low")
    matched_keywords: list[str] = Field(default_factory=list, description="매칭된 키워드/진단 태그")
    gender_match: bool = Field(False, description="성별 일치 여부")
    product_type_match: bool = Field(False, description="상품 유형 일치 여부")

    @classmethod
    def from_result(cls, result: Any) -> "MatchResultSchema":
        return cls(
            category_id=result.category.id,
            name=result.category.name,
            display_name=result.category.display_name,
            path=list(result.path),
            path_string=result.path_string,
            is_leaf=result.is_leaf,
            score=result.score,
            display_score=result.display_score,
            confidence=result.confidence.value,
            matched_keywords=list(result.matched_keywords),
            gender_match=result.gender_match,
            product_type_match=result.product_type_match,
        )


class MatchData(BaseModel):
    """매칭 결과"""
    marketplace: str = Field(..., description="마켓플레이스")
    matches: list[MatchResultSchema] = Field(default_factory=list, description="점수 내림차순 후보")
    count: int = Field(..., ge=0, description="후보 수")
    cached: bool = Field(..., description="매칭 캐시 사용 여부")
    keywords: Optional[dict[str, list[str]]] = Field(None, description="추출된 키워드")


class _Envelope(BaseModel):
    status: str = Field(..., description="success or error")
    message: str = Field("", description="응답 메시지")
    error_code: str | None = Field(None, description="에러 코드 (error 시)")


class MatchCategoryResponse(_Envelope):
    """카테고리 매칭 응답"""
    data: Optional[MatchData] = Field(None, description="매칭 결과")


class CategorySearchData(BaseModel):
    marketplace: str
    query: str
    categories: list[Category] = Field(default_factory=list)
    count: int = Field(..., ge=0)


class CategorySearchResponse(_Envelope):
    """수동 카테고리 검색 응답"""
    data: Optional[CategorySearchData] = None


class CategoryTreeData(BaseModel):
    marketplace: str
    tree: list[CategoryTreeNode] = Field(default_factory=list)
    load_status: str = Field(..., description="idle | loading | ready | error")


class CategoryTreeResponse(_Envelope):
    """카테고리 트리 응답"""
    data: Optional[CategoryTreeData] = None


class CategoryResponse(_Envelope):
    """카테고리 단건 응답"""
    data: Optional[Category] = None


class AttributeData(BaseModel):
    marketplace: str
    category_id: int
    load_status: str = Field(..., description="idle | loading | ready | error")
    attributes: Optional[list[Attribute]] = Field(None, description="ready일 때 속성 목록")
    prefetch_started: bool = Field(False, description="이번 요청으로 백그라운드 조회를 시작했는지")


class AttributeResponse(_Envelope):
    """카테고리 속성 응답 (대기하지 않음)"""
    data: Optional[AttributeData] = None


class HealthResponse(BaseModel):
    """헬스 체크 응답"""
    status: str
    timestamp: datetime
    version: str
    marketplaces: dict[str, str] = Field(default_factory=dict, description="마켓플레이스별 카테고리 로드 상태")


class CacheStatusResponse(_Envelope):
    """캐시 상태 응답"""
    data: Optional[dict[str, Any]] = None
