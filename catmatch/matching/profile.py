"""Marketplace profile - vocabularies and scoring weights as data.

One matching engine serves every marketplace; what differs between them
(stop words, translation table, brand table, weight tuning) lives in YAML
under ``catmatch/resources`` and is loaded into a ``MarketplaceProfile``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from catmatch.core.exceptions import ResourceException, UnknownMarketplaceException
from catmatch.core.logging import logger
from catmatch.matching.normalize import normalize
from catmatch.utils.resource_loader import load_common_vocabulary, load_marketplace_resource


class ScoringWeights(BaseModel):
    """점수 가중치 및 신뢰도 임계값

    기본값은 휴리스틱으로 튜닝된 출발점입니다. 절대값보다
    성별 > 상품유형 > 일반 키워드 순의 상대적 크기가 중요합니다.
    """

    model_config = ConfigDict(frozen=True)

    # 성별
    gender_bonus: float = 30
    gender_penalty: float = 60

    # 상품 유형
    type_name_exact: float = 25
    type_name_partial: float = 22
    type_path: float = 18

    # 브랜드
    brand_name: float = 50
    brand_path: float = 35

    # 일반 키워드
    keyword_name_exact: float = 15
    keyword_name_partial: float = 10
    keyword_path: float = 6
    synonym_name: float = 20
    synonym_path: float = 12
    partial_min_length: int = 3  # 부분 일치는 이 길이를 '초과'하는 키워드만

    # 카테고리명 유사도 (0이면 비활성화)
    name_similarity_weight: float = 0
    name_similarity_cutoff: float = 70

    # 조합 보너스
    gender_type_combo: float = 25
    brand_type_combo: float = 20

    # 리프/단일단어 보정
    assignable_bonus: float = 5
    generic_name_penalty: float = 5
    generic_name_threshold: float = 50

    # 신뢰도
    high_gender_type_score: float = 50
    high_type_score: float = 45
    high_score: float = 50
    high_min_keywords: int = 2
    medium_score: float = 30
    medium_min_keywords: int = 1

    # 키워드 추출: 이 길이 이하 토큰은 버림
    min_token_length: int = 2


def _normalize_terms(values: Any) -> list[str]:
    if not values:
        return []
    terms = []
    for value in values:
        term = normalize(str(value))
        if term and term not in terms:
            terms.append(term)
    return terms


def _normalize_table(table: Any) -> dict[str, list[str]]:
    if not table:
        return {}
    result: dict[str, list[str]] = {}
    for key, values in table.items():
        norm_key = normalize(str(key))
        if not norm_key:
            continue
        merged = result.setdefault(norm_key, [])
        for term in _normalize_terms(values or []):
            if term not in merged:
                merged.append(term)
    return result


class MarketplaceProfile(BaseModel):
    """마켓플레이스별 매칭 설정

    모든 용어는 검증 단계에서 normalize()를 거쳐 저장됩니다.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="마켓플레이스 이름")
    stop_words: frozenset[str] = Field(default_factory=frozenset, description="불용어")
    translations: dict[str, list[str]] = Field(default_factory=dict, description="토큰 → 번역/동의어")
    gender_groups: dict[str, list[str]] = Field(default_factory=dict, description="성별 그룹 → 동의어")
    product_types: frozenset[str] = Field(default_factory=frozenset, description="상품 유형 명사")
    brands: dict[str, list[str]] = Field(default_factory=dict, description="브랜드 → 카테고리 힌트")
    weights: ScoringWeights = Field(default_factory=ScoringWeights)

    @field_validator("stop_words", "product_types", mode="before")
    @classmethod
    def _normalize_sets(cls, v: Any) -> frozenset[str]:
        return frozenset(_normalize_terms(v))

    @field_validator("translations", "brands", mode="before")
    @classmethod
    def _normalize_tables(cls, v: Any) -> dict[str, list[str]]:
        return _normalize_table(v)

    @field_validator("gender_groups", mode="before")
    @classmethod
    def _normalize_gender_groups(cls, v: Any) -> dict[str, list[str]]:
        groups = _normalize_table(v)
        # 그룹 이름 자체도 해당 그룹의 용어로 취급
        for key, terms in groups.items():
            if key not in terms:
                terms.insert(0, key)
        return groups


def _merge_tables(*tables: dict) -> dict[str, list]:
    merged: dict[str, list] = {}
    for table in tables:
        for key, values in (table or {}).items():
            bucket = merged.setdefault(key, [])
            for value in values or []:
                if value not in bucket:
                    bucket.append(value)
    return merged


def build_profile(name: str, common: dict[str, Any], specific: dict[str, Any]) -> MarketplaceProfile:
    """공통 사전과 마켓플레이스 사전을 합쳐 프로필 생성

    - 목록(불용어, 상품유형)은 합집합
    - 표(번역, 성별 그룹, 브랜드)는 키별 병합
    - weights는 마켓플레이스 값이 기본값을 덮어씀

    Raises:
        ResourceException: 사전 형식이 잘못된 경우
    """
    try:
        return MarketplaceProfile(
            name=name,
            stop_words=[*(common.get("stop_words") or []), *(specific.get("stop_words") or [])],
            product_types=[*(common.get("product_types") or []), *(specific.get("product_types") or [])],
            translations=_merge_tables(common.get("translations") or {}, specific.get("translations") or {}),
            gender_groups=_merge_tables(common.get("gender_groups") or {}, specific.get("gender_groups") or {}),
            brands=_merge_tables(common.get("brands") or {}, specific.get("brands") or {}),
            weights=ScoringWeights(**(specific.get("weights") or {})),
        )
    except (TypeError, AttributeError, ValueError) as e:
        raise ResourceException(f"marketplaces/{name}.yaml", str(e)) from e


@lru_cache(maxsize=16)
def load_profile(marketplace: str) -> MarketplaceProfile:
    """마켓플레이스 프로필 로드 (프로세스당 1회)

    Raises:
        UnknownMarketplaceException: 리소스 파일이 없는 마켓플레이스
        ResourceException: 리소스 형식 오류
    """
    specific = load_marketplace_resource(marketplace)
    if not specific:
        raise UnknownMarketplaceException(marketplace)

    profile = build_profile(marketplace, load_common_vocabulary(), specific)
    logger.info(
        f"[PROFILE] Loaded {marketplace}: {len(profile.translations)} translations, "
        f"{len(profile.product_types)} product types, {len(profile.brands)} brands"
    )
    return profile
