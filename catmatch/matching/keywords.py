"""Keyword extraction - tokens, translations and privileged keyword classes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from catmatch.matching.normalize import contains_term, normalize
from catmatch.matching.profile import MarketplaceProfile

# 접두 일치로 번역표를 찾을 때 키의 최소 길이 ('elbise' → 'elbisesi')
_PREFIX_KEY_MIN_LENGTH = 4


@dataclass(frozen=True)
class KeywordSet:
    """한 번의 매칭 요청에서 추출된 키워드

    Attributes:
        all: 불용어를 제거한 원본 토큰 (중복 제거, 등장 순서 유지)
        translated: 원본 토큰 + 번역/동의어 확장
        genders: 성별을 나타내는 토큰
        product_types: 상품 유형 명사
        brands: 브랜드 표에 있는 토큰
    """

    all: tuple[str, ...] = ()
    translated: tuple[str, ...] = ()
    genders: tuple[str, ...] = ()
    product_types: tuple[str, ...] = ()
    brands: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        """매칭 불가 여부 (키워드가 하나도 없음)"""
        return not self.all

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "all": list(self.all),
            "translated": list(self.translated),
            "genders": list(self.genders),
            "product_types": list(self.product_types),
            "brands": list(self.brands),
        }


def _unique(items: Iterable[str]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for item in items:
        if item and item not in seen:
            seen[item] = None
    return tuple(seen)


class KeywordExtractor:
    """상품명/설명에서 KeywordSet을 만드는 추출기

    순수 함수처럼 동작합니다: 같은 입력에는 항상 같은 결과.
    """

    def __init__(self, profile: MarketplaceProfile):
        self.profile = profile
        self._gender_terms: dict[str, str] = {}
        for group, terms in profile.gender_groups.items():
            for term in terms:
                self._gender_terms.setdefault(term, group)
        # 긴 키 우선: 'kulaklik'가 'kulak'보다 먼저 매칭
        self._prefix_keys = sorted(
            (key for key in profile.translations if len(key) >= _PREFIX_KEY_MIN_LENGTH),
            key=lambda k: (-len(k), k),
        )
        # 여러 단어이거나 너무 짧아 토큰으로는 잡히지 않는 용어 ('ic camasir', 'lg')
        min_length = profile.weights.min_token_length
        self._phrase_types = tuple(sorted(
            t for t in profile.product_types if " " in t or len(t) <= min_length
        ))
        self._phrase_brands = tuple(sorted(
            b for b in profile.brands if " " in b or len(b) <= min_length
        ))

    def _phrases_in(self, terms: tuple[str, ...], texts: list[str]) -> list[str]:
        return [term for term in terms if any(contains_term(text, term) for text in texts)]

    def tokens(self, text: Optional[str]) -> list[str]:
        """정규화 → 짧은 토큰/불용어 제거"""
        min_length = self.profile.weights.min_token_length
        stop_words = self.profile.stop_words
        return [
            token
            for token in normalize(text).split()
            if len(token) > min_length and token not in stop_words
        ]

    def translate(self, token: str) -> list[str]:
        """번역표 조회

        정확히 일치하는 키, 또는 토큰이 키로 시작하는 경우(굴절형)를 찾습니다.
        """
        translations = self.profile.translations
        if token in translations:
            return list(translations[token])
        for key in self._prefix_keys:
            if token.startswith(key):
                return list(translations[key])
        return []

    def gender_group(self, term: str) -> Optional[str]:
        """성별 용어가 속한 그룹 이름 (없으면 None)"""
        return self._gender_terms.get(term)

    def extract(self, title: Optional[str], description: Optional[str] = None) -> KeywordSet:
        """상품명 + 설명에서 키워드 추출

        Args:
            title: 상품명
            description: 상품 설명

        Returns:
            KeywordSet. 둘 다 비어 있으면 모든 필드가 빈 KeywordSet.
        """
        all_tokens = _unique([*self.tokens(title), *self.tokens(description)])
        if not all_tokens:
            return KeywordSet()

        expansions: list[str] = []
        for token in all_tokens:
            expansions.extend(self.translate(token))
        translated = _unique([*all_tokens, *expansions])

        texts = [normalize(title), normalize(description)]
        genders = _unique(t for t in translated if t in self._gender_terms)
        product_types = _unique([
            *(t for t in translated if t in self.profile.product_types),
            *self._phrases_in(self._phrase_types, texts),
        ])
        brands = _unique([
            *(t for t in all_tokens if t in self.profile.brands),
            *self._phrases_in(self._phrase_brands, texts),
        ])

        return KeywordSet(
            all=all_tokens,
            translated=translated,
            genders=genders,
            product_types=product_types,
            brands=brands,
        )

    def suggest_terms(self, word: str) -> list[str]:
        """수동 카테고리 검색용 추천어 (단어 + 번역)"""
        normalized = normalize(word)
        if not normalized:
            return []
        suggestions = [normalized]
        for token in normalized.split():
            suggestions.extend(self.translate(token))
        return list(_unique(suggestions))
