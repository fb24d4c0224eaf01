"""Engine Results - Standardized Response Format

Results handed from the service to the API layer. `cached` tells the
caller whether the answer came from the match cache (or a fetch another
request had already started) instead of a fresh scoring pass.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from catmatch.engine.cache import LoadStatus
from catmatch.matching.keywords import KeywordSet
from catmatch.matching.result import MatchResult


@dataclass
class MatchResponse:
    """카테고리 매칭 응답

    Attributes:
        marketplace: 마켓플레이스 이름
        matches: 점수 내림차순 후보 목록
        cached: 매칭 캐시에서 반환했는지 여부
        keywords: 추출된 키워드 (디버깅용)
    """

    marketplace: str
    matches: list[MatchResult] = field(default_factory=list)
    cached: bool = False
    keywords: Optional[KeywordSet] = None

    @property
    def best(self) -> Optional[MatchResult]:
        return self.matches[0] if self.matches else None

    @classmethod
    def empty(cls, marketplace: str, keywords: Optional[KeywordSet] = None) -> "MatchResponse":
        """키워드가 없어 매칭하지 않은 응답"""
        return cls(marketplace=marketplace, matches=[], cached=False, keywords=keywords)


@dataclass
class AttributeLookup:
    """속성 캐시 조회 결과 (대기하지 않는 조회)

    Attributes:
        status: 로드 상태 (idle / loading / ready / error)
        attributes: 로드된 속성 목록 (ready일 때만)
        error_message: 마지막 조회 실패 메시지 (error일 때만)
        prefetch_started: 이번 호출로 백그라운드 조회를 시작했는지 여부
    """

    status: LoadStatus
    attributes: Optional[list[Any]] = None
    error_message: Optional[str] = None
    prefetch_started: bool = False

    @property
    def is_ready(self) -> bool:
        return self.status == LoadStatus.READY

    @classmethod
    def ready(cls, attributes: list[Any]) -> "AttributeLookup":
        return cls(status=LoadStatus.READY, attributes=attributes)

    @classmethod
    def error(cls, message: str, prefetch_started: bool = False) -> "AttributeLookup":
        return cls(status=LoadStatus.ERROR, error_message=message, prefetch_started=prefetch_started)
