"""설정 관리 - 환경 변수 로드 및 검증"""
from pydantic_settings import BaseSettings
from pydantic import field_validator


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # 마켓플레이스
    marketplaces: list[str] = ["hepsiburada", "temu", "trendyol"]

    # 카테고리 스냅샷(JSON) 디렉터리
    # <snapshot_dir>/<marketplace>/categories.json
    # <snapshot_dir>/<marketplace>/attributes/<category_id>.json
    snapshot_dir: str = "data/snapshots"

    # 캐시 TTL (초)
    taxonomy_cache_ttl: int = 3600  # 1시간
    attribute_cache_ttl: int = 1800  # 30분
    match_cache_ttl: int = 1800  # 30분

    # 매칭 결과 / 속성 캐시가 이 크기를 넘으면 만료·실패 항목을 정리
    match_cache_max_entries: int = 100
    attribute_cache_max_entries: int = 100

    # 매칭 캐시 키에 포함할 설명(description) 앞부분 길이
    match_description_prefix: int = 200

    # 매칭
    match_default_top_n: int = 5
    match_max_top_n: int = 50
    match_min_score: float = 5.0

    # 수동 검색
    search_default_limit: int = 20

    # 앱 시작 시 카테고리 트리를 미리 로드할지 여부
    prefetch_on_startup: bool = False

    # API
    api_title: str = "카테고리 매칭 서비스"
    api_version: str = "1.0.0"
    api_description: str = "상품명/설명으로 마켓플레이스 카테고리를 추천합니다."

    # 로깅
    log_level: str = "INFO"

    @field_validator("taxonomy_cache_ttl", "attribute_cache_ttl", "match_cache_ttl")
    @classmethod
    def validate_cache_ttl(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("cache ttl must be positive")
        return v

    @field_validator("match_cache_max_entries", "attribute_cache_max_entries", "match_description_prefix")
    @classmethod
    def validate_match_cache_limits(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("match cache limits must be positive")
        return v

    @field_validator("match_default_top_n", "match_max_top_n", "search_default_limit")
    @classmethod
    def validate_result_limits(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("result limits must be positive")
        return v

    @field_validator("match_min_score")
    @classmethod
    def validate_match_min_score(cls, v: float) -> float:
        if v < 0:
            raise ValueError("match_min_score must be >= 0")
        return v

    @field_validator("marketplaces")
    @classmethod
    def validate_marketplaces(cls, v: list[str]) -> list[str]:
        cleaned = [m.strip().lower() for m in v if m and m.strip()]
        if not cleaned:
            raise ValueError("marketplaces must not be empty")
        return cleaned

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
