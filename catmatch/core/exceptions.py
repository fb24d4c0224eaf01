"""커스텀 예외 정의 (Structured Exception Hierarchy)"""
from typing import Any, Optional


# 기본 예외 클래스
class CategoryEngineException(Exception):
    """기본 예외 클래스 - 모든 커스텀 예외의 부모"""
    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


# 외부 데이터 조회 관련 예외
class FetchException(CategoryEngineException):
    """카테고리/속성 조회 실패의 기본 클래스"""
    def __init__(self, message: str, error_code: str = "FETCH_ERROR", details: Optional[dict[str, Any]] = None):
        super().__init__(message, error_code or "FETCH_ERROR", details)


class TaxonomyFetchException(FetchException):
    """카테고리 트리 조회 실패"""
    def __init__(self, marketplace: str, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Failed to fetch {marketplace} categories: {reason}"
        super().__init__(message, "TAXONOMY_FETCH_ERROR",
                        details or {"marketplace": marketplace, "reason": reason})


class AttributeFetchException(FetchException):
    """카테고리 속성 조회 실패"""
    def __init__(self, marketplace: str, category_id: int, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Failed to fetch {marketplace} attributes for category {category_id}: {reason}"
        super().__init__(message, "ATTRIBUTE_FETCH_ERROR",
                        details or {"marketplace": marketplace, "category_id": category_id, "reason": reason})


# 캐시 관련 예외
class CacheException(CategoryEngineException):
    """캐시 관련 예외"""
    def __init__(self, message: str, error_code: str = "CACHE_ERROR", details: Optional[dict[str, Any]] = None):
        super().__init__(message, error_code or "CACHE_ERROR", details)


class CacheClosedException(CacheException):
    """종료된 캐시에 대한 요청"""
    def __init__(self, namespace: str, details: Optional[dict[str, Any]] = None):
        message = f"Cache namespace '{namespace}' is closed"
        super().__init__(message, "CACHE_CLOSED", details or {"namespace": namespace})


# 유효성 검증 관련 예외
class ValidationException(CategoryEngineException):
    """유효성 검증 예외"""
    def __init__(self, field: str, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Validation failed for '{field}': {reason}"
        super().__init__(message, "VALIDATION_ERROR",
                        details or {"field": field, "reason": reason})


class InvalidQueryException(ValidationException):
    """유효하지 않은 검색어"""
    def __init__(self, reason: str, details: Optional[dict[str, Any]] = None):
        super().__init__("query", reason, details)


class UnknownMarketplaceException(CategoryEngineException):
    """지원하지 않는 마켓플레이스"""
    def __init__(self, marketplace: str, details: Optional[dict[str, Any]] = None):
        message = f"Unknown marketplace: {marketplace}"
        super().__init__(message, "UNKNOWN_MARKETPLACE", details or {"marketplace": marketplace})


# 리소스 관련 예외
class ResourceException(CategoryEngineException):
    """리소스(YAML) 로드/검증 오류"""
    def __init__(self, resource: str, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Invalid resource '{resource}': {reason}"
        super().__init__(message, "RESOURCE_ERROR",
                        details or {"resource": resource, "reason": reason})
