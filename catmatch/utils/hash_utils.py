"""해싱 유틸리티"""
import hashlib


def hash_string(text: str) -> str:
    """
    문자열을 MD5 해시로 변환

    Args:
        text: 해시할 문자열

    Returns:
        MD5 해시 문자열
    """
    return hashlib.md5(text.encode()).hexdigest()


def generate_match_cache_key(
    marketplace: str,
    title: str,
    description: str,
    top_n: int,
    description_prefix: int = 200,
) -> str:
    """
    매칭 결과 캐시 키 생성

    제목은 전체, 설명은 앞부분만 사용합니다. 결과 개수(top_n)가 다르면
    다른 키가 되어야 잘린 결과를 재사용하지 않습니다.

    Args:
        marketplace: 마켓플레이스 이름
        title: 상품명
        description: 상품 설명
        top_n: 요청한 결과 개수
        description_prefix: 키에 포함할 설명 길이

    Returns:
        캐시 키 (match:{marketplace}:{hash})
    """
    from catmatch.matching.normalize import normalize

    normalized_title = normalize(title)
    normalized_description = normalize(description)[:description_prefix]
    hashed = hash_string(f"{normalized_title}|{normalized_description}|{top_n}")
    return f"match:{marketplace}:{hashed}"


def generate_attribute_cache_key(marketplace: str, category_id: int) -> str:
    """카테고리 속성 캐시 키 생성"""
    return f"attributes:{marketplace}:{category_id}"
