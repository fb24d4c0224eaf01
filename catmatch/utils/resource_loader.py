"""리소스 파일(YAML) 로더 유틸리티

catmatch/resources/
    vocabulary/common.yaml          모든 마켓플레이스 공통 사전
    marketplaces/<marketplace>.yaml 마켓플레이스별 번역표, 브랜드표, 가중치
"""
import os
import yaml
from typing import Any, Dict
from functools import lru_cache

from catmatch.core.exceptions import ResourceException
from catmatch.core.logging import logger

RESOURCE_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "resources")


def get_resource_path(relative_path: str) -> str:
    """패키지 리소스 디렉터리 기준 절대 경로 반환"""
    return os.path.join(RESOURCE_DIR, relative_path)


@lru_cache(maxsize=32)
def load_yaml_resource(relative_path: str) -> Dict[str, Any]:
    """YAML 리소스 로드 및 캐싱

    파일이 없으면 빈 dict를 반환합니다 (호출자가 '미지원'으로 판단).

    Raises:
        ResourceException: 파일은 있지만 읽을 수 없거나 최상위가 매핑이 아닌 경우
    """
    path = get_resource_path(relative_path)
    if not os.path.exists(path):
        logger.warning(f"[RESOURCE] Not found: {relative_path}")
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"[RESOURCE] Failed to load {relative_path}: {e}")
        raise ResourceException(relative_path, str(e)) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ResourceException(relative_path, f"top level must be a mapping, got {type(data).__name__}")
    return data


def load_common_vocabulary() -> Dict[str, Any]:
    """모든 마켓플레이스가 공유하는 불용어/성별/상품유형 사전 로드"""
    return load_yaml_resource("vocabulary/common.yaml")


def load_marketplace_resource(marketplace: str) -> Dict[str, Any]:
    """마켓플레이스별 사전(번역표, 브랜드표, 가중치) 로드

    이름에 경로 문자가 있으면 리소스 디렉터리 밖을 읽지 않도록 빈 dict를 반환합니다.
    """
    if not marketplace or os.sep in marketplace or "/" in marketplace or marketplace.startswith("."):
        return {}
    return load_yaml_resource(f"marketplaces/{marketplace}.yaml")
