"""로깅 설정

모든 모듈은 `from catmatch.core.logging import logger`로 같은 로거를 씁니다.
메시지 앞에는 [CACHE], [MATCH], [TAXONOMY] 같은 태그를 붙입니다.
"""
import logging
import sys
import os
from typing import Optional

from catmatch.core.config import settings

LOGGER_NAME = "category_matcher"

# Production 환경에서는 DEBUG 로그 비활성화
IS_PRODUCTION = os.getenv("ENVIRONMENT", "development") == "production"


def _build_formatter() -> logging.Formatter:
    if IS_PRODUCTION:
        return logging.Formatter(
            fmt="%(asctime)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    # 개발: 호출 위치까지 표시
    return logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(module)s.%(funcName)s:%(lineno)d - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """로거 초기화 (여러 번 호출해도 핸들러는 하나)

    Args:
        level: 로그 레벨 (기본값: settings.log_level)
    """
    logger = logging.getLogger(LOGGER_NAME)

    log_level = (level or settings.log_level).upper()
    if IS_PRODUCTION and log_level == "DEBUG":
        log_level = "INFO"
    numeric_level = getattr(logging, log_level, logging.INFO)
    logger.setLevel(numeric_level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(_build_formatter())
        logger.addHandler(handler)
    for handler in logger.handlers:
        handler.setLevel(numeric_level)

    # uvicorn 루트 로거로 중복 출력하지 않음
    logger.propagate = False
    return logger


logger = setup_logging()


def sanitize_for_log(value: Optional[str], max_length: int = 100) -> str:
    """로깅용 문자열 반환 (개행 제거 + 길이 제한)

    상품 설명은 길고 개행이 섞여 있어 로그 한 줄을 깨뜨리기 쉽습니다.

    Args:
        value: 로깅할 문자열
        max_length: 최대 길이

    Returns:
        정리된 문자열
    """
    if not value:
        return "[empty]"

    result = " ".join(value.split())

    if len(result) > max_length:
        result = result[:max_length] + "..."

    return result
