"""전역 테스트 설정

역할:
- 테스트 환경 구성
- 공통 Fake 주입 (카테고리 소스, 시계)
- 전역 상태 초기화
"""

from __future__ import annotations

import asyncio
import copy
import os
import sys
from pathlib import Path
from typing import Any, Optional

import pytest


# 프로젝트 루트를 경로에 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from tests.fixtures.taxonomies import (  # noqa: E402
    ATTRIBUTE_PAYLOADS,
    HEPSIBURADA_CATEGORIES,
    TEMU_CATEGORIES,
    TRENDYOL_CATEGORIES,
)


@pytest.fixture(scope="session", autouse=True)
def test_env() -> None:
    """테스트 환경 변수 설정 (세션 전역)"""
    os.environ["ENVIRONMENT"] = "test"
    os.environ["LOG_LEVEL"] = "INFO"


class FakeClock:
    """수동으로 전진시키는 시계 (TTL 테스트용)"""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSource:
    """CategorySource 테스트 더블

    - 호출 횟수 기록 (taxonomy_calls / attribute_calls)
    - gate가 있으면 set()될 때까지 응답 보류 (동시 요청 테스트)
    - taxonomy_error / attribute_error가 있으면 해당 예외 발생
    """

    def __init__(
        self,
        taxonomies: Optional[dict[str, Any]] = None,
        attributes: Optional[dict[tuple[str, int], Any]] = None,
    ):
        self.taxonomies = taxonomies if taxonomies is not None else {}
        self.attributes = attributes if attributes is not None else {}
        self.taxonomy_calls = 0
        self.attribute_calls = 0
        self.gate: Optional[asyncio.Event] = None
        self.taxonomy_error: Optional[Exception] = None
        self.attribute_error: Optional[Exception] = None

    async def fetch_taxonomy(self, marketplace: str) -> Any:
        self.taxonomy_calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.taxonomy_error is not None:
            raise self.taxonomy_error
        return copy.deepcopy(self.taxonomies[marketplace])

    async def fetch_category_attributes(self, marketplace: str, category_id: int) -> Any:
        self.attribute_calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.attribute_error is not None:
            raise self.attribute_error
        return copy.deepcopy(self.attributes[(marketplace, category_id)])


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_source() -> FakeSource:
    return FakeSource(
        taxonomies={
            "hepsiburada": HEPSIBURADA_CATEGORIES,
            "temu": TEMU_CATEGORIES,
            "trendyol": TRENDYOL_CATEGORIES,
        },
        attributes=ATTRIBUTE_PAYLOADS,
    )
