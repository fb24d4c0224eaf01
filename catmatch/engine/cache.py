"""Cache Coordinator - TTL cache with request coalescing

Concurrent callers that miss the same key share one in-flight fetch. The
fetch runs in its own task, so a caller that gives up (cancellation,
timeout) never cancels the fetch other callers are waiting on, and the
result still lands in the cache for the next caller.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from catmatch.core.config import settings
from catmatch.core.exceptions import CacheClosedException
from catmatch.core.logging import logger

T = TypeVar("T")

FetchFn = Callable[[], Awaitable[T]]


class CacheState(str, Enum):
    """캐시 키 상태"""

    EMPTY = "empty"
    LOADING = "loading"
    FRESH = "fresh"
    STALE = "stale"  # 데이터는 있지만 TTL 경과


class LoadStatus(str, Enum):
    """UI에 노출하는 로드 상태

    '로딩 중', '로드 완료(결과 0건 포함)', '오류'를 구분합니다.
    """

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """캐시 항목

    항목 자체는 불변이며, 상태 변경은 새 항목으로 통째로 교체합니다.
    그래서 읽는 쪽은 절반만 쓰인 항목을 볼 수 없습니다.

    Attributes:
        data: 캐시 데이터 (없으면 None)
        fetched_at: 조회 완료 시각 (clock 기준, 없으면 0)
        loading: 조회 진행 중 여부
        error: 마지막 조회 실패 원인
    """

    data: Optional[T] = None
    fetched_at: float = 0.0
    loading: bool = False
    error: Optional[BaseException] = None


class TTLCache(Generic[T]):
    """TTL 캐시 + 요청 합치기(coalescing)

    Args:
        name: 네임스페이스 이름 (로그/상태 표시용)
        ttl: 유효 시간 (초)
        clock: 현재 시각 함수 (기본 time.monotonic, 테스트에서 교체)
        max_entries: 항목 수가 이보다 많아지면 만료 항목 정리 (None이면 정리 안 함)
    """

    def __init__(
        self,
        name: str,
        ttl: float,
        clock: Callable[[], float] = time.monotonic,
        max_entries: Optional[int] = None,
    ):
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        self.name = name
        self.ttl = ttl
        self.max_entries = max_entries
        self._clock = clock
        self._entries: dict[str, CacheEntry[T]] = {}
        self._inflight: dict[str, asyncio.Future] = {}
        self._tasks: set[asyncio.Task] = set()
        self._closed = False

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def keys(self) -> list[str]:
        return list(self._entries)

    def _is_fresh(self, entry: CacheEntry[T]) -> bool:
        return (
            not entry.loading
            and entry.data is not None
            and self._clock() - entry.fetched_at < self.ttl
        )

    def get(self, key: str) -> Optional[T]:
        """유효한(TTL 이내) 데이터만 반환, 없으면 None"""
        entry = self._entries.get(key)
        if entry is None or not self._is_fresh(entry):
            return None
        return entry.data

    def get_stale(self, key: str) -> Optional[T]:
        """TTL과 무관하게 마지막으로 성공한 데이터 반환"""
        entry = self._entries.get(key)
        return entry.data if entry is not None else None

    def state(self, key: str) -> CacheState:
        entry = self._entries.get(key)
        if entry is None:
            return CacheState.EMPTY
        if entry.loading:
            return CacheState.LOADING
        if entry.data is None:
            return CacheState.EMPTY
        if self._is_fresh(entry):
            return CacheState.FRESH
        return CacheState.STALE

    def load_status(self, key: str) -> LoadStatus:
        entry = self._entries.get(key)
        if entry is None:
            return LoadStatus.IDLE
        if entry.loading:
            return LoadStatus.LOADING
        if self._is_fresh(entry):
            return LoadStatus.READY
        if entry.error is not None:
            return LoadStatus.ERROR
        return LoadStatus.IDLE

    def last_error(self, key: str) -> Optional[BaseException]:
        entry = self._entries.get(key)
        return entry.error if entry is not None else None

    async def ensure(self, key: str, fetch_fn: FetchFn) -> T:
        """캐시 데이터 보장 (핵심 coalescing 연산)

        - 유효한 데이터가 있으면 I/O 없이 즉시 반환
        - 같은 키를 이미 조회 중이면 그 결과를 기다려 공유
        - 아니면 fetch_fn을 정확히 한 번 실행

        Args:
            key: 캐시 키
            fetch_fn: 데이터를 가져오는 비동기 함수 (인자 없음)

        Returns:
            캐시 데이터

        Raises:
            fetch_fn이 던진 예외 (기다리던 모든 호출자에게 동일하게 전달)
            CacheClosedException: close() 이후 호출
        """
        if self._closed:
            raise CacheClosedException(self.name)

        cached = self.get(key)
        if cached is not None:
            logger.debug(f"[CACHE] {self.name} hit: {key}")
            return cached

        future = self._inflight.get(key)
        if future is None:
            future = self._start_fetch(key, fetch_fn)
        else:
            logger.debug(f"[CACHE] {self.name} joining in-flight fetch: {key}")

        # shield: 대기자가 취소돼도 공유 조회는 계속 진행
        return await asyncio.shield(future)

    def prefetch(self, key: str, fetch_fn: FetchFn) -> bool:
        """결과를 기다리지 않고 백그라운드 조회 시작

        Returns:
            새 조회를 시작했으면 True (이미 유효하거나 조회 중이면 False)
        """
        if self._closed:
            raise CacheClosedException(self.name)
        if self.get(key) is not None or key in self._inflight:
            return False
        self._start_fetch(key, fetch_fn)
        return True

    def _start_fetch(self, key: str, fetch_fn: FetchFn) -> asyncio.Future:
        loop = asyncio.get_running_loop()
        future: asyncio.Future = loop.create_future()
        # 아무도 기다리지 않은 실패도 "exception was never retrieved" 경고를 남기지 않도록 소비
        future.add_done_callback(_consume_exception)
        self._inflight[key] = future

        previous = self._entries.get(key)
        self._entries[key] = CacheEntry(
            data=previous.data if previous is not None else None,
            fetched_at=previous.fetched_at if previous is not None else 0.0,
            loading=True,
        )

        logger.debug(f"[CACHE] {self.name} fetching: {key}")
        task = loop.create_task(self._run_fetch(key, fetch_fn, future))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return future

    async def _run_fetch(self, key: str, fetch_fn: FetchFn, future: asyncio.Future) -> None:
        started = self._clock()
        try:
            data = await fetch_fn()
        except asyncio.CancelledError:
            # close()로 취소된 경우
            if self._owns(key, future):
                self._entries.pop(key, None)
            if not future.done():
                future.cancel()
            raise
        except Exception as e:
            if self._owns(key, future):
                self._entries[key] = CacheEntry(error=e)
                self._prune_if_needed(keep=key)
            logger.warning(f"[CACHE] {self.name} fetch failed: {key} ({type(e).__name__}: {e})")
            if not future.done():
                future.set_exception(e)
        else:
            if self._owns(key, future):
                self._entries[key] = CacheEntry(data=data, fetched_at=self._clock())
                self._prune_if_needed()
                logger.debug(f"[CACHE] {self.name} stored: {key} ({self._clock() - started:.3f}s)")
            else:
                # 조회 중에 invalidate/clear된 키는 다시 채우지 않음
                logger.debug(f"[CACHE] {self.name} discarded result for evicted key: {key}")
            if not future.done():
                future.set_result(data)
        finally:
            if self._inflight.get(key) is future:
                del self._inflight[key]

    def _owns(self, key: str, future: asyncio.Future) -> bool:
        return self._inflight.get(key) is future

    def _prune_if_needed(self, keep: Optional[str] = None) -> None:
        if self.max_entries is not None and len(self._entries) > self.max_entries:
            removed = self.prune_expired(keep=keep)
            logger.debug(f"[CACHE] {self.name} pruned {removed} expired entries")

    def prune_expired(self, keep: Optional[str] = None) -> int:
        """만료/실패 항목 제거 (조회 중인 항목과 keep 키는 유지)

        Returns:
            제거된 항목 수
        """
        now = self._clock()
        expired = [
            key
            for key, entry in self._entries.items()
            if key != keep
            and not entry.loading
            and (entry.data is None or now - entry.fetched_at >= self.ttl)
        ]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def invalidate(self, key: str) -> None:
        """키 강제 제거. 진행 중 조회는 대기자에게 결과를 주지만 캐시에는 쓰지 않음"""
        self._entries.pop(key, None)
        self._inflight.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()
        self._inflight.clear()

    async def close(self) -> None:
        """진행 중인 조회 취소 후 캐시 비우기"""
        self._closed = True
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self.clear()

    def status(self) -> dict[str, Any]:
        """캐시 상태 요약"""
        states = [self.state(key) for key in self._entries]
        return {
            "name": self.name,
            "ttl_seconds": self.ttl,
            "entries": len(self._entries),
            "fresh": sum(1 for s in states if s == CacheState.FRESH),
            "stale": sum(1 for s in states if s == CacheState.STALE),
            "loading": len(self._inflight),
        }


def _consume_exception(future: asyncio.Future) -> None:
    if not future.cancelled():
        future.exception()


class CacheCoordinator:
    """마켓플레이스 캐시 네임스페이스 묶음

    - taxonomies: 마켓플레이스별 카테고리 스토어 (긴 TTL)
    - attributes: 카테고리별 속성 목록 (짧은 TTL, 크기 초과 시 만료/실패 항목 정리)
    - matches: 동일 요청의 매칭 결과 (짧은 TTL, 크기 초과 시 만료/실패 항목 정리)

    프로세스당 하나를 만들어 서비스에 주입합니다.
    """

    def __init__(
        self,
        taxonomy_ttl: float = 3600,
        attribute_ttl: float = 1800,
        match_ttl: float = 1800,
        match_max_entries: Optional[int] = 100,
        attribute_max_entries: Optional[int] = 100,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.taxonomies: TTLCache = TTLCache("taxonomies", taxonomy_ttl, clock)
        self.attributes: TTLCache = TTLCache("attributes", attribute_ttl, clock, max_entries=attribute_max_entries)
        self.matches: TTLCache = TTLCache("matches", match_ttl, clock, max_entries=match_max_entries)

    @classmethod
    def from_settings(cls, clock: Callable[[], float] = time.monotonic) -> "CacheCoordinator":
        """설정값(TTL, 최대 항목 수)으로 생성"""
        return cls(
            taxonomy_ttl=settings.taxonomy_cache_ttl,
            attribute_ttl=settings.attribute_cache_ttl,
            match_ttl=settings.match_cache_ttl,
            match_max_entries=settings.match_cache_max_entries,
            attribute_max_entries=settings.attribute_cache_max_entries,
            clock=clock,
        )

    @property
    def namespaces(self) -> tuple[TTLCache, ...]:
        return (self.taxonomies, self.attributes, self.matches)

    def clear(self) -> None:
        for namespace in self.namespaces:
            namespace.clear()
        logger.info("[CACHE] All namespaces cleared")

    async def close(self) -> None:
        for namespace in self.namespaces:
            await namespace.close()
        logger.info("[CACHE] Coordinator closed")

    def status(self) -> dict[str, Any]:
        return {namespace.name: namespace.status() for namespace in self.namespaces}
