"""Category Sources - where taxonomies and attribute lists come from

The service only depends on the CategorySource protocol. Marketplace API
clients live outside this package; JsonSnapshotSource serves exported
API responses from disk.
"""

import asyncio
import json
from pathlib import Path
from typing import Any, Protocol, Union

from catmatch.core.logging import logger


class CategorySource(Protocol):
    """카테고리 데이터 제공자 인터페이스

    반환값은 마켓플레이스 원본 응답(JSON 호환 객체) 그대로입니다.
    실패하면 예외를 던지며, 서비스가 도메인 예외로 감쌉니다.
    """

    async def fetch_taxonomy(self, marketplace: str) -> Any:
        ...

    async def fetch_category_attributes(self, marketplace: str, category_id: int) -> Any:
        ...


class JsonSnapshotSource:
    """디스크에 저장한 API 응답(JSON)을 읽는 소스

    디렉터리 구조:
        <directory>/<marketplace>/categories.json
        <directory>/<marketplace>/attributes/<category_id>.json
    """

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def taxonomy_path(self, marketplace: str) -> Path:
        return self.directory / marketplace / "categories.json"

    def attributes_path(self, marketplace: str, category_id: int) -> Path:
        return self.directory / marketplace / "attributes" / f"{category_id}.json"

    async def fetch_taxonomy(self, marketplace: str) -> Any:
        path = self.taxonomy_path(marketplace)
        logger.debug(f"[SOURCE] Reading taxonomy snapshot: {path}")
        return await asyncio.to_thread(self._read_json, path)

    async def fetch_category_attributes(self, marketplace: str, category_id: int) -> Any:
        path = self.attributes_path(marketplace, category_id)
        logger.debug(f"[SOURCE] Reading attribute snapshot: {path}")
        return await asyncio.to_thread(self._read_json, path)

    @staticmethod
    def _read_json(path: Path) -> Any:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
