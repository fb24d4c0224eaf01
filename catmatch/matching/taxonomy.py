"""Taxonomy store - flat category list, lookup, search and display tree.

A store is built once per fetched taxonomy and never mutated; a refresh
produces a new store that replaces the old one in the cache.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Optional

from pydantic import ValidationError

from catmatch.core.logging import logger
from catmatch.matching.normalize import normalize, turkish_sort_key
from catmatch.schemas.category_schema import PATH_SEPARATOR, Category, CategoryTreeNode

# 검색 점수
SEARCH_NAME_SCORE = 50
SEARCH_PATH_SCORE = 25
SEARCH_WORD_SCORE = 20

_CHILDREN_KEYS = ("subCategories", "children")
_PATH_KEYS = ("path", "paths", "pathString")


def _is_key(value: Any) -> bool:
    """dict 키로 쓸 수 있는 ID/부모 ID인지 (int 또는 str)"""
    return isinstance(value, (int, str)) and not isinstance(value, bool)


def _record_name(record: dict) -> Optional[str]:
    for key in ("name", "catName", "displayName"):
        value = record.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


def _record_path(record: dict) -> Optional[list[str]]:
    """레코드에 있는 경로 (str 또는 list만 인정, 없으면 None)"""
    for key in _PATH_KEYS:
        value = record.get(key)
        if not value:
            continue
        if isinstance(value, str):
            return [p.strip() for p in value.split(">") if p.strip()]
        if isinstance(value, (list, tuple)):
            return [str(p) for p in value if p is not None]
    return None


@dataclass(frozen=True)
class CategoryText:
    """점수 계산용으로 미리 정규화한 카테고리 텍스트"""

    name: str
    path: str
    name_words: tuple[str, ...]

    @property
    def full(self) -> str:
        return f"{self.name} {self.path}".strip()

    @classmethod
    def of(cls, category: Category) -> "CategoryText":
        name = normalize(category.display_name or category.name)
        return cls(
            name=name,
            path=normalize(" ".join(category.path)),
            name_words=tuple(name.split()),
        )


def flatten_records(records: Iterable[Any], parent_path: Optional[list[str]] = None,
                    parent_id: Optional[int] = None) -> Iterator[dict]:
    """중첩 트리(subCategories/children)를 평탄화

    하위 노드에는 조상 이름으로 만든 path와 parentId를 채워 넣고,
    자식이 있는 노드는 leaf=False로 표시합니다.
    이미 평탄한 목록은 그대로 통과합니다.
    """
    for record in records or []:
        if not isinstance(record, dict):
            yield record
            continue

        children = None
        for key in _CHILDREN_KEYS:
            if isinstance(record.get(key), list) and record[key]:
                children = record[key]
                break

        flat = {k: v for k, v in record.items() if k not in _CHILDREN_KEYS}
        name = _record_name(flat)

        if parent_path is not None and _record_path(flat) is None:
            flat["path"] = [*parent_path, name] if name else list(parent_path)
        if parent_id is not None and not any(
            flat.get(k) is not None for k in ("parentCategoryId", "parentId", "parentCatId", "parent_id")
        ):
            flat["parentId"] = parent_id
        if children and not any(k in flat for k in ("leaf", "isLeaf", "is_leaf")):
            flat["leaf"] = False

        yield flat

        if children:
            own_path = _record_path(flat) or ([name] if name else [])
            own_id = flat.get("id", flat.get("categoryId", flat.get("catId")))
            yield from flatten_records(children, own_path, own_id if _is_key(own_id) else None)


def _fill_paths_from_parents(records: list[dict]) -> None:
    """path 없이 parentId만 있는 평탄 목록의 경로를 부모 체인으로 계산"""
    # ID/부모 ID가 int·str이 아닌 레코드는 체인에서 제외 (검증 단계에서 거부됨)
    by_id: dict[Any, dict] = {}
    for record in records:
        record_id = record.get("catId", record.get("categoryId", record.get("id")))
        if _is_key(record_id):
            by_id[record_id] = record

    def resolve(record: dict, depth: int = 0) -> list[str]:
        name = _record_name(record) or ""
        path = _record_path(record)
        if path is not None:
            return path
        parent_key = record.get("parentCategoryId", record.get("parentId", record.get("parentCatId")))
        parent = by_id.get(parent_key) if _is_key(parent_key) else None
        # 순환 참조 방지
        if parent is None or parent is record or depth > 32:
            return [name] if name else []
        return [*resolve(parent, depth + 1), name] if name else resolve(parent, depth + 1)

    for record in records:
        if _record_path(record) is None:
            record["path"] = resolve(record)


def build_tree(categories: Iterable[Category]) -> list[CategoryTreeNode]:
    """평탄한 카테고리 목록으로 표시용 트리 생성

    - 1단계: 경로 첫 세그먼트로 루트 노드
    - 2단계: 첫 두 세그먼트로 하위 그룹 노드
    - 리프 카테고리만 2단계 노드의 자식으로 붙임 (더 깊은 단계는 평탄화)
    - 경로가 한 세그먼트인 리프는 같은 이름의 루트 노드 아래에 붙임
    - 리프가 하나도 없는 그룹은 만들지 않음
    - 형제 노드는 튀르키예어 알파벳 순 정렬
    """
    categories = list(categories)
    by_path: dict[tuple[str, ...], Category] = {}
    for category in categories:
        by_path.setdefault(tuple(category.path), category)

    roots: dict[str, dict[str, list[Category]]] = {}
    root_leaves: dict[str, list[Category]] = {}

    for category in categories:
        if not category.is_leaf or not category.path:
            continue
        root_name = category.path[0]
        if len(category.path) == 1:
            root_leaves.setdefault(root_name, []).append(category)
            roots.setdefault(root_name, {})
            continue
        second_name = category.path[1]
        roots.setdefault(root_name, {}).setdefault(second_name, []).append(category)

    def group_node(path: list[str], children: list[CategoryTreeNode]) -> CategoryTreeNode:
        source = by_path.get(tuple(path))
        # 그룹 경로와 같은 리프는 자기 자신이 자식으로 들어가므로 그룹 노드에는 ID를 붙이지 않음
        use_source = source is not None and not source.is_leaf
        return CategoryTreeNode(
            category_id=source.id if use_source else None,
            name=path[-1],
            display_name=source.display_name if use_source else path[-1],
            path=list(path),
            path_string=PATH_SEPARATOR.join(path),
            is_leaf=False,
            is_available=source.is_available if use_source else True,
            children=children,
        )

    def leaf_node(category: Category) -> CategoryTreeNode:
        return CategoryTreeNode(
            category_id=category.id,
            name=category.name,
            display_name=category.display_name,
            path=list(category.path),
            path_string=category.path_string,
            is_leaf=True,
            is_available=category.is_available,
        )

    def sort_nodes(nodes: list[CategoryTreeNode]) -> list[CategoryTreeNode]:
        return sorted(nodes, key=lambda n: turkish_sort_key(n.display_name or n.name))

    tree: list[CategoryTreeNode] = []
    for root_name, seconds in roots.items():
        children: list[CategoryTreeNode] = [leaf_node(c) for c in root_leaves.get(root_name, [])]
        for second_name, leaves in seconds.items():
            if not leaves:
                continue
            children.append(
                group_node([root_name, second_name], sort_nodes([leaf_node(c) for c in leaves]))
            )
        if not children:
            continue
        tree.append(group_node([root_name], sort_nodes(children)))

    return sort_nodes(tree)


class TaxonomyStore:
    """한 마켓플레이스의 카테고리 전체 (불변)

    Attributes:
        categories: 평탄한 카테고리 목록 (입력 순서 유지)
        tree: 표시용 트리 (생성 시 1회 계산)
        rejected_count: 파싱할 수 없어 제외된 원본 레코드 수
    """

    def __init__(self, categories: Iterable[Category], rejected_count: int = 0):
        self.categories: tuple[Category, ...] = tuple(categories)
        self.rejected_count = rejected_count
        self._by_id: dict[int, Category] = {}
        for category in self.categories:
            self._by_id.setdefault(category.id, category)
        self._texts: dict[int, CategoryText] = {
            id(category): CategoryText.of(category) for category in self.categories
        }
        self.tree: list[CategoryTreeNode] = build_tree(self.categories)

    @classmethod
    def from_records(cls, records: Any) -> "TaxonomyStore":
        """마켓플레이스 원본 레코드로 스토어 생성

        중첩 트리는 평탄화하고, 경로가 없으면 부모 체인으로 계산합니다.
        ID가 없는 등 해석 불가한 레코드는 경고 로그를 남기고 제외합니다.
        """
        flat = list(flatten_records(unwrap_category_payload(records)))
        dict_records = [r for r in flat if isinstance(r, dict)]
        _fill_paths_from_parents(dict_records)

        categories: list[Category] = []
        rejected = 0
        for record in flat:
            try:
                categories.append(Category.model_validate(record))
            except ValidationError as e:
                rejected += 1
                logger.warning(f"[TAXONOMY] Skipping malformed category record: {e.error_count()} errors, record={str(record)[:120]}")
            except (TypeError, ValueError) as e:
                rejected += 1
                logger.warning(f"[TAXONOMY] Skipping unreadable category record: {type(e).__name__}: {e}, record={str(record)[:120]}")

        if rejected:
            logger.warning(f"[TAXONOMY] {rejected} records rejected out of {len(flat)}")
        return cls(categories, rejected_count=rejected)

    def __len__(self) -> int:
        return len(self.categories)

    def text_of(self, category: Category) -> CategoryText:
        """미리 계산된 정규화 텍스트 (스토어 밖 카테고리는 즉석 계산)"""
        text = self._texts.get(id(category))
        return text if text is not None else CategoryText.of(category)

    def find_by_id(self, category_id: int) -> Optional[Category]:
        return self._by_id.get(category_id)

    def leaves(self) -> list[Category]:
        return [c for c in self.categories if c.is_leaf]

    def assignable(self) -> list[Category]:
        """리프이면서 사용 가능한 카테고리"""
        return [c for c in self.categories if c.is_assignable]

    def search_substring(self, query: str, limit: int = 20, leaves_only: bool = True) -> list[Category]:
        """수동 카테고리 검색

        점수: 이름 포함 +50, 경로 포함 +25, 이름과 정확히 일치하는 검색어 단어마다 +20

        Args:
            query: 검색어
            limit: 최대 결과 수
            leaves_only: True면 리프 + 사용 가능 카테고리만

        Returns:
            점수 내림차순 카테고리 목록 (동점은 원래 순서 유지)
        """
        normalized_query = normalize(query)
        if not normalized_query or limit <= 0:
            return []
        query_words = set(normalized_query.split())

        candidates = self.assignable() if leaves_only else self.categories
        scored: list[tuple[int, Category]] = []
        for category in candidates:
            text = self.text_of(category)
            score = 0
            if normalized_query in text.name:
                score += SEARCH_NAME_SCORE
            if normalized_query in text.path:
                score += SEARCH_PATH_SCORE
            score += SEARCH_WORD_SCORE * len(query_words.intersection(text.name_words))
            if score > 0:
                scored.append((score, category))

        scored.sort(key=lambda item: item[0], reverse=True)
        return [category for _, category in scored[:limit]]



def unwrap_category_payload(payload: Any) -> list:
    """API 응답 래퍼에서 카테고리 목록 꺼내기

    {"categories": [...]}, {"data": [...]}, {"goodsCatsList": [...]} 등을 허용합니다.
    """
    if payload is None:
        return []
    if isinstance(payload, dict):
        for key in ("categories", "goodsCatsList", "catList", "data", "content"):
            value = payload.get(key)
            if isinstance(value, list):
                return value
            if isinstance(value, dict):
                return unwrap_category_payload(value)
        return [payload]
    if isinstance(payload, (list, tuple)):
        return list(payload)
    return []
