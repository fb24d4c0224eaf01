"""카테고리 스키마 (마켓플레이스별 원본 JSON → 단일 Category)"""
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

PATH_SEPARATOR = " > "

# 원본 필드명 후보 (hepsiburada / temu / trendyol 순)
_ID_KEYS = ("categoryId", "catId", "id", "category_id")
_NAME_KEYS = ("name", "catName", "category_name")
_DISPLAY_NAME_KEYS = ("displayName", "display_name")
_PARENT_KEYS = ("parentCategoryId", "parentId", "parentCatId", "parent_id")
_LEAF_KEYS = ("leaf", "isLeaf", "is_leaf")
_CHILDREN_KEYS = ("subCategories", "children")


def _first(data: dict, keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = data.get(key)
        if value is not None and value != "":
            return value
    return None


def _coerce_path(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        parts = value.split(">")
    elif isinstance(value, (list, tuple)):
        parts = [str(p) for p in value if p is not None]
    else:
        return []
    return [p.strip() for p in parts if p and p.strip()]


def _coerce_available(data: dict) -> bool:
    if "is_available" in data:
        return bool(data["is_available"])
    available = data.get("available")
    status = data.get("status")
    if isinstance(status, str) and status.upper() == "PASSIVE":
        return False
    if available is not None:
        return bool(available)
    if isinstance(status, str):
        return status.upper() == "ACTIVE"
    # temu: availableStatus 0 = 사용 가능
    if data.get("availableStatus") is not None:
        try:
            return int(data["availableStatus"]) == 0
        except (TypeError, ValueError) as e:
            # pydantic은 ValueError만 검증 오류로 변환
            raise ValueError(f"invalid availableStatus: {data['availableStatus']!r}") from e
    return True


class Category(BaseModel):
    """마켓플레이스 카테고리 (불변)

    세 가지 원본 형식을 모두 받습니다.
    - hepsiburada: categoryId / name / displayName / paths / leaf / available / status
    - temu: catId / catName / path(pathString) / leaf / availableStatus / parentId
    - trendyol: id / name / parentId / subCategories (경로는 트리에서 계산)

    경로가 없으면 [name], 표시명이 없으면 name으로 보정합니다.
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="마켓플레이스 내 카테고리 ID")
    name: str = Field(..., description="카테고리명")
    display_name: str = Field("", description="표시명 (없으면 name)")
    path: list[str] = Field(default_factory=list, description="루트 → 자신 경로")
    is_leaf: bool = Field(True, description="상품 등록 가능한 리프 여부")
    is_available: bool = Field(True, description="사용 가능 여부")
    parent_id: Optional[int] = Field(None, description="부모 카테고리 ID")

    @model_validator(mode="before")
    @classmethod
    def _coerce_raw(cls, data: Any):
        if not isinstance(data, dict):
            return data

        # 원본 dict를 변경하지 않도록 복사
        raw = dict(data)

        category_id = _first(raw, _ID_KEYS)
        display_name = _first(raw, _DISPLAY_NAME_KEYS)
        name = _first(raw, _NAME_KEYS) or display_name
        if name is None and category_id is not None:
            name = f"#{category_id}"
        name = str(name).strip() if name is not None else name

        path = _coerce_path(raw.get("path"))
        if not path:
            path = _coerce_path(raw.get("paths"))
        if not path:
            path = _coerce_path(raw.get("pathString"))
        if not path and name:
            path = [name]

        leaf = _first(raw, _LEAF_KEYS)
        if leaf is None:
            children = _first(raw, _CHILDREN_KEYS)
            leaf = not children

        parent_id = _first(raw, _PARENT_KEYS)
        if parent_id in (0, "0"):
            parent_id = None

        return {
            "id": category_id,
            "name": name,
            "display_name": str(display_name).strip() if display_name else name,
            "path": path,
            "is_leaf": bool(leaf),
            "is_available": _coerce_available(raw),
            "parent_id": parent_id,
        }

    @property
    def path_string(self) -> str:
        """'Ana > Alt > Yaprak' 형식 경로"""
        return PATH_SEPARATOR.join(self.path)

    @property
    def is_assignable(self) -> bool:
        """상품을 바로 등록할 수 있는 카테고리 (리프 + 사용 가능)"""
        return self.is_leaf and self.is_available


class CategoryTreeNode(BaseModel):
    """화면 표시용 카테고리 트리 노드

    루트/2단계 노드는 경로 접두어로 묶은 가상 노드일 수 있으며,
    그 경우 category_id가 None입니다.
    """

    category_id: Optional[int] = Field(None, description="카테고리 ID (가상 그룹 노드는 None)")
    name: str = Field(..., description="노드 이름")
    display_name: str = Field(..., description="표시명")
    path: list[str] = Field(default_factory=list, description="루트 → 자신 경로")
    path_string: str = Field("", description="경로 문자열")
    is_leaf: bool = Field(False, description="리프 여부")
    is_available: bool = Field(True, description="사용 가능 여부")
    children: list["CategoryTreeNode"] = Field(default_factory=list, description="하위 노드")

    def iter_leaves(self):
        """하위 리프 노드 순회 (깊이 우선)"""
        for child in self.children:
            if child.is_leaf and not child.children:
                yield child
            yield from child.iter_leaves()


CategoryTreeNode.model_rebuild()
