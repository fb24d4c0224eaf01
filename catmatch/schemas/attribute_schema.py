"""카테고리 속성 스키마 (마켓플레이스별 원본 JSON → 타입별 Attribute)"""
from typing import Annotated, Any, Literal, Optional, Union
from pydantic import BaseModel, Field, TypeAdapter

# hepsiburada baseAttributes 중 상품 입력에 필요한 것만 사용
HEPSIBURADA_PRODUCT_BASE_ATTRIBUTES = frozenset({"Marka", "GarantiSuresi", "tax_vat_rate", "kg"})

# temu inputType
TEMU_INPUT_DROPDOWN = 1
TEMU_INPUT_TEXT = 2
TEMU_INPUT_MULTI_SELECT = 3


class AttributeValue(BaseModel):
    """선택형 속성 값"""
    id: str = Field(..., description="값 ID")
    name: str = Field(..., description="값 이름")


class _AttributeBase(BaseModel):
    id: str = Field(..., description="속성 ID")
    name: str = Field(..., description="속성 이름")
    display_name: str = Field("", description="표시명")
    required: bool = Field(False, description="필수 여부")
    varianter: bool = Field(False, description="변형(옵션) 속성 여부")
    allow_custom: bool = Field(False, description="직접 입력 허용 여부")


class TextAttribute(_AttributeBase):
    """자유 입력 속성"""
    type: Literal["text"] = "text"


class ListAttribute(_AttributeBase):
    """단일 선택 속성"""
    type: Literal["list"] = "list"
    values: list[AttributeValue] = Field(default_factory=list, description="선택 가능한 값")


class MultiListAttribute(_AttributeBase):
    """다중 선택 속성"""
    type: Literal["multiList"] = "multiList"
    values: list[AttributeValue] = Field(default_factory=list, description="선택 가능한 값")


Attribute = Annotated[
    Union[TextAttribute, ListAttribute, MultiListAttribute],
    Field(discriminator="type"),
]

_attribute_adapter: TypeAdapter = TypeAdapter(Attribute)


def _str_id(value: Any) -> Optional[str]:
    return str(value) if value is not None and value != "" else None


def _values(raw_values: Any, id_key: str = "id", name_keys: tuple[str, ...] = ("name",)) -> list[dict]:
    values = []
    for value in raw_values or []:
        if not isinstance(value, dict):
            continue
        value_id = value.get(id_key, value.get("id"))
        name = next((value.get(k) for k in name_keys if value.get(k) is not None), None)
        if value_id is None or name is None:
            continue
        values.append({"id": str(value_id), "name": str(name)})
    return values


def _typed(common: dict, values: list[dict], multi: bool, selectable: bool) -> dict:
    """값 목록 유무에 따라 text / list / multiList 결정

    선택형인데 값이 없으면 직접 입력(text)으로 바꿉니다.
    """
    if selectable and values:
        return {**common, "type": "multiList" if multi else "list", "values": values}
    return {**common, "type": "text"}


def _from_hepsiburada(raw: dict) -> dict:
    name = raw.get("name") or raw.get("displayName") or _str_id(raw.get("id"))
    raw_type = str(raw.get("type") or "text")
    common = {
        "id": _str_id(raw.get("id")),
        "name": name,
        "display_name": raw.get("displayName") or name,
        "required": bool(raw.get("mandatory", raw.get("required", False))),
        "varianter": bool(raw.get("varianter", False)),
        "allow_custom": bool(raw.get("allowCustomValue", False)),
    }
    values = _values(raw.get("values"), name_keys=("name", "value", "displayName"))
    if raw_type in ("list", "multiList"):
        return _typed(common, values, raw_type == "multiList", True)
    multi = bool(raw.get("multiValue", False))
    return _typed(common, values, multi, raw_type == "enum")


def _from_temu(raw: dict) -> dict:
    input_type = raw.get("inputType")
    common = {
        "id": _str_id(raw.get("propertyId", raw.get("id"))),
        "name": raw.get("propertyName") or raw.get("name") or "",
        "display_name": raw.get("propertyName") or raw.get("name") or "",
        "required": bool(raw.get("required", False)),
        "varianter": bool(raw.get("isSale", False)),
        "allow_custom": input_type == TEMU_INPUT_TEXT,
    }
    if "valueList" in raw:
        values = _values(raw.get("valueList"), id_key="valueId", name_keys=("valueName",))
    else:
        values = _values(raw.get("values"))
    multi = input_type == TEMU_INPUT_MULTI_SELECT or bool(raw.get("multipleSelection", False))
    return _typed(common, values, multi, input_type != TEMU_INPUT_TEXT)


def _from_trendyol(raw: dict) -> dict:
    attribute = raw.get("attribute") or {}
    common = {
        "id": _str_id(attribute.get("id")),
        "name": attribute.get("name") or "",
        "display_name": attribute.get("name") or "",
        "required": bool(raw.get("required", False)),
        "varianter": bool(raw.get("varianter", False)),
        "allow_custom": bool(raw.get("allowCustom", False)),
    }
    values = _values(raw.get("attributeValues"))
    return _typed(common, values, bool(raw.get("multipleValues", False)), True)


def parse_attribute(raw: Any) -> Union[TextAttribute, ListAttribute, MultiListAttribute]:
    """원본 속성 하나를 타입별 Attribute로 변환

    형식은 키로 판별합니다.
    - trendyol: {"attribute": {"id", "name"}, "attributeValues": [...]}
    - temu: {"propertyId", "propertyName", "inputType", "valueList": [...]}
      또는 {"id", "name", "multipleSelection", "values": [...]}
    - hepsiburada: {"id", "name", "type", "mandatory", "multiValue", "values": [...]}
    - 이미 변환된 형식({"type": "text" | "list" | "multiList", ...})도 그대로 허용

    Raises:
        pydantic.ValidationError: 필수 필드(id/name)가 없는 경우
    """
    if not isinstance(raw, dict):
        return _attribute_adapter.validate_python(raw)

    if isinstance(raw.get("attribute"), dict):
        data = _from_trendyol(raw)
    elif "propertyId" in raw or "inputType" in raw or "multipleSelection" in raw:
        data = _from_temu(raw)
    elif raw.get("type") in ("text", "list", "multiList") and "mandatory" not in raw:
        data = raw
    else:
        data = _from_hepsiburada(raw)
    return _attribute_adapter.validate_python(data)


def unwrap_attribute_payload(payload: Any) -> list:
    """API 응답 래퍼에서 속성 목록 꺼내기

    - hepsiburada: {"baseAttributes": [...], "attributes": [...]} (base는 상품용 일부만)
    - trendyol: {"categoryAttributes": [...]}
    - temu: {"properties": [...]} / {"goodsProperties": [...]}
    """
    if payload is None:
        return []
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        return []

    if "baseAttributes" in payload or "attributes" in payload:
        base = [
            attr for attr in payload.get("baseAttributes") or []
            if isinstance(attr, dict) and attr.get("id") in HEPSIBURADA_PRODUCT_BASE_ATTRIBUTES
        ]
        return [*base, *(payload.get("attributes") or [])]
    for key in ("categoryAttributes", "properties", "goodsProperties", "data"):
        value = payload.get(key)
        if isinstance(value, list):
            return value
        if isinstance(value, dict):
            return unwrap_attribute_payload(value)
    return []


def dedupe_by_id(attributes: list) -> list:
    """ID 기준 중복 제거 (처음 나온 항목 유지)"""
    seen: set[str] = set()
    result = []
    for attribute in attributes:
        attribute_id = attribute.id
        if attribute_id in seen:
            continue
        seen.add(attribute_id)
        result.append(attribute)
    return result
