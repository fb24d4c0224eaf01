"""Pydantic 스키마 테스트 (카테고리 형식 변환 / 속성 파싱 / API 요청 검증)"""
import pytest
from pydantic import ValidationError

from catmatch.schemas.api_schema import MatchCategoryRequest
from catmatch.schemas.attribute_schema import (
    ListAttribute,
    MultiListAttribute,
    TextAttribute,
    parse_attribute,
    unwrap_attribute_payload,
)
from catmatch.schemas.category_schema import Category
from tests.fixtures.taxonomies import HEPSIBURADA_ATTRIBUTES, TEMU_ATTRIBUTES, TRENDYOL_ATTRIBUTES


class TestCategory:
    """마켓플레이스 형식 → Category"""

    def test_hepsiburada_record(self):
        category = Category.model_validate({
            "categoryId": 18021982,
            "name": "Cep Telefonu",
            "displayName": "Cep Telefonları",
            "paths": ["Elektronik", "Telefon", "Cep Telefonu"],
            "leaf": True,
            "status": "ACTIVE",
            "parentCategoryId": 60001,
        })

        assert category.id == 18021982
        assert category.display_name == "Cep Telefonları"
        assert category.path_string == "Elektronik > Telefon > Cep Telefonu"
        assert category.is_available
        assert category.parent_id == 60001

    def test_hepsiburada_passive(self):
        category = Category.model_validate({"categoryId": 1, "name": "Eski", "leaf": True, "status": "PASSIVE"})
        assert not category.is_available
        assert not category.is_assignable

    def test_temu_record(self):
        category = Category.model_validate({
            "catId": "29111",
            "catName": "Dresses",
            "pathString": "Women's Clothing > Dresses",
            "leaf": True,
            "availableStatus": 0,
            "parentId": 0,
        })

        assert category.id == 29111
        assert category.name == "Dresses"
        assert category.path == ["Women's Clothing", "Dresses"]
        assert category.parent_id is None
        assert category.is_assignable

    def test_trendyol_record_with_children(self):
        category = Category.model_validate({
            "id": 411, "name": "Elektronik", "parentId": None,
            "subCategories": [{"id": 412, "name": "Telefon"}],
        })

        assert not category.is_leaf
        assert category.path == ["Elektronik"]

    def test_defaults(self):
        """경로/표시명이 없으면 이름으로 보정"""
        category = Category.model_validate({"id": 5, "name": " Kitap "})
        assert category.name == "Kitap"
        assert category.display_name == "Kitap"
        assert category.path == ["Kitap"]
        assert category.is_leaf

    def test_missing_id_rejected(self):
        with pytest.raises(ValidationError):
            Category.model_validate({"name": "Kimliksiz"})

    @pytest.mark.parametrize("status", [[0], {"v": 0}, "açık"])
    def test_unreadable_available_status_rejected(self, status):
        """해석 불가한 availableStatus도 검증 오류로 처리"""
        with pytest.raises(ValidationError):
            Category.model_validate({"id": 1, "name": "Elbise", "availableStatus": status})

    def test_immutable(self):
        category = Category.model_validate({"id": 5, "name": "Kitap"})
        with pytest.raises(ValidationError):
            category.name = "Dergi"

    def test_input_not_mutated(self):
        raw = {"categoryId": 1, "name": "Kitap", "paths": ["Kitap"]}
        Category.model_validate(raw)
        assert raw == {"categoryId": 1, "name": "Kitap", "paths": ["Kitap"]}


class TestAttributeParsing:
    """마켓플레이스 속성 형식 → Attribute"""

    def parse_all(self, payload):
        return [parse_attribute(raw) for raw in unwrap_attribute_payload(payload)]

    def test_hepsiburada(self):
        raw = unwrap_attribute_payload(HEPSIBURADA_ATTRIBUTES)
        # baseAttributes 중 상품 입력용(Marka, tax_vat_rate)만 포함
        assert [a["id"] for a in raw] == ["Marka", "tax_vat_rate", "renk", "beden", "ozel", "renk"]

        attributes = [parse_attribute(a) for a in raw]
        marka, vat, renk, beden, ozel = attributes[:5]

        assert isinstance(marka, TextAttribute) and marka.required
        assert isinstance(vat, ListAttribute)
        assert isinstance(renk, ListAttribute)
        assert renk.varianter
        assert [(v.id, v.name) for v in renk.values] == [("11", "Mavi"), ("12", "Siyah")]
        assert isinstance(beden, MultiListAttribute) and beden.required
        # 값 없는 enum은 직접 입력
        assert isinstance(ozel, TextAttribute) and ozel.allow_custom

    def test_temu(self):
        color, material, size = self.parse_all(TEMU_ATTRIBUTES)

        assert isinstance(color, MultiListAttribute)
        assert color.id == "7" and color.required and color.varianter
        assert [v.name for v in color.values] == ["Red", "Blue"]
        assert isinstance(material, TextAttribute) and material.allow_custom
        assert isinstance(size, ListAttribute)
        assert [v.id for v in size.values] == ["90", "91"]

    def test_trendyol(self):
        raw = unwrap_attribute_payload(TRENDYOL_ATTRIBUTES)
        renk = parse_attribute(raw[0])
        desen = parse_attribute(raw[1])

        assert isinstance(renk, ListAttribute)
        assert renk.id == "47" and renk.required and renk.varianter
        assert isinstance(desen, TextAttribute) and desen.allow_custom

        with pytest.raises(ValidationError):
            parse_attribute(raw[2])

    def test_already_normalized_form(self):
        attribute = parse_attribute({"type": "list", "id": "1", "name": "Renk", "values": [{"id": "a", "name": "A"}]})
        assert isinstance(attribute, ListAttribute)
        assert attribute.model_dump()["type"] == "list"

    def test_unwrap_unknown(self):
        assert unwrap_attribute_payload(None) == []
        assert unwrap_attribute_payload("oops") == []
        assert unwrap_attribute_payload({"unknown": 1}) == []


class TestMatchCategoryRequest:
    def test_valid(self):
        request = MatchCategoryRequest(title="Kadın Elbise", description="Yazlık\nelbise", top_n=3)
        assert request.description == "Yazlık elbise"
        assert request.top_n == 3

    def test_none_becomes_empty(self):
        request = MatchCategoryRequest(title=None, description=None)
        assert request.title == ""
        assert request.top_n is None

    @pytest.mark.parametrize("top_n", [0, 51])
    def test_top_n_range(self, top_n):
        with pytest.raises(ValidationError):
            MatchCategoryRequest(title="Elbise", top_n=top_n)

    def test_title_too_long(self):
        with pytest.raises(ValidationError):
            MatchCategoryRequest(title="a" * 501)

    def test_null_byte_rejected(self):
        with pytest.raises(ValidationError):
            MatchCategoryRequest(title="Elbise\0")
