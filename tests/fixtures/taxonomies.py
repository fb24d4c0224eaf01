"""마켓플레이스 원본 응답 자산

각 마켓플레이스 API가 돌려주는 형식을 그대로 흉내낸 최소 데이터입니다.
- hepsiburada: 평탄 목록 + paths 배열
- temu: 평탄 목록 + parentId (경로는 부모 체인으로 계산)
- trendyol: subCategories 중첩 트리
"""

HEPSIBURADA_CATEGORIES = {
    "data": [
        {"categoryId": 1, "name": "Giyim", "paths": ["Giyim"], "leaf": False, "available": True},
        {"categoryId": 10, "name": "Kadın Giyim", "paths": ["Giyim", "Kadın Giyim"],
         "leaf": False, "available": True, "parentCategoryId": 1},
        {"categoryId": 101, "name": "Kadın Elbise", "displayName": "Kadın Elbise",
         "paths": ["Giyim", "Kadın Giyim", "Kadın Elbise"], "leaf": True, "available": True,
         "status": "ACTIVE", "parentCategoryId": 10},
        {"categoryId": 102, "name": "Kadın Tişört", "paths": ["Giyim", "Kadın Giyim", "Kadın Tişört"],
         "leaf": True, "available": True, "parentCategoryId": 10},
        {"categoryId": 11, "name": "Erkek Giyim", "paths": ["Giyim", "Erkek Giyim"],
         "leaf": False, "available": True, "parentCategoryId": 1},
        {"categoryId": 111, "name": "Erkek Tişört", "paths": ["Giyim", "Erkek Giyim", "Erkek Tişört"],
         "leaf": True, "available": True, "parentCategoryId": 11},
        {"categoryId": 112, "name": "Erkek Gömlek", "paths": ["Giyim", "Erkek Giyim", "Erkek Gömlek"],
         "leaf": True, "available": True, "parentCategoryId": 11},
        {"categoryId": 2, "name": "Elektronik", "paths": ["Elektronik"], "leaf": False, "available": True},
        {"categoryId": 20, "name": "Telefon", "paths": ["Elektronik", "Telefon"],
         "leaf": False, "available": True, "parentCategoryId": 2},
        {"categoryId": 201, "name": "Cep Telefonu", "paths": ["Elektronik", "Telefon", "Cep Telefonu"],
         "leaf": True, "available": True, "parentCategoryId": 20},
        {"categoryId": 202, "name": "Telefon Kılıfı", "paths": ["Elektronik", "Telefon", "Telefon Kılıfı"],
         "leaf": True, "available": True, "parentCategoryId": 20},
        {"categoryId": 21, "name": "Bilgisayar", "paths": ["Elektronik", "Bilgisayar"],
         "leaf": False, "available": True, "parentCategoryId": 2},
        {"categoryId": 211, "name": "Dizüstü Bilgisayar",
         "paths": ["Elektronik", "Bilgisayar", "Dizüstü Bilgisayar"],
         "leaf": True, "available": True, "parentCategoryId": 21},
        {"categoryId": 212, "name": "Eski Bilgisayar", "paths": ["Elektronik", "Bilgisayar", "Eski Bilgisayar"],
         "leaf": True, "available": False, "status": "PASSIVE", "parentCategoryId": 21},
        {"categoryId": 3, "name": "Kitap", "paths": ["Kitap"], "leaf": True, "available": True},
        {"categoryId": 4, "name": "Ev & Yaşam", "paths": ["Ev & Yaşam"], "leaf": False, "available": True},
        # ID 없는 레코드는 제외되어야 함
        {"name": "Kimliksiz Kategori", "paths": ["Kimliksiz Kategori"], "leaf": True},
    ]
}

HEPSIBURADA_LEAF_IDS = {101, 102, 111, 112, 201, 202, 211, 212, 3}

TEMU_CATEGORIES = {
    "goodsCatsList": [
        {"catId": 1000, "catName": "Women's Clothing", "parentId": 0, "leaf": False, "availableStatus": 0},
        {"catId": 1001, "catName": "Dresses", "parentId": 1000, "leaf": True, "availableStatus": 0},
        {"catId": 1002, "catName": "Tops", "parentId": 1000, "leaf": True, "availableStatus": 1},
        {"catId": 2000, "catName": "Men's Clothing", "parentId": 0, "leaf": False, "availableStatus": 0},
        {"catId": 2001, "catName": "Men's T-Shirts", "parentId": 2000, "leaf": True, "availableStatus": 0},
        {"catId": 3000, "catName": "Electronics", "parentCatId": 0, "leaf": False, "availableStatus": 0},
        {"catId": 3001, "catName": "Cell Phones", "parentCatId": 3000, "leaf": True, "availableStatus": 0},
    ]
}

TRENDYOL_CATEGORIES = {
    "categories": [
        {
            "id": 500,
            "name": "Elektronik",
            "parentId": None,
            "subCategories": [
                {
                    "id": 510,
                    "name": "Telefon",
                    "parentId": 500,
                    "subCategories": [
                        {"id": 511, "name": "Cep Telefonu", "parentId": 510, "subCategories": []},
                        {"id": 512, "name": "Telefon Kılıfı", "parentId": 510, "subCategories": []},
                    ],
                },
            ],
        },
        {
            "id": 600,
            "name": "Kadın",
            "parentId": None,
            "subCategories": [
                {
                    "id": 610,
                    "name": "Giyim",
                    "parentId": 600,
                    "subCategories": [
                        {"id": 611, "name": "Elbise", "parentId": 610, "subCategories": []},
                    ],
                },
            ],
        },
    ]
}

HEPSIBURADA_ATTRIBUTES = {
    "baseAttributes": [
        {"id": "Marka", "name": "Marka", "mandatory": True, "type": "string", "multiValue": False},
        {"id": "UrunAdi", "name": "Ürün Adı", "mandatory": True, "type": "string", "multiValue": False},
        {"id": "tax_vat_rate", "name": "KDV", "mandatory": True, "type": "enum", "multiValue": False,
         "values": [{"id": 1, "value": "%20"}, {"id": 2, "value": "%10"}]},
    ],
    "attributes": [
        {"id": "renk", "name": "Renk", "mandatory": False, "type": "enum", "multiValue": False,
         "varianter": True, "values": [{"id": 11, "value": "Mavi"}, {"id": 12, "value": "Siyah"}]},
        {"id": "beden", "name": "Beden", "mandatory": True, "type": "enum", "multiValue": True,
         "values": [{"id": "s", "value": "S"}, {"id": "m", "value": "M"}]},
        {"id": "ozel", "name": "Özel Not", "mandatory": False, "type": "enum", "multiValue": False,
         "allowCustomValue": True, "values": []},
        # 중복 ID는 첫 항목만 유지
        {"id": "renk", "name": "Renk (tekrar)", "type": "string"},
    ],
}

TEMU_ATTRIBUTES = {
    "properties": [
        {"propertyId": 7, "propertyName": "Color", "required": True, "inputType": 3, "isSale": True,
         "valueList": [{"valueId": 70, "valueName": "Red"}, {"valueId": 71, "valueName": "Blue"}]},
        {"propertyId": 8, "propertyName": "Material", "required": False, "inputType": 2},
        {"id": 9, "name": "Size", "multipleSelection": False,
         "values": [{"id": 90, "name": "S"}, {"id": 91, "name": "M"}]},
    ]
}

TRENDYOL_ATTRIBUTES = {
    "categoryAttributes": [
        {"attribute": {"id": 47, "name": "Renk"}, "required": True, "allowCustom": False, "varianter": True,
         "attributeValues": [{"id": 1, "name": "Siyah"}, {"id": 2, "name": "Beyaz"}]},
        {"attribute": {"id": 48, "name": "Desen"}, "required": False, "allowCustom": True,
         "attributeValues": []},
        # attribute.id 없음 → 제외
        {"attribute": {"name": "Kimliksiz"}, "required": False, "attributeValues": []},
    ]
}

ATTRIBUTE_PAYLOADS = {
    ("hepsiburada", 101): HEPSIBURADA_ATTRIBUTES,
    ("temu", 1001): TEMU_ATTRIBUTES,
    ("trendyol", 511): TRENDYOL_ATTRIBUTES,
}
