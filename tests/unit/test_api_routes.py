"""API 라우트 단위 테스트

get_match_service를 FakeSource 기반 서비스로 교체하여 외부 파일/네트워크 없이
envelope 형식, HTTP 상태 코드, cached 플래그를 검증합니다.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from catmatch.api import get_match_service
from catmatch.app import create_app
from catmatch.engine import CacheCoordinator, CategoryMatchService

BASE = "/api/v1/marketplaces"


@pytest.fixture
def service(fake_source) -> CategoryMatchService:
    return CategoryMatchService(fake_source, CacheCoordinator())


@pytest.fixture
def client(service):
    app = create_app()
    app.dependency_overrides[get_match_service] = lambda: service
    # 한 이벤트 루프에서 모든 요청 처리 (백그라운드 조회 유지)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def poll_attributes(client: TestClient, url: str, until: str, attempts: int = 50) -> dict:
    body = {}
    for _ in range(attempts):
        body = client.get(url).json()
        if body["data"]["load_status"] == until:
            break
    return body


class TestMatchCategoryEndpoint:
    """POST /match-category"""

    def test_success_envelope(self, client):
        response = client.post(f"{BASE}/hepsiburada/match-category", json={"title": "Kadın Mavi Elbise"})

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "success"
        assert body["error_code"] is None

        data = body["data"]
        assert data["marketplace"] == "hepsiburada"
        assert data["cached"] is False
        assert data["count"] == len(data["matches"])
        best = data["matches"][0]
        assert best["category_id"] == 101
        assert best["confidence"] == "high"
        assert best["path_string"] == "Giyim > Kadın Giyim > Kadın Elbise"
        assert "kadin" in data["keywords"]["genders"]

    def test_second_request_cached(self, client, fake_source):
        payload = {"title": "Kadın Mavi Elbise", "description": "Yazlık"}
        client.post(f"{BASE}/hepsiburada/match-category", json=payload)
        response = client.post(f"{BASE}/hepsiburada/match-category", json=payload)

        assert response.json()["data"]["cached"] is True
        assert fake_source.taxonomy_calls == 1

    def test_no_keywords(self, client, fake_source):
        response = client.post(f"{BASE}/hepsiburada/match-category", json={"title": ""})

        body = response.json()
        assert response.status_code == 200
        assert body["status"] == "success"
        assert body["data"]["matches"] == []
        assert body["data"]["count"] == 0
        assert fake_source.taxonomy_calls == 0

    def test_unknown_marketplace(self, client):
        response = client.post(f"{BASE}/amazon/match-category", json={"title": "Kadın Elbise"})

        assert response.status_code == 404
        body = response.json()
        assert body["status"] == "error"
        assert body["data"] is None
        assert body["error_code"] == "UNKNOWN_MARKETPLACE"

    def test_invalid_top_n(self, client):
        response = client.post(f"{BASE}/hepsiburada/match-category", json={"title": "Elbise", "top_n": 0})
        assert response.status_code == 422

    def test_taxonomy_fetch_error(self, client, fake_source):
        fake_source.taxonomy_error = ConnectionError("connection reset")

        response = client.post(f"{BASE}/temu/match-category", json={"title": "Kadın Elbise"})

        assert response.status_code == 503
        assert response.json()["error_code"] == "TAXONOMY_FETCH_ERROR"


class TestSearchEndpoint:
    """GET /categories/search"""

    def test_search(self, client):
        response = client.get(f"{BASE}/hepsiburada/categories/search", params={"q": "telefon"})

        body = response.json()
        assert response.status_code == 200
        assert [c["id"] for c in body["data"]["categories"]] == [202, 201]
        assert body["data"]["count"] == 2

    def test_empty_query(self, client):
        body = client.get(f"{BASE}/hepsiburada/categories/search").json()

        assert body["status"] == "success"
        assert body["data"]["categories"] == []
        assert body["message"] == "검색 결과가 없습니다."

    def test_long_query(self, client):
        response = client.get(f"{BASE}/hepsiburada/categories/search", params={"q": "a" * 201})

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"


class TestCategoryEndpoints:
    def test_tree(self, client):
        body = client.get(f"{BASE}/hepsiburada/categories/tree").json()

        assert body["data"]["load_status"] == "ready"
        assert [node["name"] for node in body["data"]["tree"]] == ["Elektronik", "Giyim", "Kitap"]

    def test_category_by_id(self, client):
        body = client.get(f"{BASE}/trendyol/categories/511").json()

        assert body["data"]["name"] == "Cep Telefonu"
        assert body["data"]["path"] == ["Elektronik", "Telefon", "Cep Telefonu"]

    def test_category_not_found(self, client):
        response = client.get(f"{BASE}/trendyol/categories/999999")

        assert response.status_code == 404
        assert response.json()["error_code"] == "CATEGORY_NOT_FOUND"


class TestAttributeEndpoint:
    """GET /categories/{id}/attributes (대기하지 않음)"""

    def test_idle_without_prefetch(self, client, fake_source):
        body = client.get(f"{BASE}/hepsiburada/categories/101/attributes").json()

        assert body["status"] == "success"
        assert body["data"]["load_status"] == "idle"
        assert body["data"]["attributes"] is None
        assert fake_source.attribute_calls == 0

    def test_prefetch_then_ready(self, client, fake_source):
        url = f"{BASE}/hepsiburada/categories/101/attributes"

        first = client.get(url, params={"prefetch": True}).json()
        assert first["data"]["load_status"] in ("loading", "ready")

        body = poll_attributes(client, url, "ready")

        assert body["data"]["load_status"] == "ready"
        attributes = body["data"]["attributes"]
        assert len(attributes) == 5
        assert attributes[0]["name"] == "Marka"
        assert attributes[0]["type"] == "text"
        assert fake_source.attribute_calls == 1

    def test_fetch_error(self, client, fake_source):
        fake_source.attribute_error = ConnectionError("boom")
        url = f"{BASE}/temu/categories/1001/attributes"

        client.get(url, params={"prefetch": True})
        body = poll_attributes(client, url, "error")

        assert body["status"] == "error"
        assert body["error_code"] == "ATTRIBUTE_FETCH_ERROR"
        assert body["data"]["load_status"] == "error"


class TestHealthAndCache:
    def test_root(self, client):
        assert client.get("/").json()["docs"] == "/docs"

    def test_health(self, client):
        body = client.get("/health").json()

        assert body["status"] == "ok"
        assert set(body["marketplaces"]) == {"hepsiburada", "temu", "trendyol"}

    def test_health_degraded_after_fetch_error(self, client, fake_source):
        fake_source.taxonomy_error = ConnectionError("down")
        client.get(f"{BASE}/temu/categories/tree")

        body = client.get("/health").json()

        assert body["status"] == "degraded"
        assert body["marketplaces"]["temu"] == "error"

    def test_cache_status_and_clear(self, client, fake_source):
        client.post(f"{BASE}/hepsiburada/match-category", json={"title": "Kadın Mavi Elbise"})

        status = client.get("/api/v1/cache/status").json()
        assert status["data"]["marketplaces"]["hepsiburada"]["taxonomy"] == "ready"
        assert status["data"]["cache"]["matches"]["entries"] == 1

        cleared = client.delete("/api/v1/cache").json()
        assert cleared["status"] == "success"
        assert cleared["data"]["cache"]["taxonomies"]["entries"] == 0

        response = client.post(f"{BASE}/hepsiburada/match-category", json={"title": "Kadın Mavi Elbise"})
        assert response.json()["data"]["cached"] is False
        assert fake_source.taxonomy_calls == 2
