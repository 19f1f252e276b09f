"""
Tests for /api/keywords endpoints.

The keyword generator is overridden through app.dependency_overrides so no
model or crawl call is made.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from backend.agents.keywords import GenerationResult
from backend.main import app
from backend.routes.keywords import get_keyword_generator

AUTH_HEADERS = {"Authorization": "Bearer fake-test-token"}


@pytest.fixture
def mock_generator(client):
    generator = MagicMock()
    generator.generate = AsyncMock(return_value=GenerationResult(
        keywords={
            "menu_service": ["ランチセット"],
            "environment_facility": ["個室あり"],
            "recommended_scene": ["女子会"],
        },
        source="ai",
    ))
    app.dependency_overrides[get_keyword_generator] = lambda: generator
    return generator


class TestGetKeywords:
    def test_facility_without_keywords_has_three_empty_lists(self, client, facility_id):
        response = client.get(f"/api/keywords/{facility_id}")

        assert response.status_code == 200
        assert response.json()["data"] == {
            "menu_service": [],
            "environment_facility": [],
            "recommended_scene": [],
        }

    def test_unknown_facility_returns_404(self, client):
        response = client.get("/api/keywords/999")

        assert response.status_code == 404

    def test_stats_summary(self, client, fake_db):
        fake_db.tables["keywords"].extend([
            {"id": 1, "facility_id": 1, "category": "menu_service", "keyword": "a"},
            {"id": 2, "facility_id": 2, "category": "recommended_scene", "keyword": "b"},
        ])

        response = client.get("/api/keywords/stats/summary")

        assert response.status_code == 200
        assert response.json()["data"] == {
            "totalCount": 2,
            "categoryCounts": {"menu_service": 1, "environment_facility": 0, "recommended_scene": 1},
        }


class TestUpdateKeywords:
    """PUT /api/keywords/{facility_id} replaces the whole set."""

    def test_update_requires_auth(self, client, facility_id):
        response = client.put(f"/api/keywords/{facility_id}", json={"menu_service": ["a"]})

        assert response.status_code == 401

    def test_update_then_read_round_trip(self, client, mock_auth, facility_id):
        payload = {"menu_service": [" ランチ ", ""], "recommended_scene": ["デート"]}

        response = client.put(f"/api/keywords/{facility_id}", headers=AUTH_HEADERS, json=payload)

        assert response.status_code == 200
        expected = {
            "menu_service": ["ランチ"],
            "environment_facility": [],
            "recommended_scene": ["デート"],
        }
        assert response.json()["data"] == expected
        assert client.get(f"/api/keywords/{facility_id}").json()["data"] == expected

    def test_over_length_keyword_returns_400(self, client, mock_auth, fake_db, facility_id):
        response = client.put(
            f"/api/keywords/{facility_id}",
            headers=AUTH_HEADERS,
            json={"menu_service": ["x" * 150]},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
        assert fake_db.tables["keywords"] == []

    def test_update_unknown_facility_returns_404(self, client, mock_auth):
        response = client.put("/api/keywords/999", headers=AUTH_HEADERS, json={})

        assert response.status_code == 404


class TestGenerateKeywords:
    """POST /api/keywords/generate/{facility_id}."""

    def test_generate_saves_and_returns_keywords(
        self, client, mock_auth, mock_generator, fake_db, facility_id
    ):
        response = client.post(f"/api/keywords/generate/{facility_id}", headers=AUTH_HEADERS)

        assert response.status_code == 200
        body = response.json()
        assert body["data"]["menu_service"] == ["ランチセット"]
        assert body["meta"] == {"source": "ai", "error_category": None}

        facility = mock_generator.generate.await_args.args[0]
        assert facility["facility_name"] == "Sample Diner"
        assert len(fake_db.tables["keywords"]) == 3

    def test_fallback_result_is_reported_in_meta(self, client, mock_auth, mock_generator, facility_id):
        mock_generator.generate.return_value = GenerationResult(
            keywords={"menu_service": ["x"], "environment_facility": ["y"], "recommended_scene": ["z"]},
            source="fallback",
            error_category="rate_limit",
        )

        response = client.post(f"/api/keywords/generate/{facility_id}", headers=AUTH_HEADERS)

        assert response.status_code == 200
        assert response.json()["meta"] == {"source": "fallback", "error_category": "rate_limit"}

    def test_generate_unknown_facility_returns_404(self, client, mock_auth, mock_generator):
        response = client.post("/api/keywords/generate/999", headers=AUTH_HEADERS)

        assert response.status_code == 404
        mock_generator.generate.assert_not_awaited()

    def test_generate_requires_auth(self, client, mock_generator, facility_id):
        response = client.post(f"/api/keywords/generate/{facility_id}")

        assert response.status_code == 401


class TestDeleteKeywords:
    def test_delete_reports_count(self, client, mock_auth, fake_db, facility_id):
        fake_db.tables["keywords"].extend([
            {"id": 10, "facility_id": 1, "category": "menu_service", "keyword": "a"},
            {"id": 11, "facility_id": 1, "category": "menu_service", "keyword": "b"},
        ])

        response = client.delete(f"/api/keywords/{facility_id}", headers=AUTH_HEADERS)

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Deleted 2 keywords"}
        assert fake_db.tables["keywords"] == []
