"""Tests for GET /api/search and GET /api/search/suggestions."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from backend.tube_api import config
from backend.tube_api.routes.search_routes import parse_limit

SEARCH = "backend.tube_api.youtube.youtube_client.search_videos"
SUGGEST = "backend.tube_api.youtube.youtube_client.get_suggestions"


class TestParseLimit:
    @pytest.mark.parametrize(
        "raw, expected",
        [(None, 20), ("", 20), ("abc", 20), ("0", 20), ("10", 10), ("999", 50), ("-5", 1), ("50", 50)],
    )
    def test_clamping(self, raw, expected):
        assert parse_limit(raw) == expected


class TestSearchValidation:
    def test_missing_query(self, client):
        with patch(SEARCH, new_callable=AsyncMock) as search:
            response = client.get("/api/search")

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Missing query parameter"
        assert body["statusCode"] == 400
        search.assert_not_called()

    def test_query_too_short(self, client):
        """
        GIVEN a one-character query
        WHEN GET /api/search?q=a
        THEN 400 "Query too short" and YouTube is never contacted
        """
        with patch(SEARCH, new_callable=AsyncMock) as search:
            response = client.get("/api/search", params={"q": "a"})

        assert response.status_code == 400
        assert response.json()["error"] == "Query too short"
        search.assert_not_called()

    def test_invalid_type(self, client):
        with patch(SEARCH, new_callable=AsyncMock) as search:
            response = client.get("/api/search", params={"q": "music", "type": "movie"})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid type"
        search.assert_not_called()


class TestSearch:
    def test_results_are_mapped(self, client, search_entries):
        with patch(SEARCH, new_callable=AsyncMock, return_value=search_entries) as search:
            response = client.get("/api/search", params={"q": "rick astley", "limit": "5"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Found 2 videos"
        assert body["count"] == 2
        assert body["query"] == "rick astley"
        assert body["api"] == config.API_TAG
        assert body["data"][0]["id"] == "dQw4w9WgXcQ"
        assert body["data"][0]["duration"]["formatted"] == "3:32"
        search.assert_awaited_once_with("rick astley", 5, "video")

    def test_limit_is_clamped_before_upstream(self, client):
        with patch(SEARCH, new_callable=AsyncMock, return_value=[]) as search:
            client.get("/api/search", params={"q": "music", "limit": "999"})
        search.assert_awaited_once_with("music", 50, "video")

    def test_playlist_type_forwarded(self, client):
        with patch(SEARCH, new_callable=AsyncMock, return_value=[]) as search:
            client.get("/api/search", params={"q": "music", "type": "playlist"})
        search.assert_awaited_once_with("music", 20, "playlist")

    def test_no_results(self, client):
        with patch(SEARCH, new_callable=AsyncMock, return_value=[]):
            response = client.get("/api/search", params={"q": "zzzzzzzzzz"})

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "No videos found"
        assert body["data"] == []
        assert body["count"] == 0

    def test_upstream_failure(self, client):
        with patch(SEARCH, new_callable=AsyncMock, side_effect=RuntimeError("network down")):
            response = client.get("/api/search", params={"q": "music"})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Search failed"
        assert "details" not in body

    def test_failure_details_outside_production(self, client, monkeypatch):
        monkeypatch.setattr(config, "SHOW_ERROR_DETAILS", True)
        with patch(SEARCH, new_callable=AsyncMock, side_effect=RuntimeError("network down")):
            response = client.get("/api/search", params={"q": "music"})
        assert response.json()["details"] == "network down"


class TestSuggestions:
    def test_missing_query(self, client):
        response = client.get("/api/search/suggestions")
        assert response.status_code == 400
        assert response.json()["error"] == "Missing query parameter"

    def test_suggestions(self, client):
        with patch(SUGGEST, new_callable=AsyncMock, return_value=["rick astley", "rick roll"]):
            response = client.get("/api/search/suggestions", params={"q": "rick"})

        assert response.status_code == 200
        body = response.json()
        assert body["data"] == ["rick astley", "rick roll"]
        assert body["count"] == 2
        assert body["query"] == "rick"

    def test_failure(self, client):
        with patch(SUGGEST, new_callable=AsyncMock, side_effect=RuntimeError("HTTP 503")):
            response = client.get("/api/search/suggestions", params={"q": "rick"})

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to get suggestions"
