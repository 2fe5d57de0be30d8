"""Shared test fixtures for tube-api."""

from __future__ import annotations

import copy

import pytest
from fastapi.testclient import TestClient

from backend.tube_api import config

VIDEO_ID = "dQw4w9WgXcQ"
WATCH_URL = f"https://www.youtube.com/watch?v={VIDEO_ID}"

SAMPLE_INFO = {
    "id": VIDEO_ID,
    "title": "Rick Astley - Never Gonna Give You Up",
    "description": "d" * 250,
    "channel": "Rick Astley",
    "channel_id": "UCuAXFkgsw1L7xaCfnd5JJOw",
    "channel_url": "https://www.youtube.com/channel/UCuAXFkgsw1L7xaCfnd5JJOw",
    "channel_is_verified": True,
    "channel_follower_count": 4_000_000,
    "duration": 212,
    "view_count": 1_500_000_000,
    "like_count": 17_000_000,
    "upload_date": "20091025",
    "categories": ["Music"],
    "tags": ["rick astley", "never gonna give you up"],
    "live_status": "not_live",
    "availability": "public",
    "age_limit": 0,
    "thumbnails": [
        {"url": f"https://i.ytimg.com/vi/{VIDEO_ID}/default.jpg"},
        {"url": f"https://i.ytimg.com/vi/{VIDEO_ID}/mqdefault.jpg"},
        {"url": f"https://i.ytimg.com/vi/{VIDEO_ID}/hqdefault.jpg"},
        {"url": f"https://i.ytimg.com/vi/{VIDEO_ID}/maxresdefault.jpg"},
    ],
    "formats": [
        {"format_id": "sb0", "ext": "mhtml", "vcodec": "none", "acodec": "none", "format_note": "storyboard"},
        {
            "format_id": "140", "ext": "m4a", "vcodec": "none", "acodec": "mp4a.40.2",
            "abr": 129.5, "tbr": 129.5, "filesize": 3_433_514, "format_note": "medium",
            "url": "https://rr1.googlevideo.com/videoplayback?itag=140",
        },
        {
            "format_id": "251", "ext": "webm", "vcodec": "none", "acodec": "opus",
            "abr": 135.1, "tbr": 135.1, "filesize": 3_437_753, "format_note": "medium",
            "url": "https://rr1.googlevideo.com/videoplayback?itag=251",
        },
        {
            "format_id": "18", "ext": "mp4", "vcodec": "avc1.42001E", "acodec": "mp4a.40.2",
            "width": 640, "height": 360, "fps": 25, "tbr": 503.2, "filesize_approx": 13_000_000,
            "url": "https://rr1.googlevideo.com/videoplayback?itag=18",
        },
        {
            "format_id": "22", "ext": "mp4", "vcodec": "avc1.64001F", "acodec": "mp4a.40.2",
            "width": 1280, "height": 720, "fps": 25, "tbr": 1200.0,
            "url": "https://rr1.googlevideo.com/videoplayback?itag=22",
        },
        {
            "format_id": "137", "ext": "mp4", "vcodec": "avc1.640028", "acodec": "none",
            "width": 1920, "height": 1080, "fps": 25, "tbr": 4400.0, "filesize": 80_000_000,
            "url": "https://rr1.googlevideo.com/videoplayback?itag=137",
        },
    ],
}

SAMPLE_SEARCH_ENTRIES = [
    {
        "_type": "url",
        "ie_key": "Youtube",
        "id": VIDEO_ID,
        "url": WATCH_URL,
        "title": "Never Gonna <b>Give</b> You Up<script>alert(1)</script>",
        "description": "The official video",
        "duration": 212.0,
        "channel": "Rick Astley",
        "channel_id": "UCuAXFkgsw1L7xaCfnd5JJOw",
        "channel_url": "https://www.youtube.com/channel/UCuAXFkgsw1L7xaCfnd5JJOw",
        "channel_is_verified": True,
        "view_count": 1_500_000_000,
        "live_status": None,
    },
    {
        "_type": "url",
        "ie_key": "Youtube",
        "id": "9bZkp7q19f0",
        "url": "https://www.youtube.com/watch?v=9bZkp7q19f0",
        "title": "PSY - GANGNAM STYLE",
        "duration": 4000,
        "uploader": "officialpsy",
        "view_count": 5_000_000_000,
    },
]


@pytest.fixture()
def sample_info() -> dict:
    return copy.deepcopy(SAMPLE_INFO)


@pytest.fixture()
def search_entries() -> list:
    return copy.deepcopy(SAMPLE_SEARCH_ENTRIES)


@pytest.fixture(autouse=True)
def _production_mode(monkeypatch):
    """Default every test to production so error details stay hidden unless a test opts in."""
    monkeypatch.setattr(config, "SHOW_ERROR_DETAILS", False)


@pytest.fixture()
def make_app(monkeypatch):
    """Build a fresh app per test; rate limiting is off unless a test turns it on."""
    from backend.tube_api.main import create_app

    def _make(rate_limit: bool = False, max_requests: int = 100, trust_proxy: bool = False):
        monkeypatch.setattr(config, "RATE_LIMIT_ENABLED", rate_limit)
        monkeypatch.setattr(config, "RATE_LIMIT_STORAGE", "memory")
        monkeypatch.setattr(config, "RATE_LIMIT_MAX_REQUESTS", max_requests)
        monkeypatch.setattr(config, "TRUST_PROXY_HEADERS", trust_proxy)
        return create_app()

    return _make


@pytest.fixture()
def make_client(make_app):
    def _make(**options) -> TestClient:
        return TestClient(make_app(**options))

    return _make


@pytest.fixture()
def client(make_client) -> TestClient:
    return make_client()
