"""
Reshape yt-dlp info dicts into the JSON view models returned by the API.

Search results come from flat extraction, so only a subset of fields is
present; every lookup here tolerates missing keys.
"""
from typing import Optional

from backend.tube_api import config
from backend.tube_api.utils.helpers import build_watch_url, format_duration, sanitize_string, truncate_text
from backend.tube_api.youtube.format_mapper import map_audio_format, map_video_format
from backend.tube_api.youtube.youtube_client import filter_formats

THUMBNAIL_BASE_URL = "https://i.ytimg.com/vi"
LIVE_STATUSES = ("is_live", "was_live", "post_live")


def _seconds(value) -> int:
    try:
        return max(int(float(value or 0)), 0)
    except (TypeError, ValueError):
        return 0


def _format_date(value: Optional[str]) -> Optional[str]:
    """yt-dlp dates are YYYYMMDD; the API returns YYYY-MM-DD."""
    if not value:
        return None
    value = str(value)
    if len(value) == 8 and value.isdigit():
        return f"{value[:4]}-{value[4:6]}-{value[6:]}"
    return value


def _thumbnail_url(thumbnails: list, index: int) -> Optional[str]:
    try:
        return thumbnails[index].get("url")
    except (IndexError, AttributeError):
        return None


def thumbnail_set(thumbnails: Optional[list]) -> dict:
    thumbnails = thumbnails or []
    return {
        "default": _thumbnail_url(thumbnails, 0),
        "medium": _thumbnail_url(thumbnails, 1),
        "high": _thumbnail_url(thumbnails, 2),
        "maxres": _thumbnail_url(thumbnails, -1),
    }


def video_thumbnail_set(video_id: str) -> dict:
    return {
        "default": f"{THUMBNAIL_BASE_URL}/{video_id}/default.jpg",
        "medium": f"{THUMBNAIL_BASE_URL}/{video_id}/mqdefault.jpg",
        "high": f"{THUMBNAIL_BASE_URL}/{video_id}/hqdefault.jpg",
        "maxres": f"{THUMBNAIL_BASE_URL}/{video_id}/maxresdefault.jpg",
    }


def result_type(entry: dict) -> str:
    if entry.get("ie_key") != "YoutubeTab":
        return "video"
    url = entry.get("url") or ""
    return "playlist" if "list=" in url or "/playlist" in url else "channel"


def map_search_result(entry: dict) -> dict:
    kind = result_type(entry)
    video_id = entry.get("id")
    seconds = _seconds(entry.get("duration"))
    categories = entry.get("categories") or []

    return {
        "id": video_id,
        "title": sanitize_string(entry.get("title")),
        "author": {
            "name": sanitize_string(entry.get("channel") or entry.get("uploader") or "Unknown"),
            "id": entry.get("channel_id"),
            "url": entry.get("channel_url") or entry.get("uploader_url"),
            "verified": bool(entry.get("channel_is_verified")),
        },
        "description": sanitize_string(entry.get("description") or ""),
        "duration": {
            "seconds": seconds,
            "formatted": format_duration(seconds),
        },
        "views": entry.get("view_count"),
        "uploadedAt": _format_date(entry.get("upload_date")),
        "thumbnail": video_thumbnail_set(video_id) if kind == "video" and video_id else thumbnail_set(entry.get("thumbnails")),
        "url": build_watch_url(video_id) if kind == "video" and video_id else entry.get("url"),
        "type": kind,
        "live": entry.get("live_status") == "is_live",
        "tags": entry.get("tags") or [],
        "category": categories[0] if categories else "Unknown",
    }


def map_related_video(entry: dict) -> dict:
    thumbnails = entry.get("thumbnails") or []
    return {
        "id": entry.get("id"),
        "title": entry.get("title"),
        "author": entry.get("channel") or entry.get("uploader"),
        "duration": format_duration(_seconds(entry.get("duration"))),
        "views": entry.get("view_count"),
        "thumbnail": _thumbnail_url(thumbnails, 0) or entry.get("thumbnail"),
    }


def map_video_detail(info: dict, format_type: str = "all") -> dict:
    formats = info.get("formats") or []
    audio_formats = []
    video_formats = []
    if format_type in ("all", "audio"):
        audio_formats = [map_audio_format(fmt) for fmt in filter_formats(formats, "audioonly")]
    if format_type in ("all", "video"):
        video_formats = [map_video_format(fmt) for fmt in filter_formats(formats, "videoandaudio")]

    related = [
        map_related_video(entry)
        for entry in (info.get("related_videos") or [])[:config.RELATED_VIDEOS_LIMIT]
        if entry
    ]

    seconds = _seconds(info.get("duration"))
    age_limit = info.get("age_limit") or 0
    video_id = info.get("id")
    channel_thumbnails = info.get("channel_thumbnails") or []

    return {
        "id": video_id,
        "title": info.get("title"),
        "description": info.get("description"),
        "author": {
            "name": info.get("channel") or info.get("uploader"),
            "id": info.get("channel_id"),
            "url": info.get("channel_url") or info.get("uploader_url"),
            "avatar": _thumbnail_url(channel_thumbnails, 0),
            "verified": bool(info.get("channel_is_verified")),
            "subscribers": info.get("channel_follower_count"),
        },
        "duration": {
            "seconds": seconds,
            "formatted": format_duration(seconds),
        },
        "views": info.get("view_count"),
        "likes": info.get("like_count"),
        "uploadDate": _format_date(info.get("upload_date")),
        "publishDate": _format_date(info.get("release_date") or info.get("upload_date")),
        "thumbnails": thumbnail_set(info.get("thumbnails")),
        "category": (info.get("categories") or [None])[0],
        "tags": info.get("tags") or [],
        "isLive": info.get("live_status") in LIVE_STATUSES,
        "isPrivate": info.get("availability") == "private",
        "ageRestricted": age_limit >= 18,
        "familySafe": age_limit == 0,
        "availableCountries": info.get("available_countries"),
        "formats": {
            "audio": audio_formats,
            "video": video_formats,
            "total": len(formats),
        },
        "relatedVideos": related,
        "url": build_watch_url(video_id),
    }


def map_download_video(info: dict) -> dict:
    thumbnails = info.get("thumbnails") or []
    return {
        "id": info.get("id"),
        "title": info.get("title"),
        "author": info.get("channel") or info.get("uploader"),
        "duration": _seconds(info.get("duration")),
        "views": info.get("view_count"),
        "thumbnail": _thumbnail_url(thumbnails, -1) or info.get("thumbnail"),
        "uploadDate": _format_date(info.get("upload_date")),
        "description": truncate_text(info.get("description"), config.DESCRIPTION_PREVIEW_LENGTH),
    }
