"""
Thin async wrapper around yt-dlp and the YouTube suggest endpoint.

yt-dlp is synchronous, so every extraction runs in a worker thread. Nothing is
cached: each call goes to YouTube.
"""
import asyncio
import logging
from typing import Optional
from urllib.parse import quote_plus

import aiohttp
import yt_dlp
from yt_dlp.extractor import get_info_extractor

from backend.tube_api import config

logger = logging.getLogger(__name__)

SUGGEST_URL = "https://suggestqueries-clients6.youtube.com/complete/search"
RESULTS_URL = "https://www.youtube.com/results"

FORWARD_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/135.0.0.0 Safari/537.36",
    "Accept": "*/*",
    "Accept-Language": "en-US,en;q=0.5",
}

# YouTube "sp" result filters for the results page
SEARCH_TYPE_FILTERS = {
    "channel": "EgIQAg%3D%3D",
    "playlist": "EgIQAw%3D%3D",
}
SEARCH_TYPES = ("video", "channel", "playlist")

AUDIO_STREAM_FORMATS = ("mp3", "audio")


def _ydl_options(**overrides) -> dict:
    options = {
        "quiet": True,
        "no_warnings": True,
        "noplaylist": True,
        "skip_download": True,
    }
    if config.YTDLP_COOKIES_FILE:
        options["cookiefile"] = config.YTDLP_COOKIES_FILE
    options.update(overrides)
    return options


def _extract(url: str, options: dict) -> dict:
    with yt_dlp.YoutubeDL(options) as ydl:
        info = ydl.extract_info(url, download=False)
        return ydl.sanitize_info(info)


def is_supported_url(url: str) -> bool:
    """Ask yt-dlp's YouTube extractor whether it would handle this URL."""
    return bool(get_info_extractor("Youtube").suitable(url))


async def get_video_info(url: str, format_selector: Optional[str] = None) -> dict:
    options = _ydl_options()
    if format_selector:
        options["format"] = format_selector
    return await asyncio.to_thread(_extract, url, options)


async def search_videos(query: str, limit: int, search_type: str = "video") -> list:
    if search_type == "video":
        target = f"ytsearch{limit}:{query}"
        options = _ydl_options(extract_flat="in_playlist")
    else:
        target = f"{RESULTS_URL}?search_query={quote_plus(query)}&sp={SEARCH_TYPE_FILTERS[search_type]}"
        options = _ydl_options(extract_flat="in_playlist", playlistend=limit, noplaylist=False)

    result = await asyncio.to_thread(_extract, target, options)
    entries = [entry for entry in (result or {}).get("entries") or [] if entry]
    return entries[:limit]


async def get_suggestions(query: str) -> list:
    params = {"client": "firefox", "ds": "yt", "q": query}
    timeout = aiohttp.ClientTimeout(total=config.UPSTREAM_TIMEOUT_SECONDS)

    async with aiohttp.ClientSession(timeout=timeout) as session:
        async with session.get(SUGGEST_URL, params=params, headers=FORWARD_HEADERS) as resp:
            if resp.status != 200:
                raise RuntimeError(f"Suggestions endpoint returned HTTP {resp.status}")
            payload = await resp.json(content_type=None)

    # payload shape: [query, [suggestion, ...], ...]
    if not isinstance(payload, list) or len(payload) < 2:
        return []
    return [item for item in payload[1] if isinstance(item, str)]


def has_video(fmt: dict) -> bool:
    return (fmt.get("vcodec") or "none") != "none"


def has_audio(fmt: dict) -> bool:
    return (fmt.get("acodec") or "none") != "none"


def filter_formats(formats: list, kind: str) -> list:
    """
    Filters: audioonly, videoonly, videoandaudio, audio, video. "any" keeps
    every format carrying at least one track, which drops storyboard images.
    """
    checks = {
        "audioonly": lambda f: has_audio(f) and not has_video(f),
        "videoonly": lambda f: has_video(f) and not has_audio(f),
        "videoandaudio": lambda f: has_video(f) and has_audio(f),
        "audio": has_audio,
        "video": has_video,
        "any": lambda f: has_audio(f) or has_video(f),
    }
    if kind not in checks:
        raise ValueError(f"Unknown format filter: {kind}")
    return [fmt for fmt in formats or [] if checks[kind](fmt)]


def stream_format_selector(fmt: str, quality: str) -> str:
    audio = fmt in AUDIO_STREAM_FORMATS
    if quality and quality.isdigit():
        return quality
    if quality == "lowest":
        return "worstaudio" if audio else "worst[acodec!=none][vcodec!=none]"
    return "bestaudio" if audio else "best[acodec!=none][vcodec!=none]"


async def resolve_stream(url: str, fmt: str, quality: str) -> dict:
    """
    Resolve the direct media URL for one format.

    Returns a dict with title, ext, media_url and http_headers for the
    format yt-dlp selected.
    """
    selector = stream_format_selector(fmt, quality)
    info = await get_video_info(url, format_selector=selector)

    media_url = info.get("url")
    if not media_url:
        raise RuntimeError(f"No direct media URL for format selector '{selector}'")

    logger.info(f"[Stream] Resolved format {info.get('format_id')} ({selector}) for {info.get('id')}")
    return {
        "title": info.get("title") or info.get("id") or "video",
        "ext": info.get("ext"),
        "media_url": media_url,
        "http_headers": info.get("http_headers") or FORWARD_HEADERS,
    }
