from typing import Optional

from backend.tube_api.utils.helpers import format_file_size
from backend.tube_api.youtube.youtube_client import has_audio, has_video

QUALITY_ORDER = {"2160p": 5, "1440p": 4, "1080p": 3, "720p": 2, "480p": 1, "360p": 0}
# labels outside the table (audio bitrates, 240p, 144p, "unknown") sort below 360p
UNKNOWN_QUALITY_RANK = -1


def quality_rank(label: Optional[str]) -> int:
    return QUALITY_ORDER.get(label, UNKNOWN_QUALITY_RANK)


def sort_by_quality(descriptors: list) -> list:
    """Highest tier first; sorted() is stable so equal tiers keep source order."""
    return sorted(descriptors, key=lambda d: quality_rank(d.get("quality")), reverse=True)


def _itag(fmt: dict):
    format_id = str(fmt.get("format_id") or "")
    return int(format_id) if format_id.isdigit() else format_id or None


def video_quality_label(fmt: dict) -> str:
    width, height = fmt.get("width"), fmt.get("height")
    if width and height:
        # vertical videos report the long side as height
        return f"{min(width, height)}p"
    if height:
        return f"{height}p"
    return fmt.get("format_note") or "unknown"


def audio_quality_label(fmt: dict) -> str:
    abr = fmt.get("abr")
    return f"{round(abr)}kbps" if abr else "unknown"


def _size(fmt: dict) -> Optional[int]:
    size = fmt.get("filesize") or fmt.get("filesize_approx")
    return int(size) if size else None


def _bitrate(fmt: dict) -> Optional[int]:
    # yt-dlp reports kbit/s
    tbr = fmt.get("tbr")
    return int(tbr * 1000) if tbr else None


def _resolution(fmt: dict) -> Optional[str]:
    if fmt.get("width") and fmt.get("height"):
        return f"{fmt['width']}x{fmt['height']}"
    return None


def mime_type(fmt: dict) -> Optional[str]:
    ext = fmt.get("ext")
    if not ext:
        return None
    kind = "video" if has_video(fmt) else "audio"
    codecs = [codec for codec in (fmt.get("vcodec"), fmt.get("acodec")) if codec and codec != "none"]
    if codecs:
        return f'{kind}/{ext}; codecs="{", ".join(codecs)}"'
    return f"{kind}/{ext}"


def track_type(fmt: dict) -> str:
    if has_video(fmt) and has_audio(fmt):
        return "video"
    if has_audio(fmt):
        return "audio"
    return "video-only"


def map_audio_format(fmt: dict) -> dict:
    return {
        "itag": _itag(fmt),
        "type": "audio",
        "quality": audio_quality_label(fmt),
        "container": fmt.get("ext"),
        "size": _size(fmt),
        "bitrate": _bitrate(fmt),
    }


def map_video_format(fmt: dict) -> dict:
    return {
        "itag": _itag(fmt),
        "type": "video",
        "quality": video_quality_label(fmt),
        "container": fmt.get("ext"),
        "size": _size(fmt),
        "fps": fmt.get("fps"),
        "bitrate": _bitrate(fmt),
        "resolution": _resolution(fmt),
    }


def map_tagged_format(fmt: dict) -> dict:
    """Format entry for the formats listing, tagged by the tracks it carries."""
    is_video = has_video(fmt)
    size = _size(fmt)
    return {
        "itag": _itag(fmt),
        "type": track_type(fmt),
        "quality": video_quality_label(fmt) if is_video else fmt.get("format_note") or audio_quality_label(fmt),
        "container": fmt.get("ext"),
        "size": size,
        "sizeFormatted": format_file_size(size),
        "bitrate": _bitrate(fmt),
        "fps": fmt.get("fps"),
        "resolution": _resolution(fmt) if is_video else None,
        "audioBitrate": round(fmt["abr"]) if fmt.get("abr") else None,
        "mimeType": mime_type(fmt),
    }


def map_download_format(fmt: dict, audio: bool) -> dict:
    if audio:
        return {
            "itag": _itag(fmt),
            "format": "mp3",
            "quality": audio_quality_label(fmt),
            "size": _size(fmt),
            "url": fmt.get("url"),
            "mimeType": mime_type(fmt),
        }
    return {
        "itag": _itag(fmt),
        "format": "mp4",
        "quality": video_quality_label(fmt),
        "size": _size(fmt),
        "url": fmt.get("url"),
        "mimeType": mime_type(fmt),
        "fps": fmt.get("fps"),
        "bitrate": _bitrate(fmt),
    }
