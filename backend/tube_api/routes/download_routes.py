import logging
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.background import BackgroundTask
from starlette.responses import StreamingResponse

from backend.tube_api import config
from backend.tube_api.exceptions import UpstreamErrorKind, classify_upstream_error
from backend.tube_api.utils.helpers import (
    build_watch_url,
    create_success_response,
    error_json,
    extract_video_id,
    is_valid_video_url,
    sanitize_filename,
)
from backend.tube_api.youtube import youtube_client
from backend.tube_api.youtube.format_mapper import map_download_format, sort_by_quality
from backend.tube_api.youtube.video_mapper import map_download_video
from backend.tube_api.youtube.youtube_stream import YouTubeStream

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/download", tags=["Download"])

AUDIO_FORMATS = ("mp3", "audio")

DOWNLOAD_ERRORS = {
    UpstreamErrorKind.VIDEO_UNAVAILABLE: (404, "Video is unavailable or private"),
    UpstreamErrorKind.VIDEO_PRIVATE: (403, "Video is private"),
    UpstreamErrorKind.AGE_RESTRICTED: (403, "Video is age-restricted"),
    UpstreamErrorKind.UPSTREAM_FAILURE: (500, "Unable to process download request"),
}


class DownloadRequest(BaseModel):
    url: Optional[str] = None
    format: str = "best"
    # accepted for compatibility; ordering comes from the quality sort alone
    quality: str = "highest"


@router.post("")
async def create_download_links(req: Optional[DownloadRequest] = None):
    """Direct stream URLs for a video, best quality first"""
    req = req or DownloadRequest()

    if not req.url:
        return error_json("Missing URL", "Please provide a YouTube video URL", status_code=400)

    if not is_valid_video_url(req.url):
        return error_json("Invalid URL", "Please provide a valid YouTube video URL", status_code=400)

    video_id = extract_video_id(req.url)
    logger.info(f"[Download] Processing download request for: {video_id} (format={req.format})")

    if not youtube_client.is_supported_url(req.url):
        return error_json("Invalid video", "Video not found or unavailable", status_code=400)

    try:
        info = await youtube_client.get_video_info(req.url)
    except Exception as e:
        kind = classify_upstream_error(e)
        status_code, message = DOWNLOAD_ERRORS[kind]
        if status_code == 500:
            logger.exception(f"[Download] Failed for {video_id}: {e}")
        else:
            logger.warning(f"[Download] {video_id} rejected upstream ({kind.value}): {e}")
        return error_json("Download failed", message, status_code=status_code, details=str(e))

    audio = req.format in AUDIO_FORMATS
    family = youtube_client.filter_formats(info.get("formats") or [], "audioonly" if audio else "videoandaudio")
    download_formats = sort_by_quality([map_download_format(fmt, audio) for fmt in family])

    return create_success_response(
        {
            "video": map_download_video(info),
            "formats": download_formats[:config.DOWNLOAD_MAX_FORMATS],
            "requestedFormat": req.format,
            "totalFormats": len(download_formats),
        },
        "Download links generated successfully",
    )


@router.get("/stream/{video_id}")
async def stream_download(
    video_id: str,
    format: str = Query("mp4", description="mp4 | mp3 | audio"),
    quality: str = Query("highest", description="highest | lowest | <itag>"),
):
    """Pipe the selected format straight to the client as an attachment"""
    url = build_watch_url(video_id)
    if not is_valid_video_url(url) or not youtube_client.is_supported_url(url):
        return JSONResponse({"error": "Invalid video ID"}, status_code=400)

    try:
        resolved = await youtube_client.resolve_stream(url, format, quality)
        stream = await YouTubeStream(
            resolved["media_url"],
            headers=resolved["http_headers"],
            chunk_size=config.STREAM_CHUNK_SIZE,
            read_timeout=config.UPSTREAM_TIMEOUT_SECONDS,
        ).open()
    except Exception as e:
        logger.exception(f"[Stream] Failed to open stream for {video_id}: {e}")
        return JSONResponse(
            {
                "error": "Stream failed",
                "message": str(e) if config.SHOW_ERROR_DETAILS else "Unable to stream this video",
            },
            status_code=500,
        )

    extension = sanitize_filename(format) or "mp4"
    filename = sanitize_filename(resolved["title"]) or video_id
    ascii_filename = filename.encode("ascii", "ignore").decode().strip() or video_id
    headers = {
        "Content-Disposition": (
            f'attachment; filename="{ascii_filename}.{extension}"; '
            f"filename*=UTF-8''{quote(filename)}.{extension}"
        )
    }
    if stream.content_length:
        headers["Content-Length"] = stream.content_length

    logger.info(f"[Stream] Streaming {video_id} as {format} ({quality})")
    # the background task covers the case where the body is never iterated
    return StreamingResponse(
        stream.iter_chunks(),
        media_type=stream.content_type,
        headers=headers,
        background=BackgroundTask(stream.aclose),
    )
