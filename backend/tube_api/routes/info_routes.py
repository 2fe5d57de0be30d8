import logging

from fastapi import APIRouter, Query

from backend.tube_api.exceptions import UpstreamErrorKind, classify_upstream_error
from backend.tube_api.utils.helpers import build_watch_url, create_success_response, error_json, is_valid_video_url
from backend.tube_api.youtube import youtube_client
from backend.tube_api.youtube.format_mapper import map_tagged_format
from backend.tube_api.youtube.video_mapper import map_video_detail

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/info", tags=["Video info"])

FORMAT_TYPES = ("all", "audio", "video")

INFO_ERRORS = {
    UpstreamErrorKind.VIDEO_UNAVAILABLE: (404, "Video not found or unavailable"),
    UpstreamErrorKind.VIDEO_PRIVATE: (403, "Video is private"),
    UpstreamErrorKind.AGE_RESTRICTED: (403, "Video is age-restricted"),
    UpstreamErrorKind.UPSTREAM_FAILURE: (500, "Unable to get video information"),
}


def _invalid_id_response():
    return error_json(
        "Invalid video ID",
        "Please provide a valid YouTube video ID",
        status_code=400,
    )


@router.get("/{video_id}")
async def get_video_info(
    video_id: str,
    type: str = Query("all", description="all | audio | video"),
):
    """Detailed metadata, format lists and related videos for one video"""
    url = build_watch_url(video_id)
    if not is_valid_video_url(url):
        return _invalid_id_response()

    format_type = type if type in FORMAT_TYPES else "all"
    logger.info(f"[Info] Getting info for video: {video_id}")

    try:
        info = await youtube_client.get_video_info(url)
    except Exception as e:
        kind = classify_upstream_error(e)
        status_code, message = INFO_ERRORS[kind]
        if status_code == 500:
            logger.exception(f"[Info] Failed to get info for {video_id}: {e}")
        else:
            logger.warning(f"[Info] {video_id} rejected upstream ({kind.value}): {e}")
        return error_json("Info retrieval failed", message, status_code=status_code, details=str(e))

    return create_success_response(
        map_video_detail(info, format_type),
        "Video information retrieved successfully",
    )


@router.get("/{video_id}/formats")
async def get_video_formats(
    video_id: str,
    type: str = Query("all", description="all | audio | video"),
):
    """Every available format, tagged video / audio / video-only"""
    url = build_watch_url(video_id)
    if not is_valid_video_url(url):
        return _invalid_id_response()

    try:
        info = await youtube_client.get_video_info(url)
    except Exception as e:
        logger.exception(f"[Info] Failed to get formats for {video_id}: {e}")
        return error_json(
            "Failed to get formats",
            "Unable to get video formats",
            status_code=500,
            details=str(e),
        )

    formats = info.get("formats") or []
    if type == "audio":
        formats = youtube_client.filter_formats(formats, "audioonly")
    elif type == "video":
        formats = youtube_client.filter_formats(formats, "videoandaudio")
    else:
        formats = youtube_client.filter_formats(formats, "any")

    formatted = [map_tagged_format(fmt) for fmt in formats]
    return create_success_response(
        formatted,
        f"Found {len(formatted)} formats",
        count=len(formatted),
        videoId=video_id,
    )
