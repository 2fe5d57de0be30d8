from fastapi import APIRouter

from backend.tube_api import config
from backend.tube_api.utils.helpers import utc_timestamp

router = APIRouter(prefix="/api", tags=["System"])

AVAILABLE_ENDPOINTS = [
    "/api",
    "/api/health",
    "/api/search",
    "/api/search/suggestions",
    "/api/info/:videoId",
    "/api/info/:videoId/formats",
    "/api/download",
    "/api/download/stream/:videoId",
]

API_DOCUMENTATION = {
    "name": config.API_NAME,
    "version": config.API_VERSION,
    "description": "YouTube search, video information and download links",
    "endpoints": {
        "search": {
            "url": "/api/search",
            "method": "GET",
            "params": {
                "q": "search query (min 2 characters)",
                "limit": "number (optional, 1-50, default: 20)",
                "type": "video|channel|playlist (optional, default: video)",
            },
            "description": "Search YouTube videos",
        },
        "suggestions": {
            "url": "/api/search/suggestions",
            "method": "GET",
            "params": {"q": "partial search query"},
            "description": "Search suggestions for a partial query",
        },
        "videoInfo": {
            "url": "/api/info/:videoId",
            "method": "GET",
            "params": {"type": "all|audio|video (optional, default: all)"},
            "description": "Get detailed video information",
        },
        "videoFormats": {
            "url": "/api/info/:videoId/formats",
            "method": "GET",
            "params": {"type": "all|audio|video (optional, default: all)"},
            "description": "List every available format",
        },
        "download": {
            "url": "/api/download",
            "method": "POST",
            "body": {"url": "youtube video url", "format": "mp3|audio|mp4|best", "quality": "highest|lowest"},
            "description": "Get download links for YouTube videos",
        },
        "stream": {
            "url": "/api/download/stream/:videoId",
            "method": "GET",
            "params": {"format": "mp4|mp3", "quality": "highest|lowest|<itag>"},
            "description": "Stream a video or its audio track as a file download",
        },
        "health": {
            "url": "/api/health",
            "method": "GET",
            "description": "Service health check",
        },
    },
}


@router.get("/health")
async def health():
    return {
        "status": "OK",
        "message": f"{config.API_NAME} is running",
        "version": config.API_VERSION,
        "timestamp": utc_timestamp(),
    }


@router.get("")
async def api_documentation():
    return API_DOCUMENTATION
