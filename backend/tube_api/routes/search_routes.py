import logging
from typing import Optional

from fastapi import APIRouter, Query

from backend.tube_api import config
from backend.tube_api.utils.helpers import create_success_response, error_json
from backend.tube_api.youtube import youtube_client
from backend.tube_api.youtube.video_mapper import map_search_result

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/search", tags=["Search"])


def parse_limit(raw: Optional[str]) -> int:
    try:
        limit = int(raw) if raw else config.SEARCH_DEFAULT_LIMIT
    except ValueError:
        limit = config.SEARCH_DEFAULT_LIMIT
    if limit == 0:
        limit = config.SEARCH_DEFAULT_LIMIT
    return max(1, min(limit, config.SEARCH_MAX_LIMIT))


@router.get("")
async def search_videos(
    q: Optional[str] = Query(None, description="Search query, at least 2 characters"),
    limit: Optional[str] = Query(None, description="Number of results, 1-50 (default 20)"),
    type: str = Query("video", description="video | channel | playlist"),
):
    """Search YouTube and return normalized video summaries"""
    if not q:
        return error_json(
            "Missing query parameter",
            'Please provide a search query using the "q" parameter',
            status_code=400,
        )

    if len(q) < config.SEARCH_MIN_QUERY_LENGTH:
        return error_json(
            "Query too short",
            f"Search query must be at least {config.SEARCH_MIN_QUERY_LENGTH} characters long",
            status_code=400,
        )

    if type not in youtube_client.SEARCH_TYPES:
        return error_json(
            "Invalid type",
            f"Type must be one of: {', '.join(youtube_client.SEARCH_TYPES)}",
            status_code=400,
        )

    search_limit = parse_limit(limit)
    logger.info(f"[Search] Searching for: '{q}' (limit: {search_limit}, type: {type})")

    try:
        entries = await youtube_client.search_videos(q, search_limit, type)
    except Exception as e:
        logger.exception(f"[Search] Search failed for '{q}': {e}")
        return error_json(
            "Search failed",
            "Unable to search YouTube at this time",
            status_code=500,
            details=str(e),
        )

    results = [map_search_result(entry) for entry in entries]

    if not results:
        return create_success_response([], "No videos found", count=0, query=q)

    return create_success_response(
        results,
        f"Found {len(results)} videos",
        count=len(results),
        query=q,
    )


@router.get("/suggestions")
async def search_suggestions(q: Optional[str] = Query(None, description="Partial search query")):
    """Proxy YouTube search suggestions for a partial query"""
    if not q:
        return error_json(
            "Missing query parameter",
            "Please provide a search query",
            status_code=400,
        )

    try:
        suggestions = await youtube_client.get_suggestions(q)
    except Exception as e:
        logger.exception(f"[Search] Suggestions failed for '{q}': {e}")
        return error_json(
            "Failed to get suggestions",
            "Unable to get search suggestions at this time",
            status_code=500,
            details=str(e),
        )

    return create_success_response(
        suggestions,
        f"Found {len(suggestions)} suggestions",
        count=len(suggestions),
        query=q,
    )
