"""
Validation, formatting and response-envelope helpers shared by all routes.
"""
import re
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi.responses import JSONResponse

from backend.tube_api import config

_VALID_URL_PATTERN = re.compile(
    r"^(https?://)?(www\.)?(youtube\.com/(watch\?v=|embed/|v/)|youtu\.be/)[\w-]{11}(&[\w=]*)?$"
)

# Looser than _VALID_URL_PATTERN: also accepts /e/, /user/<name>/<x>/<id> and
# ?list=...&v=<id> forms. The trailing lookahead rejects ids longer than 11 chars.
_VIDEO_ID_PATTERN = re.compile(
    r"(?:youtube\.com/(?:[^/]+/.+/|(?:v|e(?:mbed)?)/|.*[?&]v=)|youtu\.be/)"
    r"([^\"&?/\s]{11})(?=$|[\"&?/#\s])"
)

_SCRIPT_BLOCK_PATTERN = re.compile(
    r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE
)
_FILENAME_UNSAFE_PATTERN = re.compile(r"[^\w\s]")

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


def build_watch_url(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={video_id}"


def is_valid_video_url(url: Optional[str]) -> bool:
    """
    Strict check used before any upstream call: watch?v=, embed/, v/ and
    youtu.be/ shapes with an 11-character id and optional &key=value tail.
    """
    if not url:
        return False
    return bool(_VALID_URL_PATTERN.match(url))


def extract_video_id(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    match = _VIDEO_ID_PATTERN.search(url)
    return match.group(1) if match else None


def format_duration(seconds) -> str:
    """Render seconds as H:MM:SS (one hour or more) or M:SS."""
    if not seconds:
        return "0:00"

    total = int(seconds)
    hrs, remainder = divmod(total, 3600)
    mins, secs = divmod(remainder, 60)

    if hrs > 0:
        return f"{hrs}:{mins:02d}:{secs:02d}"
    return f"{mins}:{secs:02d}"


def sanitize_string(text: Optional[str]) -> str:
    # Not an HTML sanitizer: only drops script blocks and angle brackets.
    if not text:
        return ""
    without_scripts = _SCRIPT_BLOCK_PATTERN.sub("", text)
    return re.sub(r"[<>]", "", without_scripts).strip()


def sanitize_filename(title: Optional[str]) -> str:
    return _FILENAME_UNSAFE_PATTERN.sub("", title or "").strip()


def truncate_text(text: Optional[str], length: int) -> str:
    if not text:
        return ""
    if len(text) <= length:
        return text
    return text[:length] + "..."


def format_file_size(num_bytes) -> str:
    if not num_bytes:
        return "Unknown"

    value = float(num_bytes)
    index = 0
    while value >= 1024 and index < len(_SIZE_UNITS) - 1:
        value /= 1024
        index += 1
    value = round(value, 2)
    if value == int(value):
        value = int(value)
    return f"{value} {_SIZE_UNITS[index]}"


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def create_success_response(data: Any, message: str = "Success", **extra) -> dict:
    response = {
        "success": True,
        "message": message,
        "data": data,
    }
    response.update(extra)
    response["timestamp"] = utc_timestamp()
    response["api"] = config.API_TAG
    return response


def create_error_response(
    error: str,
    message: str,
    details: Optional[str] = None,
    status_code: int = 500,
) -> dict:
    response = {
        "success": False,
        "error": error,
        "message": message,
    }
    if config.SHOW_ERROR_DETAILS and details is not None:
        response["details"] = details
    response["statusCode"] = status_code
    response["timestamp"] = utc_timestamp()
    return response


def error_json(
    error: str,
    message: str,
    status_code: int,
    details: Optional[str] = None,
) -> JSONResponse:
    return JSONResponse(
        create_error_response(error, message, details=details, status_code=status_code),
        status_code=status_code,
    )
