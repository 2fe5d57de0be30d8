from enum import Enum

from yt_dlp.utils import GeoRestrictedError


class UpstreamErrorKind(str, Enum):
    VIDEO_UNAVAILABLE = "VIDEO_UNAVAILABLE"
    VIDEO_PRIVATE = "VIDEO_PRIVATE"
    AGE_RESTRICTED = "AGE_RESTRICTED"
    UPSTREAM_FAILURE = "UPSTREAM_FAILURE"


class StreamOpenError(Exception):
    """Raised when the direct media URL answers with a non-200 status."""

    def __init__(self, status: int, url: str):
        super().__init__(f"Upstream stream returned HTTP {status}")
        self.status = status
        self.url = url


# matched against the lowercased message; the first phrase found wins
UPSTREAM_ERROR_PHRASES = (
    ("video unavailable", UpstreamErrorKind.VIDEO_UNAVAILABLE),
    ("age-restricted", UpstreamErrorKind.AGE_RESTRICTED),
    ("confirm your age", UpstreamErrorKind.AGE_RESTRICTED),
    ("inappropriate for some users", UpstreamErrorKind.AGE_RESTRICTED),
    ("private", UpstreamErrorKind.VIDEO_PRIVATE),
)

# exception classes that carry their kind without any message inspection
UPSTREAM_ERROR_TYPES = (
    (GeoRestrictedError, UpstreamErrorKind.VIDEO_UNAVAILABLE),
)


def _error_chain(error: BaseException) -> list:
    # yt-dlp's DownloadError wraps the extractor error in exc_info
    chain = [error]
    exc_info = getattr(error, "exc_info", None)
    if exc_info and len(exc_info) > 1 and exc_info[1] is not None and exc_info[1] is not error:
        chain.append(exc_info[1])
    if error.__cause__ is not None:
        chain.append(error.__cause__)
    return chain


def classify_upstream_error(error: BaseException) -> UpstreamErrorKind:
    chain = _error_chain(error)

    for exc in chain:
        for exc_type, kind in UPSTREAM_ERROR_TYPES:
            if isinstance(exc, exc_type):
                return kind

    for exc in chain:
        message = str(exc).lower()
        for phrase, kind in UPSTREAM_ERROR_PHRASES:
            if phrase in message:
                return kind

    return UpstreamErrorKind.UPSTREAM_FAILURE
