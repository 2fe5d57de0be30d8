import asyncio
import logging
from typing import AsyncIterator, Optional

import aiohttp

from backend.tube_api.exceptions import StreamOpenError

logger = logging.getLogger(__name__)


class YouTubeStream:
    """
    One upstream media download piped to one HTTP response.

    The aiohttp session and response are owned by this object. aclose() is
    idempotent and is reached from every exit path: normal end of iteration,
    upstream error, and cancellation when the client disconnects.
    """

    def __init__(self, media_url: str, headers: Optional[dict] = None, chunk_size: int = 64 * 1024, read_timeout: int = 30):
        self.media_url = media_url
        self.headers = dict(headers or {})
        self.chunk_size = chunk_size
        self.read_timeout = read_timeout
        self._session: Optional[aiohttp.ClientSession] = None
        self._response: Optional[aiohttp.ClientResponse] = None
        self.bytes_sent = 0

    async def open(self) -> "YouTubeStream":
        # no total timeout: a long video can take minutes to transfer
        timeout = aiohttp.ClientTimeout(total=None, sock_connect=self.read_timeout, sock_read=self.read_timeout)
        self._session = aiohttp.ClientSession(timeout=timeout)
        try:
            self._response = await self._session.get(self.media_url, headers=self.headers)
        except Exception:
            await self.aclose()
            raise

        if self._response.status != 200:
            status = self._response.status
            await self.aclose()
            raise StreamOpenError(status, self.media_url)

        return self

    @property
    def content_type(self) -> str:
        if self._response is None:
            return "application/octet-stream"
        return self._response.headers.get("Content-Type", "application/octet-stream")

    @property
    def content_length(self) -> Optional[str]:
        if self._response is None:
            return None
        return self._response.headers.get("Content-Length")

    @property
    def is_closed(self) -> bool:
        return self._session is None and self._response is None

    async def iter_chunks(self) -> AsyncIterator[bytes]:
        if self._response is None:
            raise RuntimeError("Stream is not open")
        try:
            async for chunk in self._response.content.iter_chunked(self.chunk_size):
                self.bytes_sent += len(chunk)
                yield chunk
        finally:
            await self.aclose()

    async def aclose(self):
        if self._response is not None:
            self._response.close()
            self._response = None
        if self._session is not None:
            session, self._session = self._session, None
            # completes even when the response task is being cancelled
            await asyncio.shield(session.close())
            logger.debug(f"[Stream] Closed upstream after {self.bytes_sent} bytes")
