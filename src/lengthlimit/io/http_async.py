"""Asynchronous HTTP body source using httpx."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx

logger = logging.getLogger(__name__)

# Global async client
_client: Optional[httpx.AsyncClient] = None


@asynccontextmanager
async def _get_client():
    """Get or create the global httpx AsyncClient."""
    global _client
    if _client is None:
        _client = httpx.AsyncClient(timeout=60.0)

    try:
        yield _client
    finally:
        # Don't close the client here - it's shared
        pass


class HTTPAsyncBodyReader:
    """Streams the body of a GET response through ``async read(size)``."""

    def __init__(self, url: str):
        self.url = url
        self.bytes_read = 0
        self.requests_made = 0
        self.content_length: Optional[int] = None
        self._response: Optional[httpx.Response] = None
        self._chunks: Optional[AsyncIterator[bytes]] = None
        self._pending = b''
        self._opened = False

    async def _ensure_open(self):
        """Send the GET request and keep the response open for streaming."""
        if self._opened:
            return

        async with _get_client() as client:
            try:
                request = client.build_request("GET", self.url)
                response = await client.send(request, stream=True)
                self.requests_made += 1
            except httpx.RequestError as e:
                raise IOError(f"GET request failed: {e}") from e

        if response.status_code >= 400:
            await response.aclose()
            raise IOError(f"GET request failed with status {response.status_code}")

        content_length_header = response.headers.get('content-length')
        if content_length_header:
            self.content_length = int(content_length_header)
        logger.debug("GET %s -> %d (content-length=%s)", self.url, response.status_code, self.content_length)

        self._response = response
        self._chunks = response.aiter_bytes()
        self._opened = True

    async def read(self, size: int = -1) -> bytes:
        """Return up to `size` body bytes (everything left if size < 0); b'' at end of body."""
        await self._ensure_open()
        if self._chunks is None:
            raise IOError("Reader is closed")
        if size == 0:
            return b''

        if size < 0:
            parts = [self._pending]
            self._pending = b''
            async for chunk in self._iter_chunks():
                parts.append(chunk)
            data = b''.join(parts)
        else:
            while not self._pending:
                chunk = await self._next_chunk()
                if chunk is None:
                    return b''
                self._pending = chunk
            data, self._pending = self._pending[:size], self._pending[size:]

        self.bytes_read += len(data)
        return data

    async def _next_chunk(self) -> Optional[bytes]:
        try:
            return await self._chunks.__anext__()
        except StopAsyncIteration:
            return None
        except httpx.HTTPError as e:
            raise IOError(f"Reading response body failed: {e}") from e

    async def _iter_chunks(self):
        while True:
            chunk = await self._next_chunk()
            if chunk is None:
                return
            yield chunk

    async def aclose(self):
        """Close the response; the shared client stays open."""
        if self._response is not None:
            await self._response.aclose()
            self._response = None
        self._chunks = None
        self._pending = b''

    async def __aenter__(self):
        await self._ensure_open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()


async def open_http_reader_async(url: str) -> HTTPAsyncBodyReader:
    """Create an asynchronous HTTP body reader with the request already sent."""
    reader = HTTPAsyncBodyReader(url)
    await reader._ensure_open()
    return reader


async def close_global_client():
    """Close the global httpx client. Call this at application shutdown."""
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
