"""Synchronous HTTP body source using requests."""

import logging
from typing import Optional

import requests
import urllib3

logger = logging.getLogger(__name__)

# Module-level session for connection pooling
_session = None


def _get_session():
    """Get or create the global requests session."""
    global _session
    if _session is None:
        _session = requests.Session()
    return _session


class HTTPBodyReader:
    """Streams the body of a GET response, handing it out through ``readinto``.

    The body is pulled from the raw urllib3 response as the caller asks for it,
    so nothing beyond what was requested is held in memory.
    """

    def __init__(self, url: str):
        self.url = url
        self.bytes_read = 0
        self.requests_made = 0
        self.content_length: Optional[int] = None
        self._response: Optional[requests.Response] = None
        self._session = _get_session()

        # Start the request immediately, body is pulled lazily
        self._open()

    def _open(self):
        try:
            response = self._session.get(self.url, stream=True, timeout=30)
            self.requests_made += 1
        except requests.RequestException as e:
            raise IOError(f"GET request failed: {e}") from e

        if response.status_code >= 400:
            response.close()
            raise IOError(f"GET request failed with status {response.status_code}")

        content_length_header = response.headers.get('content-length')
        if content_length_header:
            self.content_length = int(content_length_header)
        logger.debug("GET %s -> %d (content-length=%s)", self.url, response.status_code, self.content_length)

        # Undo gzip/deflate transfer encodings like iter_content would
        response.raw.decode_content = True
        self._response = response

    def readinto(self, buffer) -> int:
        """Copy up to len(buffer) body bytes into `buffer`; 0 at end of body."""
        if self._response is None:
            raise IOError("Reader is closed")
        if not len(buffer):
            return 0
        try:
            n = self._response.raw.readinto(buffer)
        except (requests.RequestException, urllib3.exceptions.HTTPError) as e:
            raise IOError(f"Reading response body failed: {e}") from e
        self.bytes_read += n
        return n

    def close(self):
        """Release the connection back to the pool."""
        if self._response is not None:
            self._response.close()
            self._response = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def open_http_reader(url: str) -> HTTPBodyReader:
    """Create a synchronous HTTP body reader."""
    return HTTPBodyReader(url)
