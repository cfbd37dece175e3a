"""Read loops that drive a reader until end of stream."""

from __future__ import annotations
import errno
import logging

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024  # 64 KB per read step


def _not_ready(reader) -> None:
    raise BlockingIOError(errno.EAGAIN, f"{reader!r} has no data ready; stream not read to the end")


def _check_chunk_size(chunk_size: int) -> None:
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")


def read_to_end(reader, buffer: bytearray, chunk_size: int = DEFAULT_CHUNK_SIZE) -> int:
    """Append everything `reader` produces to `buffer`, return how many bytes were added.

    If a read fails, the bytes produced before the failure stay in `buffer` and the
    error propagates. A non-blocking source returning None raises BlockingIOError.
    """
    _check_chunk_size(chunk_size)
    start = len(buffer)
    chunk = bytearray(chunk_size)
    view = memoryview(chunk)
    while True:
        n = reader.readinto(chunk)
        if n is None:
            _not_ready(reader)
        if n == 0:
            break
        buffer += view[:n]
    logger.debug("read_to_end: %d bytes from %r", len(buffer) - start, reader)
    return len(buffer) - start


def drain(reader, chunk_size: int = DEFAULT_CHUNK_SIZE) -> int:
    """Read `reader` until end of stream, discarding the data. Returns the byte count."""
    _check_chunk_size(chunk_size)
    chunk = bytearray(chunk_size)
    total = 0
    while True:
        n = reader.readinto(chunk)
        if n is None:
            _not_ready(reader)
        if n == 0:
            break
        total += n
    logger.debug("drain: %d bytes from %r", total, reader)
    return total


async def read_to_end_async(reader, buffer: bytearray, chunk_size: int = DEFAULT_CHUNK_SIZE) -> int:
    """Async twin of :func:`read_to_end`; `reader.readinto` must be awaitable."""
    _check_chunk_size(chunk_size)
    start = len(buffer)
    chunk = bytearray(chunk_size)
    view = memoryview(chunk)
    while True:
        n = await reader.readinto(chunk)
        if n is None:
            _not_ready(reader)
        if n == 0:
            break
        buffer += view[:n]
    logger.debug("read_to_end_async: %d bytes from %r", len(buffer) - start, reader)
    return len(buffer) - start


async def drain_async(reader, chunk_size: int = DEFAULT_CHUNK_SIZE) -> int:
    _check_chunk_size(chunk_size)
    chunk = bytearray(chunk_size)
    total = 0
    while True:
        n = await reader.readinto(chunk)
        if n is None:
            _not_ready(reader)
        if n == 0:
            break
        total += n
    logger.debug("drain_async: %d bytes from %r", total, reader)
    return total
