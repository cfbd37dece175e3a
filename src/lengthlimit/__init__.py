"""lengthlimit - put a hard, exclusive byte limit on streamed input."""

import logging

from .core.model import (                                              # re-export
    ErrorKind, InvalidDataError, LengthLimitExceeded, ReadResult, is_length_limit_exceeded,
)
from .core.limit import LengthLimit, AsyncLengthLimit, _check_max_bytes
from .core.units import (
    Unit, to_bytes,
    limit_bytes, limit_kb, limit_mb, limit_gb,
    limit_bytes_async, limit_kb_async, limit_mb_async, limit_gb_async,
)
from .core.drive import DEFAULT_CHUNK_SIZE, read_to_end, drain, read_to_end_async, drain_async
from .io import open_reader, open_reader_async

logger = logging.getLogger(__name__)


def _failed(source, limited, error: OSError, data: bytearray | None) -> ReadResult:
    exceeded = is_length_limit_exceeded(error)
    if not exceeded:
        logger.debug("reading %s failed: %s", source, error)
    return ReadResult(
        source=str(source),
        success=False,
        bytes_read=limited.max_bytes - limited.bytes_remaining,
        bytes_remaining=limited.bytes_remaining,
        limit_exceeded=exceeded,
        error=str(error),
        data=bytes(data) if data is not None else None,
    )


def _open_failed(source, max_bytes: int, error: OSError) -> ReadResult:
    logger.debug("opening %s failed: %s", source, error)
    return ReadResult(source=str(source), success=False, bytes_read=0,
                      bytes_remaining=max_bytes, error=str(error))


async def read_source(source, max_bytes: int, *, collect: bool = False,
                      chunk_size: int = DEFAULT_CHUNK_SIZE) -> ReadResult:
    """Read a source (path, URL, or file-like object) asynchronously under a byte limit."""
    _check_max_bytes(max_bytes)
    try:
        reader = await open_reader_async(source)
    except OSError as e:
        return _open_failed(source, max_bytes, e)
    async with AsyncLengthLimit(reader, max_bytes) as limited:
        data = bytearray() if collect else None
        try:
            if collect:
                n = await read_to_end_async(limited, data, chunk_size)
            else:
                n = await drain_async(limited, chunk_size)
        except OSError as e:
            return _failed(source, limited, e, data)
        return ReadResult(
            source=str(source),
            success=True,
            bytes_read=n,
            bytes_remaining=limited.bytes_remaining,
            data=bytes(data) if collect else None,
        )


def read_source_sync(source, max_bytes: int, *, collect: bool = False,
                     chunk_size: int = DEFAULT_CHUNK_SIZE) -> ReadResult:
    """Read a source (path, URL, or file-like object) synchronously under a byte limit."""
    _check_max_bytes(max_bytes)
    try:
        reader = open_reader(source)
    except OSError as e:
        return _open_failed(source, max_bytes, e)
    with LengthLimit(reader, max_bytes) as limited:
        data = bytearray() if collect else None
        try:
            if collect:
                n = read_to_end(limited, data, chunk_size)
            else:
                n = drain(limited, chunk_size)
        except OSError as e:
            return _failed(source, limited, e, data)
        return ReadResult(
            source=str(source),
            success=True,
            bytes_read=n,
            bytes_remaining=limited.bytes_remaining,
            data=bytes(data) if collect else None,
        )


__all__ = [
    "read_source", "read_source_sync",
    "LengthLimit", "AsyncLengthLimit",
    "LengthLimitExceeded", "InvalidDataError", "ErrorKind", "ReadResult", "is_length_limit_exceeded",
    "Unit", "to_bytes",
    "limit_bytes", "limit_kb", "limit_mb", "limit_gb",
    "limit_bytes_async", "limit_kb_async", "limit_mb_async", "limit_gb_async",
    "read_to_end", "drain", "read_to_end_async", "drain_async",
    "open_reader", "open_reader_async", "DEFAULT_CHUNK_SIZE",
]
