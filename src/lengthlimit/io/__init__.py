"""Source layer for lengthlimit - byte sources to put behind a limit."""

# Re-export these for import convenience
from .base import Readable, AsyncReadable, DEFAULT_CHUNK_SIZE
from .local import open_local_reader, open_local_reader_async
from .http_sync import open_http_reader
from .http_async import open_http_reader_async, close_global_client


def open_reader(source):
    """Factory function to create the appropriate sync source for `source`."""
    if hasattr(source, 'read'):  # BinaryIO
        return open_local_reader(source)

    source_str = str(source)
    if source_str.startswith(('http://', 'https://')):
        return open_http_reader(source_str)
    else:
        return open_local_reader(source)


async def open_reader_async(source):
    """Factory function to create the appropriate async source for `source`."""
    if hasattr(source, 'read'):  # BinaryIO
        return await open_local_reader_async(source)

    source_str = str(source)
    if source_str.startswith(('http://', 'https://')):
        return await open_http_reader_async(source_str)
    else:
        return await open_local_reader_async(source)


__all__ = [
    "Readable", "AsyncReadable", "DEFAULT_CHUNK_SIZE",
    "open_reader", "open_reader_async", "close_global_client",
    "open_local_reader", "open_local_reader_async",
    "open_http_reader", "open_http_reader_async",
]
