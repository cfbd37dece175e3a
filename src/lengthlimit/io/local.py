"""Local file sources."""

import asyncio
import logging
from pathlib import Path
from typing import BinaryIO, Union

logger = logging.getLogger(__name__)


class LocalReader:
    """Synchronous reader over a path or an open binary file object."""

    def __init__(self, source: Union[Path, str, BinaryIO]):
        self.bytes_read = 0
        self.requests_made = 0
        self._should_close_file = False

        if hasattr(source, 'read'):
            # BinaryIO object, read from its current position
            self._file = source
        else:
            self._file = open(source, 'rb')
            self._should_close_file = True
            logger.debug("opened %s", source)

    def readinto(self, buffer) -> int | None:
        """Fill `buffer` from the file, returning the byte count (0 at end of file)."""
        if self._file is None:
            raise IOError("Reader is closed")
        self.requests_made += 1
        readinto = getattr(self._file, 'readinto', None)
        if readinto is not None:
            n = readinto(buffer)
        else:
            data = self._file.read(len(buffer))
            n = len(data)
            buffer[:n] = data
        if n:
            self.bytes_read += n
        return n

    def read(self, size: int = -1) -> bytes:
        if self._file is None:
            raise IOError("Reader is closed")
        self.requests_made += 1
        data = self._file.read(size)
        self.bytes_read += len(data)
        return data

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        """Close the file if we opened it."""
        if self._should_close_file and self._file is not None:
            self._file.close()
        self._file = None


class LocalAsyncReader:
    """Asynchronous local reader - thin wrapper around the sync reader."""

    def __init__(self, source: Union[Path, str, BinaryIO]):
        self._sync_reader = LocalReader(source)

    @property
    def bytes_read(self) -> int:
        return self._sync_reader.bytes_read

    @property
    def requests_made(self) -> int:
        return self._sync_reader.requests_made

    async def readinto(self, buffer) -> int | None:
        return await asyncio.to_thread(self._sync_reader.readinto, buffer)

    async def read(self, size: int = -1) -> bytes:
        return await asyncio.to_thread(self._sync_reader.read, size)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Close the underlying sync reader."""
        await asyncio.to_thread(self._sync_reader.close)


def open_local_reader(source: Union[Path, str, BinaryIO]) -> LocalReader:
    """Create a synchronous local reader."""
    return LocalReader(source)


async def open_local_reader_async(source: Union[Path, str, BinaryIO]) -> LocalAsyncReader:
    """Create an asynchronous local reader."""
    return await asyncio.to_thread(LocalAsyncReader, source)
