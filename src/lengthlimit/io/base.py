"""Base protocols and shared constants for the source layer."""

from typing import Protocol, runtime_checkable

from ..core.drive import DEFAULT_CHUNK_SIZE  # noqa: F401


@runtime_checkable
class Readable(Protocol):
    """Protocol for synchronous byte sources."""

    def readinto(self, buffer) -> int | None:
        """Fill up to len(buffer) bytes, return how many; 0 means end of stream."""
        ...


@runtime_checkable
class AsyncReadable(Protocol):
    """Protocol for asynchronous byte sources."""

    async def read(self, size: int = -1) -> bytes:
        """Return up to `size` bytes; b'' means end of stream."""
        ...
