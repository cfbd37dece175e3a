"""Length-limited readers.

The number of bytes read through a wrapper never exceeds the byte limit it was
built with. The limit is exclusive: if the wrapped source is exactly as long as
the limit, the read that would observe end of stream fails instead.

Failures are raised as :class:`InvalidDataError` (an ``IOError``) whose
``__cause__`` is :class:`LengthLimitExceeded`. Errors raised by the wrapped
source pass through untouched.
"""

from __future__ import annotations
import inspect
from typing import Generic, TypeVar

from .drive import read_to_end, read_to_end_async
from .model import LengthLimitExceeded

T = TypeVar("T")


def _check_max_bytes(max_bytes) -> int:
    if isinstance(max_bytes, bool) or not isinstance(max_bytes, int):
        raise TypeError(f"max_bytes must be an int, got {type(max_bytes).__name__}")
    if max_bytes < 0:
        raise ValueError("max_bytes cannot be negative")
    return max_bytes


def _narrow(buffer, bytes_remaining: int) -> memoryview:
    view = memoryview(buffer).cast("B")
    if len(view) > bytes_remaining:
        view = view[:bytes_remaining]
    return view


def _store(view: memoryview, data) -> int | None:
    """Copy the result of a plain read(n) call into the destination view."""
    if data is None:
        return None
    n = len(data)
    if n > len(view):
        raise IOError(f"Source returned {n} bytes, only {len(view)} were requested")
    view[:n] = data
    return n


def _checked(n: int | None, view: memoryview) -> int | None:
    if n is not None and n > len(view):
        raise IOError(f"Source reported {n} bytes, only {len(view)} were requested")
    return n


class _LengthLimitBase(Generic[T]):
    def __init__(self, reader: T, max_bytes: int):
        self._reader = reader
        self._max_bytes = _check_max_bytes(max_bytes)
        self._bytes_remaining = self._max_bytes
        self._unwrapped = False

    @property
    def bytes_remaining(self) -> int:
        """Number of additional bytes that may be read before the limit is reached."""
        return self._bytes_remaining

    @property
    def max_bytes(self) -> int:
        return self._max_bytes

    def get_ref(self) -> T:
        """Borrow the wrapped source. Reading from it directly bypasses the limit."""
        self._ensure_wrapped()
        return self._reader

    def into_inner(self) -> T:
        """Hand back the wrapped source at its current position.

        Whatever budget was left is discarded and this wrapper cannot be read again.
        """
        self._ensure_wrapped()
        reader = self._reader
        self._reader = None
        self._unwrapped = True
        return reader

    def _ensure_wrapped(self) -> None:
        if self._unwrapped:
            raise ValueError("source has been unwrapped from this LengthLimit")

    def _begin_step(self, buffer) -> memoryview:
        self._ensure_wrapped()
        if self._bytes_remaining == 0:
            raise LengthLimitExceeded().into_io_error()
        return _narrow(buffer, self._bytes_remaining)

    def _end_step(self, n: int | None) -> int | None:
        if n:
            self._bytes_remaining = max(self._bytes_remaining - n, 0)
        return n

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(reader={self._reader!r}, "
                f"bytes_remaining={self._bytes_remaining})")


class LengthLimit(_LengthLimitBase[T]):
    """Synchronous length limiter around any object with ``readinto`` or ``read``."""

    def readinto(self, buffer) -> int | None:
        view = self._begin_step(buffer)
        readinto = getattr(self._reader, "readinto", None)
        if readinto is not None:
            n = _checked(readinto(view), view)
        else:
            n = _store(view, self._reader.read(len(view)))
        return self._end_step(n)

    def read(self, size: int | None = -1) -> bytes | None:
        """Read up to `size` bytes, or everything until end of stream if size < 0.

        Reading everything raises on a violation and drops the partial data;
        use :func:`read_to_end` to keep it.
        """
        if size is None or size < 0:
            out = bytearray()
            read_to_end(self, out)
            return bytes(out)
        buf = bytearray(min(size, self._bytes_remaining))
        n = self.readinto(buf)
        if n is None:
            return None
        return bytes(buf[:n])

    def readable(self) -> bool:
        return True

    def close(self) -> None:
        """Close the wrapped source if it can be closed."""
        close = getattr(self._reader, "close", None)
        if close is not None:
            close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class AsyncLengthLimit(_LengthLimitBase[T]):
    """Asynchronous length limiter.

    The wrapped source's ``readinto``/``read`` may be coroutine functions or plain
    methods; awaiting the source is the only suspension point of a read step, and
    the budget only changes once that await has completed.
    """

    async def readinto(self, buffer) -> int | None:
        view = self._begin_step(buffer)
        readinto = getattr(self._reader, "readinto", None)
        if readinto is not None:
            n = readinto(view)
            if inspect.isawaitable(n):
                n = await n
            n = _checked(n, view)
        else:
            data = self._reader.read(len(view))
            if inspect.isawaitable(data):
                data = await data
            n = _store(view, data)
        return self._end_step(n)

    async def read(self, size: int | None = -1) -> bytes | None:
        """Async twin of :meth:`LengthLimit.read`."""
        if size is None or size < 0:
            out = bytearray()
            await read_to_end_async(self, out)
            return bytes(out)
        buf = bytearray(min(size, self._bytes_remaining))
        n = await self.readinto(buf)
        if n is None:
            return None
        return bytes(buf[:n])

    async def aclose(self) -> None:
        """Close the wrapped source, awaiting it if needed."""
        close = getattr(self._reader, "aclose", None) or getattr(self._reader, "close", None)
        if close is not None:
            res = close()
            if inspect.isawaitable(res):
                await res

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
