from __future__ import annotations
import enum
from dataclasses import dataclass


class ErrorKind(enum.Enum):
    """Classification attached to I/O errors raised by this package."""
    INVALID_DATA = "invalid_data"


class LengthLimitExceeded(Exception):
    """A unit error that represents a length overflow.

    Contains no further information: every instance is interchangeable.
    """

    def __init__(self) -> None:
        super().__init__("Length limit exceeded")

    def __eq__(self, other: object) -> bool:
        return isinstance(other, LengthLimitExceeded)

    def __hash__(self) -> int:
        return hash(LengthLimitExceeded)

    def into_io_error(self) -> InvalidDataError:
        err = InvalidDataError(str(self))
        err.__cause__ = self
        return err


class InvalidDataError(IOError):
    """IOError raised when a stream produced data it was not allowed to."""
    kind = ErrorKind.INVALID_DATA


def is_length_limit_exceeded(exc: BaseException | None) -> bool:
    """True if `exc` is, or was caused by, a LengthLimitExceeded."""
    while exc is not None:
        if isinstance(exc, LengthLimitExceeded):
            return True
        exc = exc.__cause__
    return False


@dataclass(slots=True)
class ReadResult:
    source: str
    success: bool
    bytes_read: int
    bytes_remaining: int
    limit_exceeded: bool = False
    error: str | None = None
    data: bytes | None = None   # only filled when collecting
