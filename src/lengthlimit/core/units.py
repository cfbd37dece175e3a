"""Unit helpers for building length limiters (1 KB = 1024 bytes)."""

from __future__ import annotations
import enum

from .limit import AsyncLengthLimit, LengthLimit


class Unit(enum.Enum):
    B = 1
    KB = 1024
    MB = 1024 * 1024
    GB = 1024 * 1024 * 1024

    @classmethod
    def parse(cls, name: str) -> "Unit":
        try:
            return cls[name.upper()]
        except KeyError:
            raise ValueError(f"Unknown unit {name!r}, expected one of b, kb, mb, gb") from None


def to_bytes(value: int, unit: Unit | str = Unit.B) -> int:
    if isinstance(unit, str):
        unit = Unit.parse(unit)
    return value * unit.value


def limit_bytes(reader, max_bytes: int) -> LengthLimit:
    """Wrap `reader` with an exclusive maximum of `max_bytes` bytes."""
    return LengthLimit(reader, max_bytes)


def limit_kb(reader, max_kb: int) -> LengthLimit:
    return limit_bytes(reader, to_bytes(max_kb, Unit.KB))


def limit_mb(reader, max_mb: int) -> LengthLimit:
    return limit_bytes(reader, to_bytes(max_mb, Unit.MB))


def limit_gb(reader, max_gb: int) -> LengthLimit:
    return limit_bytes(reader, to_bytes(max_gb, Unit.GB))


def limit_bytes_async(reader, max_bytes: int) -> AsyncLengthLimit:
    """Wrap an async `reader` with an exclusive maximum of `max_bytes` bytes."""
    return AsyncLengthLimit(reader, max_bytes)


def limit_kb_async(reader, max_kb: int) -> AsyncLengthLimit:
    return limit_bytes_async(reader, to_bytes(max_kb, Unit.KB))


def limit_mb_async(reader, max_mb: int) -> AsyncLengthLimit:
    return limit_bytes_async(reader, to_bytes(max_mb, Unit.MB))


def limit_gb_async(reader, max_gb: int) -> AsyncLengthLimit:
    return limit_bytes_async(reader, to_bytes(max_gb, Unit.GB))
