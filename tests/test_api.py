"""Tests for the top-level read_source API."""

import io
import tempfile

import pytest

from lengthlimit import read_source, read_source_sync, ReadResult

INPUT = b"these are the input data"


class TestReadSourceSync:
    """Test the synchronous entry point."""

    def test_under_limit(self):
        res = read_source_sync(io.BytesIO(INPUT), 1024, collect=True)
        assert isinstance(res, ReadResult)
        assert res.success is True
        assert res.bytes_read == len(INPUT)
        assert res.bytes_remaining == 1024 - len(INPUT)
        assert res.data == INPUT
        assert res.limit_exceeded is False

    def test_over_limit(self):
        res = read_source_sync(io.BytesIO(INPUT), 5, collect=True)
        assert res.success is False
        assert res.limit_exceeded is True
        assert res.bytes_read == 5
        assert res.bytes_remaining == 0
        assert res.data == b"these"
        assert res.error == "Length limit exceeded"

    def test_exact_limit(self):
        res = read_source_sync(io.BytesIO(INPUT), len(INPUT))
        assert res.success is False
        assert res.limit_exceeded is True
        assert res.bytes_read == len(INPUT)
        assert res.data is None

    def test_path_source(self):
        with tempfile.NamedTemporaryFile() as f:
            f.write(INPUT)
            f.flush()
            res = read_source_sync(f.name, 100)
        assert res.success is True
        assert res.source == f.name
        assert res.bytes_read == len(INPUT)

    def test_missing_source(self):
        res = read_source_sync("/nonexistent/file.bin", 100)
        assert res.success is False
        assert res.limit_exceeded is False
        assert res.bytes_read == 0
        assert res.bytes_remaining == 100

    def test_source_failure_is_not_a_violation(self):
        class Broken(io.RawIOBase):
            def readable(self):
                return True

            def readinto(self, buffer):
                raise ConnectionResetError("gone")

        res = read_source_sync(Broken(), 100)
        assert res.success is False
        assert res.limit_exceeded is False
        assert res.error == "gone"

    def test_not_ready_source_is_not_success(self):
        """A source that stalls mid-body is reported as a failed, incomplete read."""
        class Stalling(io.RawIOBase):
            def __init__(self):
                super().__init__()
                self._steps = [b"abc", None, b"def"]

            def readable(self):
                return True

            def readinto(self, buffer):
                if not self._steps:
                    return 0
                step = self._steps.pop(0)
                if step is None:
                    return None
                buffer[:len(step)] = step
                return len(step)

        res = read_source_sync(Stalling(), 100, collect=True)
        assert res.success is False
        assert res.limit_exceeded is False
        assert res.bytes_read == 3
        assert res.data == b"abc"

    @pytest.mark.parametrize("max_bytes,error", [(-1, ValueError), (1.5, TypeError)])
    def test_invalid_limit_does_not_open_source(self, monkeypatch, max_bytes, error):
        """The limit is checked before any source is opened."""
        opened = []
        monkeypatch.setattr("lengthlimit.open_reader", opened.append)
        with pytest.raises(error):
            read_source_sync("/some/file.bin", max_bytes)
        assert opened == []


class TestReadSource:
    """Test the asynchronous entry point."""

    @pytest.mark.asyncio
    async def test_under_limit(self):
        res = await read_source(io.BytesIO(INPUT), 1024, collect=True)
        assert res.success is True
        assert res.data == INPUT

    @pytest.mark.asyncio
    async def test_over_limit(self):
        res = await read_source(io.BytesIO(INPUT), 5, collect=True, chunk_size=2)
        assert res.success is False
        assert res.limit_exceeded is True
        assert res.data == b"these"

    @pytest.mark.asyncio
    async def test_zero_limit_empty_source(self):
        res = await read_source(io.BytesIO(b""), 0)
        assert res.success is False
        assert res.limit_exceeded is True
        assert res.bytes_read == 0

    @pytest.mark.asyncio
    async def test_missing_source(self):
        res = await read_source("/nonexistent/file.bin", 100)
        assert res.success is False
        assert res.limit_exceeded is False

    @pytest.mark.asyncio
    async def test_invalid_limit_does_not_open_source(self, monkeypatch):
        opened = []

        async def fake_open(source):
            opened.append(source)

        monkeypatch.setattr("lengthlimit.open_reader_async", fake_open)
        with pytest.raises(ValueError):
            await read_source("/some/file.bin", -5)
        assert opened == []
