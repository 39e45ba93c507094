"""Tests for ChunkedInputStream and BlockRandomInputStream."""

from __future__ import annotations

import io

import pytest

from polyfs.fs.streams import BlockRandomInputStream, ChunkedInputStream


class MemoryRandomStream(BlockRandomInputStream):
    """Serves an in-memory buffer and records every block fetch."""

    def __init__(self, data: bytes, block_size: int = 4) -> None:
        super().__init__(block_size)
        self.data = data
        self.fetches: list[tuple[int, int]] = []
        self.source_closed = 0

    @property
    def length(self) -> int:
        return len(self.data)

    def _read_block(self, offset: int, size: int) -> bytes:
        self.fetches.append((offset, size))
        return self.data[offset : offset + size]

    def _close_source(self) -> None:
        self.source_closed += 1


# ---------------------------------------------------------------------------
# ChunkedInputStream
# ---------------------------------------------------------------------------


class TestChunkedInputStream:
    def test_read_all(self):
        stream = ChunkedInputStream(iter([b"ab", b"", b"cde"]))
        assert stream.read() == b"abcde"
        assert stream.read() == b""

    def test_partial_reads(self):
        stream = ChunkedInputStream(iter([b"abcdef"]))
        assert stream.read(2) == b"ab"
        assert stream.read(10) == b"cdef"

    def test_buffered_wrapper(self):
        stream = io.BufferedReader(ChunkedInputStream(iter([b"line1\n", b"line2\n"])))
        assert stream.readline() == b"line1\n"
        assert stream.readline() == b"line2\n"

    def test_close_once(self):
        calls = []
        stream = ChunkedInputStream(iter([b"x"]), on_close=lambda: calls.append(1))
        stream.close()
        stream.close()
        assert calls == [1]
        assert stream.closed

    def test_close_completes_when_hook_fails(self):
        calls = []

        def release():
            calls.append(1)
            raise OSError("release failed")

        stream = ChunkedInputStream(iter([b"x"]), on_close=release)
        with pytest.raises(OSError, match="release failed"):
            stream.close()
        assert stream.closed
        stream.close()
        assert calls == [1]

    def test_read_after_close(self):
        stream = ChunkedInputStream(iter([b"x"]))
        stream.close()
        with pytest.raises(ValueError):
            stream.read(1)

    def test_context_manager(self):
        calls = []
        with ChunkedInputStream(iter([b"x"]), on_close=lambda: calls.append(1)) as stream:
            assert stream.read() == b"x"
        assert calls == [1]


# ---------------------------------------------------------------------------
# BlockRandomInputStream
# ---------------------------------------------------------------------------


class TestBlockRandomInputStream:
    def test_sequential_read_fetches_blocks(self):
        stream = MemoryRandomStream(b"0123456789")
        assert stream.read() == b"0123456789"
        assert stream.fetches == [(0, 4), (4, 4), (8, 2)]

    def test_reads_within_block_served_from_memory(self):
        stream = MemoryRandomStream(b"0123456789")
        assert stream.read(1) == b"0"
        assert stream.read(2) == b"12"
        assert stream.fetches == [(0, 4)]

    def test_seek_discards_block(self):
        stream = MemoryRandomStream(b"0123456789")
        stream.read(1)
        assert stream.seek(2) == 2
        assert stream.read(1) == b"2"
        assert stream.fetches == [(0, 4), (2, 4)]

    @pytest.mark.parametrize(
        ("offset", "whence", "expected"),
        [
            pytest.param(3, io.SEEK_SET, 3, id="set"),
            pytest.param(2, io.SEEK_CUR, 7, id="cur"),
            pytest.param(-2, io.SEEK_END, 8, id="end"),
        ],
    )
    def test_seek_modes(self, offset, whence, expected):
        stream = MemoryRandomStream(b"0123456789")
        stream.seek(5)
        assert stream.seek(offset, whence) == expected
        assert stream.tell() == expected

    def test_negative_seek(self):
        stream = MemoryRandomStream(b"0123456789")
        with pytest.raises(ValueError):
            stream.seek(-1)

    def test_read_past_end(self):
        stream = MemoryRandomStream(b"0123456789")
        stream.seek(20)
        assert stream.read(4) == b""
        assert stream.fetches == []

    def test_last_block_is_truncated(self):
        stream = MemoryRandomStream(b"0123456789")
        stream.seek(9)
        assert stream.read(4) == b"9"
        assert stream.fetches == [(9, 1)]

    def test_close_idempotent(self):
        stream = MemoryRandomStream(b"0123")
        stream.close()
        stream.close()
        assert stream.source_closed == 1
        with pytest.raises(ValueError):
            stream.read(1)

    def test_close_completes_when_source_close_fails(self):
        class FailingCloseStream(MemoryRandomStream):
            def _close_source(self) -> None:
                super()._close_source()
                raise OSError("release failed")

        stream = FailingCloseStream(b"0123")
        with pytest.raises(OSError):
            stream.close()
        assert stream.closed
        stream.close()
        assert stream.source_closed == 1

    def test_invalid_block_size(self):
        with pytest.raises(ValueError):
            MemoryRandomStream(b"", block_size=0)
