"""Byte streams returned by file adapters."""

from __future__ import annotations

import io
from abc import abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

DEFAULT_BLOCK_SIZE = 1024


class ChunkedInputStream(io.RawIOBase):
    """Sequential, read-only stream over an iterator of byte chunks.

    *on_close* releases the underlying source (e.g. an HTTP response) and is
    called once, the first time the stream is closed.
    """

    def __init__(self, chunks: Iterator[bytes], on_close: Callable[[], None] | None = None) -> None:
        super().__init__()
        self._chunks = chunks
        self._on_close = on_close
        self._pending = b""

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:  # type: ignore[override]
        if self.closed:
            raise ValueError("I/O operation on closed stream")
        while not self._pending:
            chunk = next(self._chunks, None)
            if chunk is None:
                return 0
            self._pending = chunk
        n = min(len(buffer), len(self._pending))
        buffer[:n] = self._pending[:n]
        self._pending = self._pending[n:]
        return n

    def close(self) -> None:
        if self.closed:
            return
        self._pending = b""
        try:
            if self._on_close is not None:
                self._on_close()
        finally:
            super().close()


class BlockRandomInputStream(io.RawIOBase):
    """Seekable, read-only stream that fetches its source one block at a time.

    At most one block is buffered.  Reads inside the buffered block are served
    from memory; a read past it fetches the next block with
    :meth:`_read_block`.  :meth:`seek` discards the buffered block, so the next
    read fetches only the window starting at the new position.

    Subclasses implement :meth:`_read_block` and :attr:`length`, and may
    override :meth:`_close_source`.
    """

    def __init__(self, block_size: int = DEFAULT_BLOCK_SIZE) -> None:
        super().__init__()
        if block_size < 1:
            raise ValueError(f"Block size must be positive: {block_size}")
        self.block_size = block_size
        self._block = b""
        self._block_offset = 0
        self._position = 0

    @property
    @abstractmethod
    def length(self) -> int:
        """Total length of the source, in bytes."""
        ...

    @abstractmethod
    def _read_block(self, offset: int, size: int) -> bytes:
        """Fetch up to *size* bytes of the source starting at *offset*.

        Returning fewer bytes than requested is allowed; returning nothing
        means end of source.
        """
        ...

    def _close_source(self) -> None:  # noqa: B027
        """Release the source.  No-op by default."""

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def tell(self) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed stream")
        return self._position

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed stream")
        if whence == io.SEEK_SET:
            target = offset
        elif whence == io.SEEK_CUR:
            target = self._position + offset
        elif whence == io.SEEK_END:
            target = self.length + offset
        else:
            raise ValueError(f"Invalid whence: {whence}")
        if target < 0:
            raise ValueError(f"Negative seek position: {target}")
        self._block = b""
        self._block_offset = target
        self._position = target
        return target

    def readinto(self, buffer) -> int:  # type: ignore[override]
        if self.closed:
            raise ValueError("I/O operation on closed stream")
        remaining = self.length - self._position
        if remaining <= 0 or len(buffer) == 0:
            return 0

        start = self._position - self._block_offset
        if not self._block or not 0 <= start < len(self._block):
            size = min(self.block_size, remaining)
            self._block = self._read_block(self._position, size)
            self._block_offset = self._position
            start = 0
            if not self._block:
                return 0

        n = min(len(buffer), len(self._block) - start)
        buffer[:n] = self._block[start:start + n]
        self._position += n
        return n

    def close(self) -> None:
        if self.closed:
            return
        self._block = b""
        try:
            self._close_source()
        finally:
            super().close()
