"""Buffer implementations used by the local host."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from pathlib import Path


class MemoryBuffer:
    """Sized in-memory blob; writes append."""

    def __init__(self, data: bytes = b""):
        self._data = bytearray(data)

    def size(self) -> int:
        return len(self._data)

    def read(self, offset: int, max_len: int) -> bytes:
        if offset < 0 or offset >= len(self._data) or max_len <= 0:
            return b""
        return bytes(self._data[offset:offset + max_len])

    def write(self, data: bytes) -> int:
        self._data += data
        return len(data)

    def getvalue(self) -> bytes:
        return bytes(self._data)


class FileBuffer:
    """Sized view of a file on disk; writes append to the file."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def size(self) -> int:
        try:
            return self.path.stat().st_size
        except FileNotFoundError:
            return 0

    def read(self, offset: int, max_len: int) -> bytes:
        if offset < 0 or max_len <= 0:
            return b""
        with open(self.path, "rb") as f:
            f.seek(offset)
            return f.read(max_len)

    def write(self, data: bytes) -> int:
        with open(self.path, "ab") as f:
            return f.write(data)


class PipeBuffer:
    """Unsized stream: reports size 0 and ends with an empty read.

    Offsets are ignored. Writes go to `on_write` (a process's stdin) when
    given, otherwise they are collected in `written`.
    """

    def __init__(self, chunks: Iterable[bytes] = (), on_write: Callable[[bytes], int] | None = None):
        self._chunks: Iterator[bytes] = iter(chunks)
        self._pending = b""
        self._on_write = on_write
        self.written = bytearray()
        self.reads = 0

    def size(self) -> int:
        return 0

    def read(self, offset: int, max_len: int) -> bytes:
        self.reads += 1
        if max_len <= 0:
            return b""
        while not self._pending:
            try:
                self._pending = bytes(next(self._chunks))
            except StopIteration:
                return b""
        out, self._pending = self._pending[:max_len], self._pending[max_len:]
        return out

    def write(self, data: bytes) -> int:
        if self._on_write is not None:
            return self._on_write(data)
        self.written += data
        return len(data)
