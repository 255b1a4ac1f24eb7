"""Buffer helpers: opening host files, memory buffers and bounded reads."""

from __future__ import annotations

from typing import Any

from loguru import logger

from vtxplugin.core.contracts import Buffer
from vtxplugin.core.errors import HostCallError, SerializationError, VtxError
from vtxplugin.core.serialization import from_json

from .binding import current_host

READ_CHUNK_BYTES = 64 * 1024
READ_MAX_BYTES = 64 * 1024 * 1024


def open_file(uuid: str) -> Buffer:
    """Open a host file by id."""
    try:
        return current_host().open_file(uuid)
    except HostCallError as exc:
        raise VtxError.from_host_message(exc.message) from exc


def memory_buffer(data: bytes | str) -> Buffer:
    """Materialize bytes into a host-owned memory buffer (e.g. a response body)."""
    raw = data.encode("utf-8") if isinstance(data, str) else bytes(data)
    return current_host().create_memory_buffer(raw)


def read_all(
    buffer: Buffer,
    *,
    chunk_size: int = READ_CHUNK_BYTES,
    max_total: int = READ_MAX_BYTES,
) -> bytes:
    """Read a whole buffer in bounded chunks.

    Sized handles (file/memory) are read window by window up to `size()`.
    A handle reporting size 0 is treated as a pipe and drained at offset 0
    until an empty read. Either way at most `max_total` bytes are returned.

    Note: an empty sized resource also reports 0, so it goes through the pipe
    path; its first read comes back empty and the result is the same.
    """
    out = bytearray()
    total = buffer.size()
    if total > 0:
        offset = 0
        while offset < total and len(out) < max_total:
            to_read = min(chunk_size, total - offset, max_total - len(out))
            chunk = buffer.read(offset, to_read)
            if not chunk:
                break
            out += chunk
            offset += len(chunk)
    else:
        while len(out) < max_total:
            chunk = buffer.read(0, min(chunk_size, max_total - len(out)))
            if not chunk:
                break
            out += chunk
    if len(out) >= max_total:
        if len(out) > max_total:
            del out[max_total:]
        logger.debug("read_all stopped at byte cap {}", max_total)
    return bytes(out)


def read_to_string(buffer: Buffer, **kwargs: Any) -> str:
    data = read_all(buffer, **kwargs)
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise SerializationError(str(exc)) from exc


def read_json(buffer: Buffer, model: Any = None, **kwargs: Any) -> Any:
    """Decode the buffer as JSON, optionally validated into `model`."""
    return from_json(read_to_string(buffer, **kwargs), model=model)


def write_all(buffer: Buffer, data: bytes | str) -> int:
    """Append to a buffer (file: append, pipe: stdin, memory: append)."""
    raw = data.encode("utf-8") if isinstance(data, str) else bytes(data)
    return buffer.write(raw)
