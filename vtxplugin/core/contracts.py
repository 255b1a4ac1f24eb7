"""Runtime contracts between plugin code and the host."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .types import CurrentUser, DbValue, HttpClientRequest, HttpClientResponse, TranscodeProfile


@runtime_checkable
class Buffer(Protocol):
    """Host-owned byte storage: a file, a memory blob or a pipe.

    Sized handles report their length; pipes report 0 and signal end of data
    with an empty read.
    """

    def size(self) -> int: ...
    def read(self, offset: int, max_len: int) -> bytes: ...
    def write(self, data: bytes) -> int: ...


@runtime_checkable
class HostBoundary(Protocol):
    """Calls the plugin may make into the host.

    Implementations raise `HostCallError` with the host's message on failure.
    """

    def sql_execute(self, sql: str, params: list[DbValue]) -> int: ...
    def sql_query_json(self, sql: str, params: list[DbValue]) -> str: ...
    def open_file(self, uuid: str) -> Buffer: ...
    def create_memory_buffer(self, data: bytes) -> Buffer: ...
    def http_request(self, request: HttpClientRequest) -> HttpClientResponse: ...
    def ffmpeg_execute(self, params: TranscodeProfile) -> Buffer: ...
    def publish_event(self, topic: str, payload_json: str) -> None: ...
    def get_current_user(self) -> CurrentUser | None: ...
