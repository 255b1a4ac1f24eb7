"""In-process host used for local development, the CLI and tests."""

from __future__ import annotations

import base64
import json
import sqlite3
from collections import deque
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx
from loguru import logger

from vtxplugin.config.schema import LocalHostSettings
from vtxplugin.core.contracts import Buffer
from vtxplugin.core.errors import HostCallError
from vtxplugin.core.types import (
    CurrentUser,
    DbValue,
    HttpClientRequest,
    HttpClientResponse,
    TranscodeProfile,
    db_value_to_python,
)

from .buffers import FileBuffer, MemoryBuffer, PipeBuffer

PIPE_INPUT = "pipe:0"

# A transcoding profile receives the task and the input (None for stdin input)
# and yields stdout chunks.
ProfileHandler = Callable[[TranscodeProfile, Buffer | None], Iterable[bytes]]


@dataclass(slots=True)
class PublishedEvent:
    topic: str
    payload: Any


def _json_cell(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return base64.b64encode(bytes(value)).decode("ascii")
    return value


class LocalHost:
    """Reference `HostBoundary`: SQLite, disk files, httpx and fake transcoders."""

    def __init__(
        self,
        settings: LocalHostSettings | None = None,
        *,
        http_transport: httpx.BaseTransport | None = None,
    ):
        self.settings = settings or LocalHostSettings()
        self.current_user: CurrentUser | None = None
        self.events: deque[PublishedEvent] = deque(maxlen=self.settings.event_log_limit)
        self._files: dict[str, Path | MemoryBuffer] = {}
        self._profiles: dict[str, ProfileHandler] = {}
        self._http_transport = http_transport
        self._conn = sqlite3.connect(self.settings.database_path)
        self._conn.row_factory = sqlite3.Row
        if self.settings.files_dir:
            self.register_dir(self.settings.files_dir)

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> LocalHost:
        return self

    def __exit__(self, *_exc: Any) -> None:
        self.close()

    # -- host-side setup -------------------------------------------------

    def register_file(self, uuid: str, source: Path | str | bytes) -> None:
        """Expose a disk path (or raw bytes) under `uuid`."""
        if isinstance(source, bytes):
            self._files[uuid] = MemoryBuffer(source)
        else:
            self._files[uuid] = Path(source)

    def register_dir(self, directory: Path | str) -> int:
        root = Path(directory).expanduser()
        count = 0
        if not root.is_dir():
            logger.warning("local host files dir does not exist: {}", root)
            return 0
        for child in sorted(root.iterdir()):
            if child.is_file():
                self.register_file(child.name, child)
                count += 1
        return count

    def register_profile(self, name: str, handler: ProfileHandler) -> None:
        self._profiles[name] = handler

    def run_script(self, sql: str) -> None:
        """Apply a migration script."""
        try:
            self._conn.executescript(sql)
            self._conn.commit()
        except sqlite3.Error as exc:
            raise HostCallError(f"migration failed: {exc}") from exc

    # -- HostBoundary ----------------------------------------------------

    def sql_execute(self, sql: str, params: list[DbValue]) -> int:
        if self.settings.read_only:
            raise HostCallError("Permission denied: database is read-only for this plugin")
        try:
            cursor = self._conn.execute(sql, [db_value_to_python(p) for p in params])
            self._conn.commit()
        except sqlite3.Error as exc:
            raise HostCallError(str(exc)) from exc
        return max(cursor.rowcount, 0)

    def sql_query_json(self, sql: str, params: list[DbValue]) -> str:
        try:
            rows = self._conn.execute(sql, [db_value_to_python(p) for p in params]).fetchall()
        except sqlite3.Error as exc:
            raise HostCallError(str(exc)) from exc
        return json.dumps([{k: _json_cell(row[k]) for k in row.keys()} for row in rows], ensure_ascii=False)

    def open_file(self, uuid: str) -> Buffer:
        source = self._files.get(uuid)
        if source is None:
            raise HostCallError(f"file not found: {uuid}")
        if isinstance(source, MemoryBuffer):
            return MemoryBuffer(source.getvalue())
        if not source.is_file():
            raise HostCallError(f"file not found: {uuid}")
        return FileBuffer(source)

    def create_memory_buffer(self, data: bytes) -> Buffer:
        return MemoryBuffer(data)

    def http_request(self, request: HttpClientRequest) -> HttpClientResponse:
        timeout = request.timeout_ms / 1000 if request.timeout_ms else self.settings.http_timeout_seconds
        try:
            with httpx.Client(timeout=timeout, transport=self._http_transport) as client:
                resp = client.request(
                    request.method.upper(),
                    request.url,
                    headers=request.headers,
                    content=request.body,
                )
        except httpx.HTTPError as exc:
            raise HostCallError(f"http request failed: {exc}") from exc
        return HttpClientResponse(
            status=resp.status_code,
            headers=list(resp.headers.multi_items()),
            body=self.create_memory_buffer(resp.content),
        )

    def ffmpeg_execute(self, params: TranscodeProfile) -> Buffer:
        handler = self._profiles.get(params.profile)
        if handler is None:
            raise HostCallError(f"Profile not found: {params.profile}")
        source: Buffer | None = None
        if params.input_id != PIPE_INPUT:
            source = self.open_file(params.input_id)
        logger.debug("local ffmpeg profile={} input={} options={}", params.profile, params.input_id, len(params.options))
        return PipeBuffer(handler(params, source))

    def publish_event(self, topic: str, payload_json: str) -> None:
        try:
            payload = json.loads(payload_json)
        except json.JSONDecodeError as exc:
            raise HostCallError(f"Invalid event payload: {exc}") from exc
        self.events.append(PublishedEvent(topic=topic, payload=payload))

    def get_current_user(self) -> CurrentUser | None:
        return self.current_user
