"""Outbound HTTP performed by the host on the plugin's behalf."""

from __future__ import annotations

from vtxplugin.core.errors import HostCallError, VtxError
from vtxplugin.core.types import HttpClientRequest, HttpClientResponse

from .binding import current_host

Request = HttpClientRequest
Response = HttpClientResponse


def request(req: Request) -> Response:
    try:
        return current_host().http_request(req)
    except HostCallError as exc:
        raise VtxError.from_host_message(exc.message) from exc


def get(url: str, headers: list[tuple[str, str]] | None = None, timeout_ms: int | None = None) -> Response:
    return request(HttpClientRequest(method="GET", url=url, headers=list(headers or []), timeout_ms=timeout_ms))
