"""Response envelopes for the plugin's request handler."""

from __future__ import annotations

from typing import Any

from loguru import logger

from vtxplugin.core.errors import (
    AuthDenied,
    DatabaseError,
    HostCallError,
    NotFound,
    PermissionDenied,
    SerializationError,
    VtxError,
)
from vtxplugin.core.serialization import to_json_bytes
from vtxplugin.core.types import HttpRequest, HttpResponse

from .binding import current_host

Request = HttpRequest
Response = HttpResponse

_EMPTY_ARRAY = b"[]"


def error_message(err: VtxError) -> str:
    """User-visible message for an error envelope."""
    if isinstance(err, AuthDenied):
        return f"Authentication failed: {err}"
    if isinstance(err, (NotFound, PermissionDenied)):
        return err.message
    if isinstance(err, SerializationError):
        return f"Bad Request: {err.message}"
    if isinstance(err, DatabaseError):
        return f"Database Error: {err.message}"
    return f"Internal Error: {err.message}"


class ResponseBuilder:
    """Builds `HttpResponse` envelopes.

    Bodies are always host buffers: JSON is written into a memory buffer,
    files are passed through as the handle the host opened. Streaming and
    range handling of file bodies happen on the host.
    """

    @staticmethod
    def json(data: Any, status: int = 200) -> Response:
        """JSON response.

        If `data` cannot be serialized the body falls back to `[]` and the
        status is unchanged, so a 200 here does not prove the payload made it.
        NaN and infinities are rejected rather than encoded as `null`, so a
        payload containing one falls back too.
        """
        try:
            body = to_json_bytes(data)
        except SerializationError as exc:
            logger.debug("json response fell back to []: {}", exc.message)
            body = _EMPTY_ARRAY
        return HttpResponse(status=status, body=current_host().create_memory_buffer(body))

    @staticmethod
    def text(body: str, status: int = 200) -> Response:
        return HttpResponse(status=status, body=current_host().create_memory_buffer(body.encode("utf-8")))

    @staticmethod
    def error(err: VtxError) -> Response:
        """Error envelope with the status mapped from the error kind.

        ```json
        {"success": false, "error": true, "code": 403,
         "type": "PermissionDenied", "message": "..."}
        ```
        """
        status = err.status_code
        body = {
            "success": False,
            "error": True,
            "code": status,
            "type": err.type_name,
            "message": error_message(err),
        }
        return ResponseBuilder.json(body, status=status)

    @staticmethod
    def file(uuid: str) -> Response:
        """Stream a host file by id; unknown ids give a 404 error envelope."""
        try:
            buffer = current_host().open_file(uuid)
        except HostCallError as exc:
            return ResponseBuilder.error(NotFound(f"File UUID not found: {exc.message}"))
        return HttpResponse(status=200, body=buffer)

    @staticmethod
    def status(code: int) -> Response:
        return HttpResponse(status=code, body=None)

    @staticmethod
    def not_found() -> Response:
        return ResponseBuilder.status(404)

    @staticmethod
    def no_content() -> Response:
        return ResponseBuilder.status(204)
