"""SDK helpers that reach the host through the invocation binding."""

from . import context, db, event_bus, events, ffmpeg, http_client, stream
from .auth import AuthRequest, UserBuilder, into_auth_result
from .binding import bind_host, current_host
from .ffmpeg import FfmpegTask
from .http import Request, Response, ResponseBuilder

__all__ = [
    "AuthRequest",
    "FfmpegTask",
    "Request",
    "Response",
    "ResponseBuilder",
    "UserBuilder",
    "bind_host",
    "context",
    "current_host",
    "db",
    "event_bus",
    "events",
    "ffmpeg",
    "http_client",
    "into_auth_result",
    "stream",
]
