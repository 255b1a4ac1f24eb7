"""Shared boundary types, contracts and the error taxonomy."""

from .contracts import Buffer, HostBoundary
from .errors import (
    AuthDenied,
    DatabaseError,
    ErrorKind,
    HostCallError,
    Internal,
    NotFound,
    PermissionDenied,
    SerializationError,
    VtxError,
)
from .types import (
    CurrentUser,
    DbValue,
    Err,
    EventContext,
    FfmpegOption,
    HttpClientRequest,
    HttpClientResponse,
    HttpRequest,
    HttpResponse,
    IntegerValue,
    Manifest,
    NullValue,
    Ok,
    PluginEvent,
    RealValue,
    Result,
    TextValue,
    TranscodeProfile,
    UserContext,
)

__all__ = [
    "AuthDenied",
    "Buffer",
    "CurrentUser",
    "DatabaseError",
    "DbValue",
    "Err",
    "ErrorKind",
    "EventContext",
    "FfmpegOption",
    "HostBoundary",
    "HostCallError",
    "HttpClientRequest",
    "HttpClientResponse",
    "HttpRequest",
    "HttpResponse",
    "IntegerValue",
    "Internal",
    "Manifest",
    "NotFound",
    "NullValue",
    "Ok",
    "PermissionDenied",
    "PluginEvent",
    "RealValue",
    "Result",
    "SerializationError",
    "TextValue",
    "TranscodeProfile",
    "UserContext",
    "VtxError",
]
