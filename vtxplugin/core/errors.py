"""
Closed error taxonomy shared by every SDK component.

Provides:
- One exception class per error kind, each with a fixed transport status
- Reclassification of plain host error strings into the taxonomy
- Safe message formatting for errors that end up in response bodies
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any


class ErrorKind(Enum):
    """Kinds a boundary failure can be classified into."""
    DATABASE_ERROR = "DatabaseError"
    SERIALIZATION_ERROR = "SerializationError"
    AUTH_DENIED = "AuthDenied"
    PERMISSION_DENIED = "PermissionDenied"
    NOT_FOUND = "NotFound"
    INTERNAL = "Internal"


class HostCallError(Exception):
    """Raised by a host boundary implementation; carries the host's plain message."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class VtxError(Exception):
    """Base exception for all plugin runtime errors."""

    kind: ErrorKind = ErrorKind.INTERNAL
    status_code: int = 500
    label: str = "Internal error"

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    @property
    def type_name(self) -> str:
        return self.kind.value

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type_name,
            "status": self.status_code,
            "message": self.message,
        }

    def __str__(self) -> str:
        return f"{self.label}: {self.message}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VtxError):
            return NotImplemented
        return (self.kind, self.status_code, self.message) == (other.kind, other.status_code, other.message)

    def __hash__(self) -> int:
        return hash((self.kind, self.status_code, self.message))

    @classmethod
    def from_host_message(cls, message: str) -> VtxError:
        """Classify a plain error string returned by a host call."""
        lowered = message.lower()
        if "permission denied" in lowered:
            return PermissionDenied(message)
        if "not found" in lowered:
            return NotFound(message)
        return Internal(message)


class DatabaseError(VtxError):
    """SQL execution failed on the host (constraint, syntax, ...)."""

    kind = ErrorKind.DATABASE_ERROR
    status_code = 500
    label = "Database error"


class SerializationError(VtxError):
    """Data could not be encoded or decoded (JSON, UTF-8, schema mismatch)."""

    kind = ErrorKind.SERIALIZATION_ERROR
    status_code = 400
    label = "Data serialization error"


class PermissionDenied(VtxError):
    """The host refused the operation for this plugin."""

    kind = ErrorKind.PERMISSION_DENIED
    status_code = 403
    label = "Permission denied"


class NotFound(VtxError):
    """A file, row or other resource does not exist."""

    kind = ErrorKind.NOT_FOUND
    status_code = 404
    label = "Resource not found"


class Internal(VtxError):
    """Plugin logic error; the catch-all kind."""

    kind = ErrorKind.INTERNAL
    status_code = 500
    label = "Internal error"


class AuthDenied(VtxError):
    """Authentication failed; carries the status code to report instead of a detail."""

    kind = ErrorKind.AUTH_DENIED
    label = "Authentication denied"

    def __init__(self, code: int = 401):
        self.code = int(code)
        super().__init__(f"Authentication denied (Code: {self.code})")
        # copy and pickle rebuild the error from args.
        self.args = (self.code,)

    @property
    def status_code(self) -> int:  # type: ignore[override]
        return self.code

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"AuthDenied({self.code})"


def db_error_from_host(message: str) -> VtxError:
    """Classify a database host error string."""
    if "permission denied" in message.lower():
        return PermissionDenied(message)
    return DatabaseError(message)


_SENSITIVE_PATTERNS = [
    re.compile(r"(api[_-]?key|token|secret|password|auth)[=:]\s*['\"]?([^\s'\"]+)['\"]?", re.IGNORECASE),
    re.compile(r"bearer\s+[a-zA-Z0-9\-._~+/]+=*", re.IGNORECASE),
    re.compile(r"basic\s+[a-zA-Z0-9+/]+=*", re.IGNORECASE),
]


def sanitize_error_message(message: str, replacement: str = "[REDACTED]") -> str:
    """Remove credentials from messages that may be echoed to clients."""
    sanitized = message
    for pattern in _SENSITIVE_PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)
    return sanitized


def as_vtx_error(exc: BaseException) -> VtxError:
    """Return `exc` if it is already classified, otherwise wrap it as Internal."""
    if isinstance(exc, VtxError):
        return exc
    if isinstance(exc, HostCallError):
        return VtxError.from_host_message(exc.message)
    text = sanitize_error_message(str(exc)) or type(exc).__name__
    return Internal(text)
