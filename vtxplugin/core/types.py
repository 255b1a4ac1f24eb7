"""Records exchanged across the plugin/host boundary."""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, TypeVar, Union

if TYPE_CHECKING:
    from .contracts import Buffer

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class NullValue:
    """SQL NULL."""


@dataclass(frozen=True, slots=True)
class IntegerValue:
    value: int


@dataclass(frozen=True, slots=True)
class RealValue:
    value: float


@dataclass(frozen=True, slots=True)
class TextValue:
    value: str


DbValue = Union[NullValue, IntegerValue, RealValue, TextValue]
DB_VALUE_TYPES = (NullValue, IntegerValue, RealValue, TextValue)


def db_value_to_python(value: DbValue) -> Any:
    """Unwrap a tagged value into the matching Python scalar."""
    if isinstance(value, NullValue):
        return None
    return value.value


@dataclass(slots=True)
class UserContext:
    """Identity returned from a successful authenticate call."""

    user_id: str
    username: str
    groups: list[str] = field(default_factory=list)
    metadata: str = "{}"

    def metadata_dict(self) -> dict[str, Any]:
        try:
            parsed = json.loads(self.metadata)
        except json.JSONDecodeError:
            return {}
        return parsed if isinstance(parsed, dict) else {}


@dataclass(slots=True)
class CurrentUser:
    """User the host already authenticated for the running request."""

    user_id: str
    username: str
    groups: list[str] = field(default_factory=list)

    def is_in_group(self, group: str) -> bool:
        return any(g == group for g in self.groups)


@dataclass(slots=True)
class Manifest:
    """Static plugin metadata; the SDK hands it to the host untouched."""

    id: str
    name: str
    version: str = "0.1.0"
    description: str = ""
    entrypoint: str = ""
    capabilities: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "version": self.version,
            "description": self.description,
            "entrypoint": self.entrypoint,
            "capabilities": list(self.capabilities),
        }


def find_header(headers: Iterable[tuple[str, str]], name: str) -> str | None:
    """Case-insensitive header lookup; the first match wins."""
    wanted = name.lower()
    for key, value in headers:
        if key.lower() == wanted:
            return value
    return None


@dataclass(slots=True)
class HttpRequest:
    """Inbound request routed to the plugin by the host."""

    method: str
    path: str
    query: str = ""
    headers: list[tuple[str, str]] = field(default_factory=list)
    body: Buffer | None = None
    params: dict[str, str] = field(default_factory=dict)

    def header(self, name: str) -> str | None:
        return find_header(self.headers, name)


@dataclass(slots=True)
class HttpResponse:
    """Status plus optional body handle."""

    status: int
    body: Buffer | None = None


@dataclass(slots=True)
class EventContext:
    user_id: str | None = None
    request_id: str | None = None


@dataclass(slots=True)
class PluginEvent:
    """Event delivered from the host event bus."""

    id: str
    topic: str
    source: str
    payload: str
    context: EventContext = field(default_factory=EventContext)
    occurred_at: int = 0


@dataclass(slots=True)
class FfmpegOption:
    """One ffmpeg option, encoded by the host as `-key=value` or `-key`."""

    key: str
    value: str | None = None


@dataclass(slots=True)
class TranscodeProfile:
    profile: str
    input_id: str
    options: list[FfmpegOption] = field(default_factory=list)


@dataclass(slots=True)
class HttpClientRequest:
    """Outbound HTTP request performed by the host on the plugin's behalf."""

    method: str
    url: str
    headers: list[tuple[str, str]] = field(default_factory=list)
    body: bytes | None = None
    timeout_ms: int | None = None


@dataclass(slots=True)
class HttpClientResponse:
    status: int
    headers: list[tuple[str, str]] = field(default_factory=list)
    body: Buffer | None = None


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful boundary result."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failed boundary result carrying a primitive error."""

    error: E

    @property
    def is_ok(self) -> bool:
        return False


Result = Union[Ok[T], Err[E]]
