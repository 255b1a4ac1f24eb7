"""Event payload helpers."""

from __future__ import annotations

from typing import Any

from vtxplugin.core.serialization import from_json
from vtxplugin.core.types import EventContext, PluginEvent

__all__ = ["EventContext", "PluginEvent", "payload_json"]


def payload_json(event: PluginEvent, model: Any = None) -> Any:
    """Decode the event's JSON payload; failures raise SerializationError."""
    return from_json(event.payload, model=model)
