"""Publishing onto the host event bus."""

from __future__ import annotations

from typing import Any

from loguru import logger

from vtxplugin.core.errors import HostCallError, SerializationError, VtxError
from vtxplugin.core.serialization import to_json

from .binding import current_host


def publish_raw(topic: str, payload_json: str) -> None:
    """Publish an already-serialized JSON payload."""
    try:
        current_host().publish_event(topic, payload_json)
    except HostCallError as exc:
        # The host validates the payload first; that failure is a client error.
        if "invalid event payload" in exc.message.lower():
            raise SerializationError(exc.message) from exc
        raise VtxError.from_host_message(exc.message) from exc
    logger.debug("published event topic={} bytes={}", topic, len(payload_json))


def publish_json(topic: str, payload: Any) -> None:
    publish_raw(topic, to_json(payload))
