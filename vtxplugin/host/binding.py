"""Invocation-scoped access to the host boundary."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from vtxplugin.core.contracts import HostBoundary
from vtxplugin.core.errors import Internal

# Set by the dispatch adapter for the duration of one entry-point call.
current_host_var: ContextVar[HostBoundary | None] = ContextVar("vtxplugin_current_host", default=None)


def current_host() -> HostBoundary:
    """Return the host bound to the running invocation."""
    host = current_host_var.get()
    if host is None:
        raise Internal("no host bound to the current invocation")
    return host


@contextmanager
def bind_host(host: HostBoundary) -> Iterator[HostBoundary]:
    """Bind `host` until the block exits, restoring the previous binding."""
    token = current_host_var.set(host)
    try:
        yield host
    finally:
        current_host_var.reset(token)
