"""Plugin base class and the adapter that exposes it to the host.

Plugin authors subclass `VtxPlugin` and override what they need; every
capability except `get_manifest` has a default. `PluginGuest` wraps one
plugin instance and is what the host calls: it binds the host for the
call, runs the plugin, and lowers the outcome to the primitive shapes the
boundary expects.
"""

from __future__ import annotations

import inspect
from collections.abc import Sequence
from typing import Any

from loguru import logger

from vtxplugin.core.contracts import HostBoundary
from vtxplugin.core.errors import AuthDenied, Internal, VtxError, as_vtx_error
from vtxplugin.core.types import Err, HttpRequest, HttpResponse, Manifest, Ok, PluginEvent, Result, UserContext
from vtxplugin.host.auth import into_auth_result
from vtxplugin.host.binding import bind_host
from vtxplugin.host.http import ResponseBuilder


class VtxPlugin:
    """Base class for plugins; handlers may raise any `VtxError`."""

    def handle(self, request: HttpRequest) -> HttpResponse:
        return ResponseBuilder.not_found()

    def handle_event(self, event: PluginEvent) -> None:
        return None

    def get_migrations(self) -> list[str]:
        return []

    def get_manifest(self) -> Manifest:
        raise NotImplementedError("plugins must implement get_manifest()")

    def get_resources(self) -> list[str]:
        return []

    def authenticate(self, headers: Sequence[tuple[str, str]]) -> UserContext:
        # 401 means "not handled here" and lets other plugins in the chain try.
        raise AuthDenied(401)


def _unexpected(entry: str, exc: BaseException) -> VtxError:
    err = as_vtx_error(exc)
    logger.exception("plugin {} failed with unexpected {}: {}", entry, type(exc).__name__, err.message)
    return err


class PluginGuest:
    """Host-facing entry points for one plugin instance."""

    def __init__(self, plugin: VtxPlugin):
        self.plugin = plugin

    def handle(self, host: HostBoundary, request: HttpRequest) -> HttpResponse:
        with bind_host(host):
            try:
                response = self.plugin.handle(request)
                if not isinstance(response, HttpResponse):
                    raise Internal(f"handle returned {type(response).__name__}, expected HttpResponse")
                return response
            except VtxError as err:
                logger.debug("handle {} {} -> {}", request.method, request.path, err)
                return ResponseBuilder.error(err)
            except Exception as exc:
                return ResponseBuilder.error(_unexpected("handle", exc))

    def handle_event(self, host: HostBoundary, event: PluginEvent) -> Result[None, str]:
        with bind_host(host):
            try:
                self.plugin.handle_event(event)
                return Ok(None)
            except VtxError as err:
                logger.debug("handle_event topic={} -> {}", event.topic, err)
                return Err(str(err))
            except Exception as exc:
                return Err(str(_unexpected("handle_event", exc)))

    def authenticate(self, host: HostBoundary, headers: Sequence[tuple[str, str]]) -> Result[UserContext, int]:
        with bind_host(host):
            return into_auth_result(lambda: self.plugin.authenticate(list(headers)))

    def get_manifest(self, host: HostBoundary | None = None) -> Manifest:
        """The only entry point allowed to raise: a plugin without a manifest is unusable."""
        return self._call_static("get_manifest", host)

    def get_migrations(self, host: HostBoundary | None = None) -> list[str]:
        return self._string_list("get_migrations", host)

    def get_resources(self, host: HostBoundary | None = None) -> list[str]:
        return self._string_list("get_resources", host)

    def _call_static(self, name: str, host: HostBoundary | None) -> Any:
        fn = getattr(self.plugin, name)
        try:
            if host is None:
                return fn()
            with bind_host(host):
                return fn()
        except VtxError:
            raise
        except Exception as exc:
            raise _unexpected(name, exc) from exc

    def _string_list(self, name: str, host: HostBoundary | None) -> list[str]:
        try:
            items = self._call_static(name, host)
        except VtxError as err:
            logger.warning("plugin {} failed, reporting none: {}", name, err)
            return []
        return [str(item) for item in (items or [])]


def export_plugin(plugin: type[VtxPlugin] | VtxPlugin) -> PluginGuest:
    """Wrap a plugin class or instance as the guest the host will call."""
    if inspect.isclass(plugin):
        plugin = plugin()
    if not isinstance(plugin, VtxPlugin):
        raise TypeError(f"expected a VtxPlugin, got {type(plugin).__name__}")
    return PluginGuest(plugin)
