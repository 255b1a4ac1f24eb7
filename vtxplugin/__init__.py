"""
vtxplugin - plugin-side SDK for the vtx host boundary.

Plugins subclass `VtxPlugin` and export it with `export_plugin`; the helpers
under `vtxplugin.host` reach the host bound to the running call.
"""

from loguru import logger

from vtxplugin.core.errors import (
    AuthDenied,
    DatabaseError,
    ErrorKind,
    Internal,
    NotFound,
    PermissionDenied,
    SerializationError,
    VtxError,
)
from vtxplugin.core.types import HttpRequest, HttpResponse, Manifest, PluginEvent, UserContext
from vtxplugin.host import AuthRequest, FfmpegTask, ResponseBuilder, UserBuilder
from vtxplugin.plugin import PluginGuest, VtxPlugin, export_plugin

__version__ = "0.1.0"

# Library logging stays silent until the embedding application opts in.
logger.disable("vtxplugin")

__all__ = [
    "AuthDenied",
    "AuthRequest",
    "DatabaseError",
    "ErrorKind",
    "FfmpegTask",
    "HttpRequest",
    "HttpResponse",
    "Internal",
    "Manifest",
    "NotFound",
    "PermissionDenied",
    "PluginEvent",
    "PluginGuest",
    "ResponseBuilder",
    "SerializationError",
    "UserBuilder",
    "UserContext",
    "VtxError",
    "VtxPlugin",
    "__version__",
    "export_plugin",
]
