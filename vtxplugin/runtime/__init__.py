"""Local development host; never imported by SDK modules."""

from .buffers import FileBuffer, MemoryBuffer, PipeBuffer
from .loader import apply_migrations, load_plugin
from .local_host import LocalHost, PublishedEvent

__all__ = [
    "FileBuffer",
    "LocalHost",
    "MemoryBuffer",
    "PipeBuffer",
    "PublishedEvent",
    "apply_migrations",
    "load_plugin",
]
