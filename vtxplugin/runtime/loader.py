"""Load a plugin from an entry reference and prepare it against a local host."""

from __future__ import annotations

import importlib
import importlib.util
import inspect
import sys
from pathlib import Path
from typing import Any

from loguru import logger

from vtxplugin.core.errors import HostCallError
from vtxplugin.plugin import PluginGuest, VtxPlugin, export_plugin

from .local_host import LocalHost

DEFAULT_OBJECT_NAME = "plugin"


def _load_module(module_ref: str, base_dir: Path) -> Any:
    if module_ref.endswith(".py"):
        module_path = (base_dir / module_ref).resolve()
        if not module_path.exists():
            raise FileNotFoundError(f"entry file not found: {module_path}")
        module_name = f"vtxplugin_entry_{module_path.stem}_{abs(hash(str(module_path)))}"
        spec = importlib.util.spec_from_file_location(module_name, module_path)
        if spec is None or spec.loader is None:
            raise ImportError(f"failed to load spec for {module_path}")
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module
    sys.path.insert(0, str(base_dir))
    try:
        return importlib.import_module(module_ref)
    finally:
        try:
            sys.path.remove(str(base_dir))
        except ValueError:
            pass


def load_plugin(entry: str, base_dir: Path | str | None = None) -> PluginGuest:
    """Resolve `"path/to/plugin.py:obj"` or `"package.module:obj"` into a guest.

    The object defaults to `plugin`; it may be a `VtxPlugin` subclass, an
    instance, or an already exported `PluginGuest`.
    """
    module_ref, _, obj_name = entry.partition(":")
    object_name = obj_name.strip() or DEFAULT_OBJECT_NAME
    module_ref = module_ref.strip()
    if not module_ref:
        raise ValueError("entry module is required")
    module = _load_module(module_ref, Path(base_dir or Path.cwd()).expanduser())
    if not hasattr(module, object_name):
        raise AttributeError(f"entry object not found: {object_name}")
    target = getattr(module, object_name)
    if isinstance(target, PluginGuest):
        return target
    if inspect.isclass(target) and not issubclass(target, VtxPlugin):
        raise TypeError(f"entry class must subclass VtxPlugin: {target.__name__}")
    return export_plugin(target)


def apply_migrations(host: LocalHost, guest: PluginGuest) -> int:
    """Run the plugin's migration scripts in order; returns how many ran."""
    scripts = guest.get_migrations(host)
    for index, script in enumerate(scripts):
        try:
            host.run_script(script)
        except HostCallError:
            logger.error("migration {} of {} failed", index + 1, len(scripts))
            raise
    return len(scripts)
