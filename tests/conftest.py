"""Pytest hooks and fixtures."""

from pathlib import Path

import pytest

from vtxplugin.config.access import clear_settings_cache
from vtxplugin.host.binding import bind_host
from vtxplugin.runtime.local_host import LocalHost

EXAMPLE_PLUGIN = Path(__file__).resolve().parents[1] / "examples" / "plugins" / "notes" / "plugin.py"


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch):
    """Keep tests away from the developer's ~/.vtxplugin/config.json."""
    monkeypatch.setenv("VTXPLUGIN_CONFIG", str(tmp_path / "config.json"))
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def local_host():
    host = LocalHost()
    yield host
    host.close()


@pytest.fixture
def bound_host(local_host):
    with bind_host(local_host):
        yield local_host


@pytest.fixture
def example_plugin_path() -> Path:
    return EXAMPLE_PLUGIN
