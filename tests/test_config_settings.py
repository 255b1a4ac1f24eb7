import json
from pathlib import Path

import pytest

from vtxplugin.config import access
from vtxplugin.config.loader import camel_to_snake, convert_keys, get_config_path, load_settings
from vtxplugin.config.schema import SdkSettings


def test_defaults(tmp_path: Path):
    settings = load_settings(tmp_path / "missing.json")
    assert settings.log_level == "INFO"
    assert settings.log_file is None
    assert settings.local_host.database_path == ":memory:"
    assert settings.local_host.read_only is False
    assert set(SdkSettings.model_fields) == {"log_level", "log_file", "local_host"}


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("VTXPLUGIN_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("VTXPLUGIN_LOCAL_HOST__READ_ONLY", "true")
    settings = SdkSettings()
    assert settings.log_level == "DEBUG"
    assert settings.local_host.read_only is True


def test_file_uses_camel_case_keys(tmp_path: Path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"logLevel": "WARNING", "localHost": {"eventLogLimit": 5}}), encoding="utf-8")
    settings = load_settings(path)
    assert settings.log_level == "WARNING"
    assert settings.local_host.event_log_limit == 5


@pytest.mark.parametrize("content", ["{broken", "[1, 2]"])
def test_invalid_file(tmp_path: Path, content):
    path = tmp_path / "config.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ValueError):
        load_settings(path)


def test_config_path_override(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("VTXPLUGIN_CONFIG", str(tmp_path / "other.json"))
    assert get_config_path() == tmp_path / "other.json"


def test_key_conversion():
    assert camel_to_snake("eventLogLimit") == "event_log_limit"
    assert convert_keys({"localHost": [{"filesDir": "x"}]}) == {"local_host": [{"files_dir": "x"}]}


def test_get_settings_uses_cache_and_force_reload(monkeypatch):
    calls = {"n": 0}

    def _fake_load_settings(_path=None):
        calls["n"] += 1
        return SdkSettings(log_level=f"LEVEL{calls['n']}")

    monkeypatch.setattr(access, "load_settings", _fake_load_settings)
    access.clear_settings_cache()

    first = access.get_settings()
    second = access.get_settings()
    third = access.get_settings(force_reload=True)

    assert first.log_level == second.log_level
    assert third.log_level != second.log_level
    assert calls["n"] == 2


def test_get_settings_reloads_when_environment_changes(monkeypatch):
    monkeypatch.setenv("VTXPLUGIN_LOG_LEVEL", "WARNING")
    first = access.get_settings()
    assert access.get_settings() is first
    monkeypatch.setenv("VTXPLUGIN_LOG_LEVEL", "ERROR")
    second = access.get_settings()
    assert second is not first
    assert (first.log_level, second.log_level) == ("WARNING", "ERROR")
