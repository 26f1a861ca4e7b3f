"""Test loading and validation of viewer settings."""

import json

import pytest

from lineview.settings import SettingsStore, ViewerSettings, validate_setting


def write_settings(tmp_path, data):
    (tmp_path / "settings.json").write_text(json.dumps(data), encoding="utf-8")
    return SettingsStore(config_dir=tmp_path)


def test_defaults_without_file(tmp_path):
    assert SettingsStore(config_dir=tmp_path).load() == ViewerSettings()


def test_valid_settings_are_loaded(tmp_path):
    store = write_settings(tmp_path, {
        "tab_stop": 4,
        "message_timeout": 2.5,
        "read_timeout": 2,
        "log_file": "/tmp/lineview.log",
        "log_level": "debug",
    })
    settings = store.load()
    assert settings.tab_stop == 4
    assert settings.message_timeout == 2.5
    assert settings.read_timeout == 2
    assert settings.log_file == "/tmp/lineview.log"
    assert settings.log_level == "DEBUG"


def test_invalid_values_fall_back_to_defaults(tmp_path):
    store = write_settings(tmp_path, {"tab_stop": 0, "read_timeout": 300, "log_level": "LOUD"})
    assert store.load() == ViewerSettings()


def test_unknown_keys_are_ignored(tmp_path):
    store = write_settings(tmp_path, {"colour": "blue", "tab_stop": 2})
    assert store.load().tab_stop == 2


def test_corrupt_file_falls_back_to_defaults(tmp_path):
    (tmp_path / "settings.json").write_text("{not json", encoding="utf-8")
    assert SettingsStore(config_dir=tmp_path).load() == ViewerSettings()


def test_non_dict_file_falls_back_to_defaults(tmp_path):
    store = write_settings(tmp_path, [1, 2, 3])
    assert store.load() == ViewerSettings()


def test_load_is_cached(tmp_path):
    store = write_settings(tmp_path, {"tab_stop": 3})
    assert store.load().tab_stop == 3
    (tmp_path / "settings.json").write_text(json.dumps({"tab_stop": 5}), encoding="utf-8")
    assert store.load().tab_stop == 3
    store.clear_cache()
    assert store.load().tab_stop == 5


@pytest.mark.parametrize("key, value, ok", [
    ("tab_stop", 8, True),
    ("tab_stop", True, False),
    ("tab_stop", 33, False),
    ("message_timeout", 0, False),
    ("message_timeout", 10, True),
    ("read_timeout", 0, True),
    ("read_timeout", 1.5, False),
    ("log_file", None, True),
    ("log_file", 3, False),
    ("log_level", "info", True),
])
def test_validate_setting(key, value, ok):
    assert validate_setting(key, value) is ok
