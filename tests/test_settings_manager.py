import json
import os

import pytest

import config
import settings_manager


@pytest.fixture(autouse=True)
def app_data(monkeypatch, tmp_path):
    folder = tmp_path / "appdata"
    folder.mkdir()
    monkeypatch.setattr(config, "get_app_data_folder", lambda: str(folder))
    return folder


def test_first_launch_returns_defaults():
    settings, first_launch = settings_manager.load_settings()
    assert first_launch is True
    assert settings == settings_manager.get_default_settings()
    assert settings["write_mode"] == "whole_file"


def test_save_then_load(app_data, tmp_path):
    wanted = {"backup_base_dir": str(tmp_path / "bk"), "save_root": str(tmp_path), "write_mode": "replace_block"}
    assert settings_manager.save_settings(wanted)
    assert (app_data / "settings.json").is_file()

    settings, first_launch = settings_manager.load_settings()
    assert first_launch is False
    assert settings == wanted


def test_invalid_values_fall_back_to_defaults(app_data):
    (app_data / "settings.json").write_text(json.dumps({
        "write_mode": "append",
        "backup_base_dir": "",
        "save_root": 42,
    }))
    settings, first_launch = settings_manager.load_settings()
    defaults = settings_manager.get_default_settings()

    assert first_launch is False
    assert settings["write_mode"] == defaults["write_mode"]
    assert settings["backup_base_dir"] == defaults["backup_base_dir"]
    assert settings["save_root"] is None


def test_missing_keys_are_filled(app_data):
    (app_data / "settings.json").write_text(json.dumps({"write_mode": "replace_block"}))
    settings, _ = settings_manager.load_settings()
    assert settings["write_mode"] == "replace_block"
    assert settings["backup_base_dir"] == config.BACKUP_FOLDER


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_corrupted_file_is_treated_as_first_launch(app_data, content):
    (app_data / "settings.json").write_text(content)
    settings, first_launch = settings_manager.load_settings()
    assert first_launch is True
    assert settings == settings_manager.get_default_settings()


def test_default_backup_dir_follows_working_directory(monkeypatch, tmp_path):
    first = tmp_path / "first"
    second = tmp_path / "second"
    first.mkdir()
    second.mkdir()

    monkeypatch.chdir(first)
    settings, first_launch = settings_manager.load_settings()
    assert first_launch is True
    assert settings_manager.save_settings(settings)

    monkeypatch.chdir(second)
    settings, first_launch = settings_manager.load_settings()
    assert first_launch is False
    assert settings["backup_base_dir"] == "save_backups"
    assert os.path.abspath(settings["backup_base_dir"]) == str(second / "save_backups")
