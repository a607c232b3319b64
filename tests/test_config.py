"""Tests for application configuration."""

import json
import os
from datetime import datetime

import pytest

from ccrm.config import AppConfig, DEFAULT_MAX_CREDITS
from ccrm.core.exceptions import ConfigurationError


def test_defaults():
    config = AppConfig()
    assert config.data_folder == "data"
    assert config.export_folder == "exports"
    assert config.backup_folder == "backups"
    assert config.max_credits_per_semester == DEFAULT_MAX_CREDITS == 24
    assert config.log_level == "INFO"


def test_from_dict_ignores_unknown_keys():
    config = AppConfig.from_dict({"max_credits_per_semester": 18, "colour": "blue"})
    assert config.max_credits_per_semester == 18
    assert "colour" not in config.to_dict()


def test_from_dict_none_gives_defaults():
    assert AppConfig.from_dict(None) == AppConfig()


@pytest.mark.parametrize("overrides", [
    {"max_credits_per_semester": 0},
    {"max_credits_per_semester": -5},
    {"max_credits_per_semester": "24"},
    {"max_credits_per_semester": True},
    {"data_folder": ""},
    {"backup_folder": "   "},
])
def test_rejects_unusable_settings(overrides):
    with pytest.raises(ConfigurationError):
        AppConfig.from_dict(overrides)


def test_from_file(tmp_path):
    path = tmp_path / "ccrm.json"
    path.write_text(json.dumps({"export_folder": "out", "log_level": "DEBUG"}))
    config = AppConfig.from_file(str(path))
    assert config.export_folder == "out"
    assert config.log_level == "DEBUG"


@pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]"])
def test_from_file_rejects_bad_content(tmp_path, content):
    path = tmp_path / "ccrm.json"
    path.write_text(content)
    with pytest.raises(ConfigurationError):
        AppConfig.from_file(str(path))


def test_from_file_missing(tmp_path):
    with pytest.raises(ConfigurationError):
        AppConfig.from_file(str(tmp_path / "absent.json"))


def test_ensure_directories(config):
    config.ensure_directories()
    for folder in (config.data_folder, config.export_folder, config.backup_folder):
        assert os.path.isdir(folder)


def test_backup_folder_name(config):
    name = config.backup_folder_name(datetime(2024, 3, 9, 14, 5, 7))
    assert name == os.path.join(config.backup_folder, "backup_2024-03-09_14-05-07")
