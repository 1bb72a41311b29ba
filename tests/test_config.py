"""Tests for YAML/.env configuration loading."""

import os
from pathlib import Path

import yaml

from cogwire.config import Config


def _write_settings(config_dir: Path, settings: dict) -> None:
    (config_dir / "settings.yaml").write_text(yaml.dump(settings))


def test_missing_files_give_defaults(tmp_path):
    config = Config(config_dir=tmp_path)
    assert config.settings == {}
    assert config.client_options["prefix"] == "/"
    assert config.logging_level == "INFO"
    assert config.logging_backup_count == 5


def test_client_options_merged(tmp_path, monkeypatch):
    monkeypatch.delenv("COGWIRE_PREFIX", raising=False)
    _write_settings(tmp_path, {"client": {"prefix": "!", "enabled_plugins": ["music"]}})
    options = Config(config_dir=tmp_path).client_options
    assert options["prefix"] == "!"
    assert options["enabled_plugins"] == ["music"]
    assert options["self_bot"] is False


def test_env_prefix_takes_precedence(tmp_path, monkeypatch):
    _write_settings(tmp_path, {"client": {"prefix": "!"}})
    monkeypatch.setenv("COGWIRE_PREFIX", ">")
    assert Config(config_dir=tmp_path).client_options["prefix"] == ">"


def test_dotenv_loaded(tmp_path):
    (tmp_path / ".env").write_text("COGWIRE_TEST_VALUE=from-dotenv\n")
    try:
        Config(config_dir=tmp_path)
        assert os.environ["COGWIRE_TEST_VALUE"] == "from-dotenv"
    finally:
        os.environ.pop("COGWIRE_TEST_VALUE", None)


def test_paths_and_logging(tmp_path):
    _write_settings(tmp_path, {
        "plugins_dir": str(tmp_path / "plugins"),
        "log_dir": str(tmp_path / "logs"),
        "logging": {"level": "DEBUG", "subsystem_levels": {"dispatch": "WARNING"}},
    })
    config = Config(config_dir=tmp_path)
    assert config.plugins_dir == tmp_path / "plugins"
    assert config.log_dir == tmp_path / "logs"
    assert config.logging_level == "DEBUG"
    assert config.logging_subsystem_levels == {"dispatch": "WARNING"}


def test_validate_does_not_raise(tmp_path):
    _write_settings(tmp_path, {"client": {"prefix": "", "enabled_plugins": "all"}})
    Config(config_dir=tmp_path).validate()
    _write_settings(tmp_path, {"client": "oops"})
    Config(config_dir=tmp_path).validate()
