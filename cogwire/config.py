"""Configuration management for cogwire.

Loads YAML settings (settings.yaml) and environment variables (.env)
into a Config object. Property getters provide safe access with
sensible defaults for the client options, plugin directory, and
logging.

Key classes:
    Config: Central configuration manager.

Key functions:
    get_config: Singleton accessor for the global Config instance.
"""

import os
from pathlib import Path
from typing import Optional

import structlog
import yaml
from dotenv import load_dotenv

from .constants import client_options

logger = structlog.get_logger("cogwire.config")


class Config:
    """Central configuration manager for cogwire.

    Args:
        config_dir: Path to the config directory. Defaults to
            ``<repo_root>/config/``.
    """

    def __init__(self, config_dir: Optional[Path] = None):
        if config_dir is None:
            config_dir = Path(__file__).parent.parent / "config"
        self.config_dir = config_dir

        env_file = config_dir / ".env"
        if env_file.exists():
            load_dotenv(env_file)

        self.settings = self._load_yaml("settings.yaml")

    def _load_yaml(self, filename: str) -> dict:
        """Load a YAML configuration file."""
        filepath = self.config_dir / filename
        if filepath.exists():
            with open(filepath, "r") as f:
                return yaml.safe_load(f) or {}
        return {}

    def validate(self):
        """Validate client settings at startup.

        Logs errors but does not raise -- the host decides whether to
        start with defaults.
        """
        raw = self.settings.get("client", {})
        if not isinstance(raw, dict):
            logger.error("client_settings_invalid_type", type=type(raw).__name__)
            return
        prefix = raw.get("prefix")
        if prefix is not None and (not isinstance(prefix, str) or not prefix):
            logger.error("config_invalid_value", key="client.prefix", value=prefix)
        enabled = raw.get("enabled_plugins")
        if enabled is not None and not isinstance(enabled, list):
            logger.error(
                "config_invalid_value",
                key="client.enabled_plugins",
                value=enabled,
                valid="list of plugin names",
            )

    @property
    def client_options(self) -> dict:
        """Client options merged over defaults. Env var COGWIRE_PREFIX takes precedence."""
        raw = self.settings.get("client", {})
        options = client_options(dict(raw) if isinstance(raw, dict) else {})
        env_prefix = os.environ.get("COGWIRE_PREFIX")
        if env_prefix:
            options["prefix"] = env_prefix
        return options

    @property
    def plugins_dir(self) -> Path:
        """Get plugins directory (default <repo_root>/plugins)."""
        configured = self.settings.get("plugins_dir")
        if configured:
            return Path(configured).expanduser()
        return Path(__file__).parent.parent / "plugins"

    @property
    def log_dir(self) -> Path:
        """Get log directory path."""
        configured = self.settings.get("log_dir")
        if configured:
            return Path(configured).expanduser()
        return Path(__file__).parent.parent / "logs"

    @property
    def logging_level(self) -> str:
        """Global log level (default INFO). Controls console and combined file."""
        log_config = self.settings.get("logging", {})
        return log_config.get("level", "INFO")

    @property
    def logging_subsystem_levels(self) -> dict:
        """Per-subsystem log level overrides. E.g. {"dispatch": "DEBUG"}."""
        log_config = self.settings.get("logging", {})
        return log_config.get("subsystem_levels", {})

    @property
    def logging_max_file_size_mb(self) -> int:
        """Max size per log file in MB before rotation (default 10)."""
        log_config = self.settings.get("logging", {})
        return log_config.get("max_file_size_mb", 10)

    @property
    def logging_backup_count(self) -> int:
        """Number of rotated log files to keep (default 5)."""
        log_config = self.settings.get("logging", {})
        return log_config.get("backup_count", 5)


_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config
