"""Plugin discovery, loading, and lifecycle management."""

import importlib.util
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog

from .command import Command
from .constants import client_options as merge_client_options
from .exceptions import PluginLoadError
from .plugin_base import Plugin

logger = structlog.get_logger("cogwire.plugins")


class PluginLoader:
    """Discovers, loads, and tracks cogwire plugins.

    Args:
        plugins_dir: Directory holding ``<name>/plugin.py`` plugins.
            May be None when plugins are only added programmatically.
        client_options: Client options; ``enabled_plugins`` acts as an
            allowlist when non-empty.
        client: The connected client, if already available.
    """

    def __init__(
        self,
        plugins_dir: Optional[Path] = None,
        client_options: Optional[dict] = None,
        client: Any = None,
    ):
        self.plugins_dir = plugins_dir
        self.options = merge_client_options(client_options)
        self.client = client
        self.plugins: List[Plugin] = []

    def discover_and_load(self) -> None:
        """Scan plugins_dir for plugin.py files and load them."""
        if self.plugins_dir is None or not self.plugins_dir.is_dir():
            logger.info("plugin_loader_no_dir", path=str(self.plugins_dir))
            return

        allowlist = self.options.get("enabled_plugins")
        if not isinstance(allowlist, list):
            logger.error("enabled_plugins_invalid_type", type=type(allowlist).__name__)
            allowlist = None
        elif not allowlist:
            allowlist = None

        for plugin_dir in sorted(self.plugins_dir.iterdir()):
            if not plugin_dir.is_dir():
                continue
            plugin_file = plugin_dir / "plugin.py"
            if not plugin_file.is_file():
                continue

            plugin_name = plugin_dir.name

            if allowlist is not None and plugin_name not in allowlist:
                logger.warning(
                    "plugin_blocked_not_enabled",
                    plugin=plugin_name,
                    enabled_plugins=allowlist,
                )
                continue

            try:
                self._load_plugin(plugin_name, plugin_file)
            except Exception as e:
                logger.error(
                    "plugin_load_failed",
                    plugin=plugin_name,
                    error=str(e),
                    error_type=type(e).__name__,
                )

        logger.info(
            "plugin_loader_complete",
            plugins_loaded=len(self.plugins),
            commands=len(self.get_all_commands()),
        )

    def _load_plugin(self, plugin_name: str, plugin_file: Path) -> None:
        """Import a single plugin.py and register its Plugin subclass."""
        module_name = f"{plugin_name}.plugin"
        spec = importlib.util.spec_from_file_location(module_name, plugin_file)
        if spec is None or spec.loader is None:
            raise PluginLoadError("Cannot build import spec", plugin=plugin_name)
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            sys.modules.pop(module_name, None)
            raise PluginLoadError(
                f"Failed to import plugin module: {e}", plugin=plugin_name
            ) from e

        # Only classes defined in the plugin module itself count
        plugin_cls = None
        for attr in module.__dict__.values():
            if (
                isinstance(attr, type)
                and issubclass(attr, Plugin)
                and attr is not Plugin
                and attr.__module__ == module_name
            ):
                plugin_cls = attr
                break

        if plugin_cls is None:
            logger.warning("plugin_no_class_found", plugin=plugin_name)
            return

        self.add_plugin(plugin_cls())

    def add_plugin(self, plugin: Plugin) -> bool:
        """Attach the client to ``plugin``, load its commands, and track it.

        Returns:
            False if a plugin with the same id is already loaded.
        """
        if any(loaded.id == plugin.id for loaded in self.plugins):
            logger.warning("plugin_id_conflict", plugin=plugin.id)
            return False

        plugin.load_client(self.client)
        plugin.load_commands()

        known = self.get_all_commands()
        for cmd_id in plugin.commands:
            if cmd_id in known:
                logger.warning(
                    "plugin_command_conflict",
                    command=cmd_id,
                    plugin=plugin.id,
                )
        self.plugins.append(plugin)

        logger.info(
            "plugin_loaded",
            plugin=plugin.id,
            version=plugin.version,
            commands=list(plugin.commands.keys()),
        )
        return True

    def set_client(self, client: Any) -> None:
        """Hand a (re)connected client to every plugin and its commands."""
        self.client = client
        for plugin in self.plugins:
            plugin.load_client(client)
            for command in plugin.commands.values():
                command.register(client)

    def get_plugin(self, plugin_id: str) -> Optional[Plugin]:
        for plugin in self.plugins:
            if plugin.id == plugin_id:
                return plugin
        return None

    def get_all_commands(self) -> Dict[str, Command]:
        """Return merged top-level commands from all plugins (first wins)."""
        merged: Dict[str, Command] = {}
        for plugin in self.plugins:
            for cmd_id, command in plugin.commands.items():
                merged.setdefault(cmd_id, command)
        return merged
