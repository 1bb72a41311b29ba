"""Command and plugin registration layer for chat bots.

Provides the Command entity, the Plugin base class, the plugin loader,
and the dispatcher that routes incoming messages to commands.
"""

from .command import Command
from .constants import DEFAULTS, merge_defaults
from .dispatcher import CommandDispatcher, HelpCommand, ResolvedCommand
from .exceptions import (
    CogwireError,
    ConfigurationError,
    InvalidArgumentError,
    MissingParentError,
    PluginLoadError,
)
from .plugin_base import Plugin, PluginDetails, PluginEvent
from .plugin_loader import PluginLoader

__all__ = [
    "Command",
    "CommandDispatcher",
    "CogwireError",
    "ConfigurationError",
    "DEFAULTS",
    "HelpCommand",
    "InvalidArgumentError",
    "MissingParentError",
    "Plugin",
    "PluginDetails",
    "PluginEvent",
    "PluginLoadError",
    "PluginLoader",
    "ResolvedCommand",
    "merge_defaults",
]
