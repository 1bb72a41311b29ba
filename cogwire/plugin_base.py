"""Plugin base class and types for cogwire extensibility.

A plugin is a named, versioned bundle of top-level commands. Subclass
``Plugin``, supply metadata (either as constructor ``details`` or a
``DETAILS`` class attribute) and override ``load_commands`` to register
your commands.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

import structlog
from pydantic import BaseModel, Field, StrictStr, ValidationError

from .command import Command
from .exceptions import ConfigurationError

logger = structlog.get_logger("cogwire.plugins")

# Observer signature: (*event_args) -> None
Observer = Callable[..., None]


class PluginEvent(str, Enum):
    """Lifecycle events emitted by every plugin."""
    CLIENT_LOADED = "client_loaded"
    COMMAND_REGISTERED = "command_registered"
    COMMAND_REMOVED = "command_removed"


class PluginDetails(BaseModel):
    """Required plugin metadata. Every field is a non-empty string."""
    id: StrictStr = Field(min_length=1)
    name: StrictStr = Field(min_length=1)
    author: StrictStr = Field(min_length=1)
    version: StrictStr = Field(min_length=1)
    description: StrictStr = Field(min_length=1)


def _event_name(event: Union[str, PluginEvent]) -> str:
    return event.value if isinstance(event, PluginEvent) else event


def parse_details(details: Any) -> PluginDetails:
    """Validate plugin metadata.

    Raises:
        ConfigurationError: Naming the first missing or invalid field.
    """
    if isinstance(details, PluginDetails):
        return details
    if not isinstance(details, Mapping):
        raise ConfigurationError(
            "PluginDetails must be a mapping",
            setting_name="details",
            module="plugins",
        )
    try:
        return PluginDetails(**details)
    except ValidationError as e:
        error = e.errors()[0]
        field = str(error["loc"][0]) if error["loc"] else "details"
        if error["type"] == "string_type":
            message = f"{field} must be a string"
        else:
            message = f"{field} is required"
        raise ConfigurationError(message, setting_name=field, module="plugins") from e


class Plugin:
    """Base class for all cogwire plugins.

    Args:
        details: Plugin metadata (id, name, author, version,
            description). Falls back to the ``DETAILS`` class attribute.
        observers: Optional ``{event_name: [callback, ...]}`` subscribed
            before anything is emitted.

    Raises:
        ConfigurationError: If any metadata field is missing, empty or
            not a string.
    """

    DETAILS: Optional[Dict[str, str]] = None

    def __init__(
        self,
        details: Optional[Union[Mapping, PluginDetails]] = None,
        observers: Optional[Mapping[str, List[Observer]]] = None,
    ):
        if details is None:
            details = self.DETAILS if self.DETAILS is not None else {}
        meta = parse_details(details)
        self.id = meta.id
        self.name = meta.name
        self.author = meta.author
        self.version = meta.version
        self.description = meta.description

        self.client: Any = None
        self._commands: Dict[str, Command] = {}
        self._observers: Dict[str, List[Observer]] = {}
        for event, callbacks in (observers or {}).items():
            for callback in callbacks:
                self.subscribe(event, callback)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, version={self.version!r})"

    def load_commands(self) -> None:
        """Populate the command map via ``register_command``. Must be overridden."""
        raise NotImplementedError("load_commands must be overridden")

    def load_client(self, client: Any) -> None:
        self.client = client
        self.emit(PluginEvent.CLIENT_LOADED, client)

    def register_command(self, command: Command) -> None:
        """Register a top-level command, unless one with its id exists.

        The plugin's client (possibly None) is handed to the command.
        """
        if not isinstance(command, Command) or command.id in self._commands:
            return
        self._commands[command.id] = command
        command.register(self.client)
        logger.debug("command_registered", plugin=self.id, command=command.id)
        self.emit(PluginEvent.COMMAND_REGISTERED, command)

    def remove_command(self, command: Command) -> None:
        """Remove a command from the plugin, if present."""
        if not isinstance(command, Command) or command.id not in self._commands:
            return
        del self._commands[command.id]
        logger.debug("command_removed", plugin=self.id, command=command.id)
        self.emit(PluginEvent.COMMAND_REMOVED, command)

    @property
    def commands(self) -> Dict[str, Command]:
        return self._commands

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, event: Union[str, PluginEvent], callback: Observer) -> None:
        """Call ``callback(*args)`` whenever ``event`` is emitted."""
        self._observers.setdefault(_event_name(event), []).append(callback)

    def unsubscribe(self, event: Union[str, PluginEvent], callback: Observer) -> None:
        callbacks = self._observers.get(_event_name(event), [])
        if callback in callbacks:
            callbacks.remove(callback)

    def emit(self, event: Union[str, PluginEvent], *args: Any) -> int:
        """Notify every observer of ``event``. Returns how many were called."""
        callbacks = list(self._observers.get(_event_name(event), []))
        for callback in callbacks:
            callback(*args)
        return len(callbacks)
