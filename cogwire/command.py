"""The Command entity: a matchable, nestable unit of bot behavior.

Commands carry their options (channel restrictions, description,
permissions), a comparator deciding which text invokes them, an alias
list, and a tree of sub-commands. Behavior is attached either by passing
a ``handler`` coroutine or by overriding ``message`` / ``dm_or_group``.

Key classes:
    Command: The command entity.
"""

from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Union

import structlog

from .comparator import Comparator, RawComparator, TextComparator, build_comparator
from .constants import DEFAULT_PERMISSION, command_options
from .exceptions import ConfigurationError, InvalidArgumentError, MissingParentError

logger = structlog.get_logger("cogwire.commands")

# Handler signature: async (message, author, channel, guild, client) -> Any
CommandHandler = Callable[[Any, Any, Any, Any, Any], Awaitable[Any]]


class Command:
    """A named command with aliases and an optional sub-command tree.

    Args:
        id: The ID of the command. Must be a non-empty string.
        options: Command options, merged over the command defaults.
            The mapping is consumed (mutated in place).
        parent: The parent command when this is a sub-command.
        handler: Optional coroutine invoked for both guild and
            direct/group messages.

    Raises:
        ConfigurationError: If ``id`` is not a non-empty string.
    """

    def __init__(
        self,
        id: str,
        options: Optional[dict] = None,
        parent: Optional["Command"] = None,
        handler: Optional[CommandHandler] = None,
    ):
        if not isinstance(id, str) or not id:
            raise ConfigurationError(
                "Command id must be a non-empty string",
                setting_name="id",
                module="command",
            )
        self._id = id
        self._parent = parent if isinstance(parent, Command) else None
        self._handler = handler
        self.client: Any = None

        self.options = command_options(options)
        self.case_sensitive: bool = bool(self.options["case_sensitive"])
        self.dm_only: bool = bool(self.options["dm_only"])
        # dm_only wins over guild_only
        self.guild_only: bool = False if self.dm_only else bool(self.options["guild_only"])
        self.description: str = self.options["description"]
        self.usage: str = self._derive_usage()
        self.names: List[str] = []

        comparator = self.options.get("comparator") or self._id
        if isinstance(comparator, (list, tuple)):
            comparator = list(comparator)
        self._comparator: RawComparator = comparator
        self._matcher: Comparator = build_comparator(comparator, self.case_sensitive)
        self._permissions = self.options.get("permissions")
        self._roles = self.options.get("roles")

        self.sub_commands: Dict[str, "Command"] = {}
        self.sub_command_aliases: Dict[str, "Command"] = {}

    def __repr__(self) -> str:
        return f"Command({self._id!r}, usage={self.usage!r})"

    def _derive_usage(self) -> str:
        if self._parent is None:
            return self._id
        return f"{self._parent.usage} {self._id}"

    def _refresh_usage(self) -> None:
        """Re-derive usage for this command and everything below it."""
        self.usage = self._derive_usage()
        for sub in self.sub_commands.values():
            sub._refresh_usage()

    # ------------------------------------------------------------------
    # Sub-commands and aliases
    # ------------------------------------------------------------------

    def register_sub_command(
        self,
        command_or_id: Union["Command", str],
        handler: Optional[CommandHandler] = None,
        options: Optional[dict] = None,
    ) -> "Command":
        """Register a sub-command under this command.

        An existing Command is attached as-is (its parent and usage are
        updated to point here); a string id builds a new child command.

        Args:
            command_or_id: The sub-command to attach, or the id to create.
            handler: Handler for a newly created sub-command.
            options: Options for a newly created sub-command.

        Returns:
            The registered sub-command.

        Raises:
            InvalidArgumentError: If ``command_or_id`` is neither a
                Command nor a string.
        """
        if isinstance(command_or_id, Command):
            sub = command_or_id
            sub._parent = self
            sub._refresh_usage()
            if handler is not None:
                sub._handler = handler
        elif isinstance(command_or_id, str):
            sub = Command(command_or_id, options, parent=self, handler=handler)
        else:
            raise InvalidArgumentError(
                "Sub-command must be a Command or a string id",
                argument="command_or_id",
                received=type(command_or_id).__name__,
            )
        self.sub_commands[sub.id] = sub
        logger.debug("sub_command_registered", parent=self._id, command=sub.id)
        return sub

    def set_sub_alias(self, sub_command: "Command", alias: str) -> None:
        """Map ``alias`` to ``sub_command``. Later calls overwrite."""
        self.sub_command_aliases[alias] = sub_command

    def set_alias(self, alias: Union[str, Sequence[str]]) -> None:
        """Register one alias or a list of aliases for this command.

        Sub-commands register their aliases on the parent; top-level
        commands extend their own comparator instead. Aliases are
        lower-cased when the command is not case sensitive.

        Raises:
            InvalidArgumentError: If ``alias`` is not a string or a list
                of strings.
        """
        if isinstance(alias, str):
            names = [alias]
        elif isinstance(alias, (list, tuple)) and all(isinstance(a, str) for a in alias):
            names = list(alias)
        else:
            raise InvalidArgumentError(
                "Alias must be a string or a list of strings",
                argument="alias",
                received=type(alias).__name__,
            )
        for name in names:
            self._add_alias(name if self.case_sensitive else name.lower())
        if self._parent is None:
            self._matcher = build_comparator(self._comparator, self.case_sensitive)

    def _add_alias(self, name: str) -> None:
        if self._parent is not None:
            if name not in self.names:
                self.names.append(name)
            self._parent.set_sub_alias(self, name)
            return
        if name in self.names:
            return
        self.names.append(name)
        if not isinstance(self._comparator, list):
            self._comparator = [self._comparator]
        self._comparator.append(name)

    def get_sub_command(self, token: str, message: Any = None) -> Optional["Command"]:
        """Find the sub-command that ``token`` invokes, by alias then comparator."""
        for alias, sub in self.sub_command_aliases.items():
            if TextComparator(alias, sub.case_sensitive).matches(token):
                return sub
        for sub in self.sub_commands.values():
            if sub.matches(token, message):
                return sub
        return None

    def matches(self, token: str, message: Any = None) -> bool:
        """Whether ``token`` (or ``message``, for predicates) invokes this command."""
        return self._matcher.matches(token, message)

    # ------------------------------------------------------------------
    # Override points
    # ------------------------------------------------------------------

    async def message(self, message, author, channel, guild, client):
        """Run when the command is called from a guild channel."""
        if self._handler is not None:
            return await self._handler(message, author, channel, guild, client)
        return None

    async def dm_or_group(self, message, author, channel, client):
        """Run when the command is called from a direct or group message."""
        if self._handler is not None:
            return await self._handler(message, author, channel, None, client)
        return None

    def check_authorization(self, member: Any) -> bool:
        """Decide whether ``member`` may run this command. Allows everyone."""
        return True

    def register(self, client: Any) -> None:
        self.client = client

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def id(self) -> str:
        return self._id

    @property
    def parent(self) -> Optional["Command"]:
        return self._parent

    @property
    def comparator(self) -> RawComparator:
        return self._comparator

    @property
    def matcher(self) -> Comparator:
        """The resolved comparator variant."""
        return self._matcher

    @property
    def aliases(self) -> List[str]:
        """Aliases registered for this command on its parent.

        Raises:
            MissingParentError: If this is a top-level command.
        """
        if self._parent is None:
            raise MissingParentError(
                "Top-level commands keep aliases in their comparator",
                command_id=self._id,
            )
        return [
            alias
            for alias, sub in self._parent.sub_command_aliases.items()
            if sub is self
        ]

    @property
    def permissions(self):
        return self._permissions or DEFAULT_PERMISSION

    @property
    def roles(self):
        return self._roles or DEFAULT_PERMISSION
