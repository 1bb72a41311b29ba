"""Routes incoming chat messages to registered commands.

Key classes:
    CommandDispatcher: Resolves message text against every loaded
        plugin's commands and invokes the matching hook.
    HelpCommand: Built-in ``help`` listing available commands.
    ResolvedCommand: A command plus the argument text after it.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import structlog

from .command import Command
from .config import Config, get_config
from .constants import client_options as merge_client_options
from .logging_config import setup_logging
from .plugin_loader import PluginLoader

logger = structlog.get_logger("cogwire.dispatch")


@dataclass
class ResolvedCommand:
    """The deepest command matched by a piece of text.

    Attributes:
        command: The matched command or sub-command.
        args: Remaining text after the matched tokens.
    """
    command: Command
    args: str = ""


class HelpCommand(Command):
    """Replies with the usage and description of every command."""

    def __init__(self, dispatcher: "CommandDispatcher"):
        super().__init__("help", {"description": "List available commands"})
        self._dispatcher = dispatcher

    async def message(self, message, author, channel, guild, client):
        await channel.send(self._dispatcher.help_text(guild))

    async def dm_or_group(self, message, author, channel, client):
        await channel.send(self._dispatcher.help_text())


class CommandDispatcher:
    """Matches message text against commands and runs the right hook.

    Args:
        loader: The plugin loader whose commands are dispatched.
        client_options: Client options; defaults to the loader's.
        client: The connected client. When omitted the loader's current
            client is used, so a later ``PluginLoader.set_client`` applies.
    """

    def __init__(
        self,
        loader: PluginLoader,
        client_options: Optional[dict] = None,
        client: Any = None,
    ):
        self.loader = loader
        if client_options is None:
            self.options = loader.options
        else:
            self.options = merge_client_options(client_options)
        self._client = client
        self._help: Optional[HelpCommand] = None
        if self.options["default_help"]:
            self._help = HelpCommand(self)

    @classmethod
    def from_config(
        cls, config: Optional[Config] = None, client: Any = None
    ) -> "CommandDispatcher":
        """Build a dispatcher from settings: logging, then plugin discovery.

        Args:
            config: Settings to use; defaults to ``get_config()``.
            client: The connected client, if already available.
        """
        if config is None:
            config = get_config()
        config.validate()
        setup_logging(config)

        loader = PluginLoader(config.plugins_dir, config.client_options, client)
        loader.discover_and_load()
        logger.info(
            "dispatcher_ready",
            plugins=[plugin.id for plugin in loader.plugins],
            prefix=loader.options["prefix"],
        )
        return cls(loader)

    @property
    def client(self) -> Any:
        """The explicit client, or whatever the loader currently holds."""
        if self._client is not None:
            return self._client
        return self.loader.client

    @property
    def commands(self) -> Dict[str, Command]:
        """Top-level commands, including the built-in help if enabled."""
        commands = self.loader.get_all_commands()
        if self._help is not None:
            self._help.register(self.client)
            commands.setdefault(self._help.id, self._help)
        return commands

    def get_prefix(self, guild: Any = None) -> str:
        """Command prefix, honouring per-guild overrides when enabled."""
        prefix = self.options["prefix"]
        getter = self.options.get("get_config_option")
        if guild is not None and self.options["guild_configs"] and callable(getter):
            configured = getter(guild, "prefix")
            if configured:
                prefix = configured
        return prefix

    def resolve(self, text: str, message: Any = None) -> Optional[ResolvedCommand]:
        """Find the deepest command invoked by ``text`` (prefix already stripped).

        The first token is matched against every top-level command; each
        following token descends into sub-commands while it matches.
        """
        parts = text.split(maxsplit=1)
        if not parts:
            return None
        token = parts[0]
        remainder = parts[1] if len(parts) > 1 else ""

        command = None
        for candidate in self.commands.values():
            if candidate.matches(token, message):
                command = candidate
                break
        if command is None:
            return None

        while remainder:
            parts = remainder.split(maxsplit=1)
            sub = command.get_sub_command(parts[0], message)
            if sub is None:
                break
            command = sub
            remainder = parts[1] if len(parts) > 1 else ""

        return ResolvedCommand(command=command, args=remainder)

    def _should_handle(self, author: Any) -> bool:
        if author is None:
            return False
        if self.options["self_bot"]:
            return author == getattr(self.client, "user", None)
        return getattr(author, "bot", False) is not True

    async def dispatch(self, message: Any) -> Optional[Command]:
        """Run the command invoked by ``message``, if any.

        Args:
            message: Client message exposing content, author, channel
                and guild (None for direct/group messages).

        Returns:
            The command that ran, or None if nothing ran.
        """
        author = getattr(message, "author", None)
        if not self._should_handle(author):
            return None

        content = (getattr(message, "content", "") or "").strip()
        guild = getattr(message, "guild", None)
        prefix = self.get_prefix(guild)
        if not content.startswith(prefix):
            return None

        resolved = self.resolve(content[len(prefix):], message)
        if resolved is None:
            logger.debug("command_not_found", has_guild=guild is not None)
            return None

        command = resolved.command
        channel = getattr(message, "channel", None)
        channel_type = "dm" if guild is None else "guild"

        if guild is None and command.guild_only:
            logger.info("command_rejected_guild_only", command=command.usage)
            return None
        if guild is not None and command.dm_only:
            logger.info("command_rejected_dm_only", command=command.usage)
            return None
        if guild is not None and not command.check_authorization(author):
            logger.warning("command_unauthorized", command=command.usage)
            return None

        logger.debug(
            "command_routing",
            command=command.usage,
            channel_type=channel_type,
            has_args=bool(resolved.args),
        )
        try:
            if guild is None:
                await command.dm_or_group(message, author, channel, self.client)
            else:
                await command.message(message, author, channel, guild, self.client)
        except Exception as e:
            logger.error(
                "command_handler_failed",
                command=command.usage,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise
        return command

    def help_text(self, guild: Any = None) -> str:
        """Render one ``<prefix><usage> - <description>`` line per command."""
        prefix = self.get_prefix(guild)
        lines: List[str] = []

        def _walk(command: Command) -> None:
            lines.append(f"{prefix}{command.usage} - {command.description}")
            for sub in command.sub_commands.values():
                _walk(sub)

        commands = self.commands
        for cmd_id in sorted(commands):
            _walk(commands[cmd_id])
        return "\n".join(lines)
