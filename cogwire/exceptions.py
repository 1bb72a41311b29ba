"""Custom exception hierarchy for cogwire.

Provides precise error classification for the command and plugin
registries so hosts can tell assembly mistakes (bad ids, missing plugin
metadata, malformed aliases) apart from runtime failures in handlers.
"""

from enum import Enum
from typing import Any, Optional


class ErrorCategory(str, Enum):
    """Classification of errors for escalation decisions."""
    TRANSIENT = "transient"          # Worth retrying (client hiccup)
    PERMANENT = "permanent"          # Not worth retrying (bad input)
    INFRASTRUCTURE = "infrastructure"  # Config files, plugin directories


class CogwireError(Exception):
    """Base exception for all cogwire errors.

    Attributes:
        message: Human-readable error description.
        category: Error classification for escalation decisions.
        module: Originating module name (e.g. "command").
        context: Arbitrary key-value pairs for structured logging.
    """

    def __init__(
        self,
        message: str = "",
        *,
        category: ErrorCategory = ErrorCategory.PERMANENT,
        module: Optional[str] = None,
        **context: Any,
    ) -> None:
        self.message = message
        self.category = category
        self.module = module
        self.context = context
        super().__init__(message)

    @property
    def is_retryable(self) -> bool:
        """Whether this error is worth retrying."""
        return self.category == ErrorCategory.TRANSIENT

    def __str__(self) -> str:
        parts = [self.message or self.__class__.__name__]
        if self.module:
            parts.append(f"[module={self.module}]")
        if self.context:
            ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
            parts.append(f"({ctx})")
        return " ".join(parts)

    def __repr__(self) -> str:
        cls = self.__class__.__name__
        return (
            f"{cls}({self.message!r}, category={self.category.value!r}, "
            f"module={self.module!r})"
        )


# ---------------------------------------------------------------------------
# Configuration exceptions
# ---------------------------------------------------------------------------

class ConfigurationError(CogwireError):
    """Invalid or missing configuration.

    Raised when a Command or Plugin is constructed with missing or
    malformed required fields.

    Attributes:
        setting_name: The offending field (e.g. "id", "description").
    """

    def __init__(
        self,
        message: str = "",
        *,
        setting_name: Optional[str] = None,
        category: ErrorCategory = ErrorCategory.INFRASTRUCTURE,
        module: Optional[str] = None,
        **context: Any,
    ) -> None:
        self.setting_name = setting_name
        super().__init__(
            message, category=category, module=module or "config", **context
        )


# ---------------------------------------------------------------------------
# Command exceptions
# ---------------------------------------------------------------------------

class InvalidArgumentError(CogwireError):
    """A registry call received an argument of the wrong shape.

    Attributes:
        argument: Name of the offending parameter (e.g. "alias").
    """

    def __init__(
        self,
        message: str = "",
        *,
        argument: Optional[str] = None,
        category: ErrorCategory = ErrorCategory.PERMANENT,
        module: Optional[str] = None,
        **context: Any,
    ) -> None:
        self.argument = argument
        super().__init__(
            message, category=category, module=module or "command", **context
        )


class MissingParentError(CogwireError):
    """A parent-derived accessor was used on a top-level command.

    Attributes:
        command_id: ID of the command without a parent.
    """

    def __init__(
        self,
        message: str = "",
        *,
        command_id: Optional[str] = None,
        category: ErrorCategory = ErrorCategory.PERMANENT,
        module: Optional[str] = None,
        **context: Any,
    ) -> None:
        self.command_id = command_id
        super().__init__(
            message, category=category, module=module or "command", **context
        )


# ---------------------------------------------------------------------------
# Plugin exceptions
# ---------------------------------------------------------------------------

class PluginLoadError(CogwireError):
    """A plugin module could not be imported or instantiated.

    Attributes:
        plugin: Directory name of the plugin.
    """

    def __init__(
        self,
        message: str = "",
        *,
        plugin: Optional[str] = None,
        category: ErrorCategory = ErrorCategory.INFRASTRUCTURE,
        module: Optional[str] = None,
        **context: Any,
    ) -> None:
        self.plugin = plugin
        super().__init__(
            message, category=category, module=module or "plugins", **context
        )
