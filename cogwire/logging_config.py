"""Logging configuration for cogwire.

Every record, whether emitted through structlog or plain stdlib
logging, is rendered by a structlog ``ProcessorFormatter``: readable
lines on the console, JSON lines in the log files.

Each event is tagged with the subsystem it came from, taken from the
logger name, and routed to that subsystem's file:

    cogwire.commands → commands.log   (sub-command and alias registration)
    cogwire.plugins  → plugins.log    (plugin discovery, command add/remove)
    cogwire.dispatch → dispatch.log   (routing, rejections, handler failures)
    cogwire.config   → config.log     (settings validation)

``cogwire.log`` collects all of them.
"""

import logging
import logging.handlers
import re
import sys
from typing import Any, Dict, List

import structlog

SUBSYSTEMS = ("commands", "plugins", "dispatch", "config")

LOGGER_PREFIX = "cogwire"

# ---------------------------------------------------------------------------
# Processors
# ---------------------------------------------------------------------------

_SECRET_PATTERNS = [
    # Discord-style bot tokens: three dot-separated base64url segments
    re.compile(r"[A-Za-z\d_-]{23,28}\.[A-Za-z\d_-]{6,7}\.[A-Za-z\d_-]{27,}"),
    # "Bot <token>" / "Bearer <token>" authorization values
    re.compile(r"(?:Bot|Bearer)\s+[a-zA-Z0-9_./-]{20,}"),
]

_REDACTED = "***REDACTED***"


def _scrub_value(value: str) -> str:
    for pattern in _SECRET_PATTERNS:
        value = pattern.sub(_REDACTED, value)
    return value


def sanitize_secrets(
    logger: Any, method_name: str, event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """structlog processor that scrubs client tokens from every string value."""
    for key, value in event_dict.items():
        if isinstance(value, str):
            event_dict[key] = _scrub_value(value)
        elif isinstance(value, (list, tuple)):
            event_dict[key] = type(value)(
                _scrub_value(v) if isinstance(v, str) else v
                for v in value
            )
        elif isinstance(value, dict):
            event_dict[key] = {
                k: _scrub_value(v) if isinstance(v, str) else v
                for k, v in value.items()
            }
    return event_dict


def tag_subsystem(
    logger: Any, method_name: str, event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """Add ``subsystem`` ("plugins", "dispatch", ...) from the logger name."""
    name = event_dict.get("logger", "")
    prefix = LOGGER_PREFIX + "."
    if name.startswith(prefix):
        event_dict.setdefault("subsystem", name[len(prefix):].split(".", 1)[0])
    return event_dict


# Shared by structlog events and foreign (stdlib) records alike
_SHARED_PROCESSORS: List[Any] = [
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    tag_subsystem,
    sanitize_secrets,
]


def _formatter(renderer: Any) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_SHARED_PROCESSORS,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )


def _level(name: str, fallback: int) -> int:
    level = logging.getLevelName(name.upper()) if name else fallback
    return level if isinstance(level, int) else fallback


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

def setup_logging(config) -> None:
    """Route cogwire events to the console and per-subsystem JSON files.

    Args:
        config: A Config providing ``log_dir``, ``logging_level``,
            ``logging_subsystem_levels``, ``logging_max_file_size_mb``
            and ``logging_backup_count``.
    """
    root_level = _level(config.logging_level, logging.INFO)
    subsystem_levels = config.logging_subsystem_levels or {}
    max_bytes = config.logging_max_file_size_mb * 1024 * 1024
    json_formatter = _formatter(structlog.processors.JSONRenderer())

    def rotating(filename: str, level: int) -> logging.Handler:
        handler = logging.handlers.RotatingFileHandler(
            log_dir / filename,
            maxBytes=max_bytes,
            backupCount=config.logging_backup_count,
            encoding="utf-8",
        )
        handler.setLevel(level)
        handler.setFormatter(json_formatter)
        return handler

    log_dir = config.log_dir
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        files_enabled = True
    except OSError as exc:
        files_enabled = False
        print(
            f"WARNING: Cannot create log directory {log_dir}: {exc}. "
            "Logging to console only.",
            file=sys.stderr,
        )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(root_level)
    console.setFormatter(_formatter(structlog.dev.ConsoleRenderer(colors=False)))

    root_logger = logging.getLogger()
    root_logger.handlers[:] = [console]
    root_logger.setLevel(logging.DEBUG)

    package_logger = logging.getLogger(LOGGER_PREFIX)
    package_logger.handlers.clear()
    package_logger.setLevel(logging.DEBUG)
    if files_enabled:
        package_logger.addHandler(rotating(f"{LOGGER_PREFIX}.log", root_level))

    for subsystem in SUBSYSTEMS:
        level = _level(subsystem_levels.get(subsystem, ""), root_level)
        sub_logger = logging.getLogger(f"{LOGGER_PREFIX}.{subsystem}")
        sub_logger.handlers.clear()
        sub_logger.setLevel(level)
        if files_enabled:
            sub_logger.addHandler(rotating(f"{subsystem}.log", level))

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_SHARED_PROCESSORS,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
