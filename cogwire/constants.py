"""Default option sets and the recursive option merger.

Key objects:
    DEFAULTS: Default ``client_options`` and ``command_options`` mappings.

Key functions:
    merge_defaults: Fill a caller-supplied option mapping with defaults.
"""

import copy
from collections.abc import MutableMapping
from typing import Any, Dict, Optional

DEFAULTS: Dict[str, Dict[str, Any]] = {
    "client_options": {
        "prefix": "/",
        "guild_configs": False,
        "self_bot": False,
        "default_help": True,
        "enabled_plugins": [],
        "get_config_option": None,
        "set_config_option": None,
    },
    "command_options": {
        "case_sensitive": True,
        "dm_only": False,
        "guild_only": False,
        "description": "Default Description",
        "permissions": ["@everyone"],
        "roles": ["@everyone"],
    },
}

DEFAULT_PERMISSION = "@everyone"


def merge_defaults(defaults: Dict[str, Any], given: Optional[MutableMapping]) -> Any:
    """Fill ``given`` with every key of ``defaults`` it does not already have.

    Nested mappings supplied by the caller are merged recursively in place.
    Scalars and extra keys in ``given`` are left alone. ``given`` is
    mutated and returned; when it is None, ``defaults`` itself is returned.

    Missing defaults are inserted as deep copies on purpose: a merged list
    or dict equals its default but is never the same object. Only mappings
    are merged recursively: a caller-supplied list (even an empty one) is
    kept as-is rather than padded with the default list's items.

    Args:
        defaults: The default option tree.
        given: Caller-supplied options (consumed).

    Returns:
        The merged option tree.
    """
    if given is None:
        return defaults
    for key, default in defaults.items():
        if key not in given:
            # Default containers are copied so merges never share them
            given[key] = copy.deepcopy(default)
        elif isinstance(given[key], MutableMapping) and isinstance(default, dict):
            given[key] = merge_defaults(default, given[key])
    return given


def command_options(given: Optional[MutableMapping] = None) -> Dict[str, Any]:
    """Return command options merged over the command defaults."""
    if given is None:
        given = {}
    return merge_defaults(DEFAULTS["command_options"], given)


def client_options(given: Optional[MutableMapping] = None) -> Dict[str, Any]:
    """Return client options merged over the client defaults."""
    if given is None:
        given = {}
    return merge_defaults(DEFAULTS["client_options"], given)
