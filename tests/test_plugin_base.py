"""Tests for the Plugin base class."""

from unittest.mock import MagicMock

import pytest

from cogwire.command import Command
from cogwire.exceptions import ConfigurationError
from cogwire.plugin_base import Plugin, PluginDetails, PluginEvent

DETAILS = {
    "id": "demo",
    "name": "Demo",
    "author": "someone",
    "version": "1.0",
    "description": "A demo plugin",
}


def _details(**overrides):
    details = dict(DETAILS)
    details.update(overrides)
    return details


class PingPlugin(Plugin):
    def load_commands(self):
        self.register_command(Command("ping"))


# -------------------------------------------------------------------
# Validation
# -------------------------------------------------------------------

@pytest.mark.parametrize("field", ["id", "name", "author", "version", "description"])
def test_missing_field_named_in_error(field):
    details = _details()
    del details[field]
    with pytest.raises(ConfigurationError, match=f"{field} is required") as exc_info:
        Plugin(details)
    assert exc_info.value.setting_name == field


def test_empty_description_rejected():
    with pytest.raises(ConfigurationError, match="description is required"):
        Plugin(_details(description=""))


def test_non_string_field_rejected():
    with pytest.raises(ConfigurationError, match="version must be a string"):
        Plugin(_details(version=1.0))


def test_first_invalid_field_reported():
    with pytest.raises(ConfigurationError) as exc_info:
        Plugin({"author": "x"})
    assert exc_info.value.setting_name == "id"


def test_non_mapping_details_rejected():
    with pytest.raises(ConfigurationError):
        Plugin("demo")


def test_metadata_attributes():
    plugin = Plugin(PluginDetails(**DETAILS))
    assert plugin.id == "demo"
    assert plugin.name == "Demo"
    assert plugin.author == "someone"
    assert plugin.version == "1.0"
    assert plugin.description == "A demo plugin"
    assert plugin.commands == {}
    assert plugin.client is None


def test_class_level_details():
    class Declared(Plugin):
        DETAILS = DETAILS

    assert Declared().id == "demo"


# -------------------------------------------------------------------
# Commands
# -------------------------------------------------------------------

def test_load_commands_must_be_overridden():
    with pytest.raises(NotImplementedError):
        Plugin(DETAILS).load_commands()


def test_end_to_end_ping():
    plugin = PingPlugin(DETAILS)
    plugin.load_commands()
    assert plugin.commands["ping"].id == "ping"
    assert plugin.commands["ping"].usage == "ping"


def test_register_command_passes_client():
    plugin = Plugin(DETAILS)
    client = MagicMock()
    plugin.load_client(client)
    cmd = Command("ping")
    plugin.register_command(cmd)
    assert cmd.client is client


def test_register_command_without_client():
    plugin = Plugin(DETAILS)
    cmd = Command("ping")
    cmd.register("stale")
    plugin.register_command(cmd)
    assert cmd.client is None


def test_duplicate_register_is_noop():
    plugin = Plugin(DETAILS)
    first = Command("ping")
    plugin.register_command(first)
    plugin.register_command(Command("ping"))
    assert plugin.commands["ping"] is first


def test_register_non_command_is_noop():
    plugin = Plugin(DETAILS)
    plugin.register_command("ping")
    assert plugin.commands == {}


def test_remove_command():
    plugin = Plugin(DETAILS)
    cmd = Command("ping")
    plugin.register_command(cmd)
    plugin.remove_command(cmd)
    assert "ping" not in plugin.commands


def test_remove_absent_command_is_noop():
    plugin = Plugin(DETAILS)
    plugin.remove_command(Command("ghost"))
    plugin.remove_command(None)
    assert plugin.commands == {}


# -------------------------------------------------------------------
# Observers
# -------------------------------------------------------------------

def test_lifecycle_events_emitted():
    registered = MagicMock()
    removed = MagicMock()
    loaded = MagicMock()
    plugin = Plugin(
        DETAILS,
        observers={
            "command_registered": [registered],
            PluginEvent.COMMAND_REMOVED: [removed],
        },
    )
    plugin.subscribe(PluginEvent.CLIENT_LOADED, loaded)

    plugin.load_client("client")
    cmd = Command("ping")
    plugin.register_command(cmd)
    plugin.register_command(Command("ping"))
    plugin.remove_command(cmd)

    loaded.assert_called_once_with("client")
    registered.assert_called_once_with(cmd)
    removed.assert_called_once_with(cmd)


def test_custom_event_and_unsubscribe():
    plugin = Plugin(DETAILS)
    callback = MagicMock()
    plugin.subscribe("reloaded", callback)
    assert plugin.emit("reloaded", 1, 2) == 1
    callback.assert_called_once_with(1, 2)

    plugin.unsubscribe("reloaded", callback)
    assert plugin.emit("reloaded") == 0
    plugin.unsubscribe("never", callback)
