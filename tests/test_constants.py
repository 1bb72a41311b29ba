"""Tests for option defaults and the recursive option merger."""

from cogwire.constants import DEFAULTS, client_options, command_options, merge_defaults


def test_merge_none_returns_defaults_object():
    defaults = {"a": 1}
    assert merge_defaults(defaults, None) is defaults


def test_merge_fills_missing_keys():
    merged = merge_defaults({"a": 1, "b": 2}, {"a": 5})
    assert merged == {"a": 5, "b": 2}


def test_merge_keeps_caller_scalars_and_extra_keys():
    given = {"a": False, "extra": "x"}
    merged = merge_defaults({"a": True, "b": "d"}, given)
    assert merged["a"] is False
    assert merged["extra"] == "x"
    assert merged["b"] == "d"


def test_merge_mutates_and_returns_given():
    given = {}
    assert merge_defaults({"a": 1}, given) is given
    assert given == {"a": 1}


def test_merge_recurses_into_nested_mappings():
    defaults = {"outer": {"keep": 1, "fill": 2}}
    given = {"outer": {"keep": 9}}
    merged = merge_defaults(defaults, given)
    assert merged["outer"] == {"keep": 9, "fill": 2}
    assert defaults["outer"] == {"keep": 1, "fill": 2}


def test_merged_default_lists_are_not_shared():
    first = command_options()
    second = command_options()
    first["permissions"].append("admin")
    assert second["permissions"] == ["@everyone"]
    assert DEFAULTS["command_options"]["permissions"] == ["@everyone"]


def test_client_option_defaults():
    options = client_options({"prefix": "!"})
    assert options["prefix"] == "!"
    assert options["default_help"] is True
    assert options["enabled_plugins"] == []
    assert options["get_config_option"] is None


def test_missing_defaults_are_equal_copies():
    defaults = {"roles": ["@everyone"], "flag": True}
    merged = merge_defaults(defaults, {})
    assert merged["roles"] == defaults["roles"]
    assert merged["roles"] is not defaults["roles"]
    assert merged["flag"] is True


def test_given_lists_are_not_padded():
    assert command_options({"permissions": []})["permissions"] == []
    assert command_options({"roles": ["mods"]})["roles"] == ["mods"]
