from datetime import datetime, timedelta
from types import MappingProxyType

import pytest

from webirc_core.context_manager import ChannelRegistry
from webirc_core.message_formatter import Message, format_notice


@pytest.fixture
def registry():
    return ChannelRegistry()


def test_status_exists_and_is_selected_after_init(registry):
    status = registry.get_channel("status")
    assert status is not None
    assert status.selected is True
    assert status.is_status
    assert registry.selected_name == "status"


def test_status_cannot_be_removed(registry):
    assert registry.remove_channel("status") is False
    assert registry.has_channel("status")


def test_ensure_channel_is_idempotent(registry):
    first = registry.ensure_channel("#test")
    second = registry.ensure_channel("#test")
    assert first is second
    assert first.messages == []
    assert first.users == set()
    assert first.selected is False
    assert first.unread_count == 0


def test_channel_keys_are_case_sensitive(registry):
    registry.ensure_channel("#test")
    registry.ensure_channel("#Test")
    assert len(registry.channel_names()) == 3


def test_find_channel_ignores_case(registry):
    registry.ensure_channel("#test")
    assert registry.find_channel("#TeSt").name == "#test"
    assert registry.find_channel("#TeSt", casefold=False) is None
    assert registry.find_channel("") is None


def test_remove_selected_channel_falls_back_to_status(registry):
    registry.ensure_channel("#test")
    registry.select_channel("#test")
    assert registry.remove_channel("#test") is True
    assert registry.selected_name == "status"
    assert registry.get_channel("status").selected is True


def test_remove_unknown_channel_returns_false(registry):
    assert registry.remove_channel("#nope") is False


def test_select_keeps_exactly_one_selected(registry):
    for name in ("#a", "#b", "#c"):
        registry.ensure_channel(name)
        registry.select_channel(name)
    selected = [c.name for c in registry.channels.values() if c.selected]
    assert selected == ["#c"]


def test_select_unknown_channel_changes_nothing(registry):
    assert registry.select_channel("#missing") is False
    assert registry.selected_name == "status"


def test_unread_counts_and_resets_on_select(registry):
    for i in range(4):
        registry.add_message("#test", format_notice(f"line {i}"))
    assert registry.get_channel("#test").unread_count == 4
    registry.select_channel("#test")
    assert registry.get_channel("#test").unread_count == 0
    registry.add_message("#test", format_notice("seen"))
    assert registry.get_channel("#test").unread_count == 0


def test_add_message_creates_channel(registry):
    channel = registry.add_message("#new", format_notice("hello"))
    assert channel.name == "#new"
    assert len(channel.messages) == 1


def test_timestamps_never_go_backwards(registry):
    now = datetime.now()
    registry.add_message("#t", Message(command="A", timestamp=now))
    registry.add_message("#t", Message(command="B", timestamp=now - timedelta(minutes=5)))
    messages = registry.get_channel("#t").messages
    assert messages[1].timestamp >= messages[0].timestamp
    assert messages[1].command == "B"


def test_user_membership(registry):
    registry.ensure_channel("#a")
    registry.ensure_channel("#b")
    assert registry.add_user("#a", "bob") is True
    assert registry.add_users("#b", ["bob", "alice", ""]) == 2
    assert {c.name for c in registry.channels_with_user("bob")} == {"#a", "#b"}
    assert registry.remove_user("#a", "bob") is True
    assert registry.remove_user("#a", "bob") is False
    assert registry.add_user("#missing", "bob") is False


def test_snapshot_is_detached_and_read_only(registry):
    registry.add_message("#test", format_notice("hi"))
    registry.add_user("#test", "bob")
    snap = registry.snapshot("WebIRC")

    registry.add_message("#test", format_notice("later"))
    registry.add_user("#test", "alice")

    assert isinstance(snap.channels, MappingProxyType)
    assert len(snap["#test"].messages) == 1
    assert snap["#test"].users == frozenset({"bob"})
    assert "#test" in snap
    assert snap.selected == "status"
    with pytest.raises(TypeError):
        snap.channels["#x"] = None
