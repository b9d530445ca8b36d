import pytest

from webirc_core.app_config import AppConfig, ConfigError
from webirc_core.client.irc_client_logic import IRCSession
from webirc_core.event_manager import (
    CHANNEL_CREATED,
    CHANNEL_REMOVED,
    SELECTION_CHANGED,
    SESSION_UPDATED,
)

SELF_SOURCE = "WebIRC!webirc@localhost"


@pytest.fixture
def recorded(session):
    events = []
    for name in (SESSION_UPDATED, CHANNEL_CREATED, CHANNEL_REMOVED, SELECTION_CHANGED):
        session.event_manager.subscribe(name, events.append, "test")
    return events


def _names(events):
    return [e["event"] for e in events]


@pytest.mark.parametrize("nick", ["", "   ", None])
def test_empty_nick_is_rejected(transport, nick):
    with pytest.raises(ConfigError):
        IRCSession(nick, transport)


def test_from_config_uses_configured_nick(tmp_path, transport):
    ini = tmp_path / "webirc.ini"
    ini.write_text("[Session]\nnick = Tester\ncommand_prefix = .\n", encoding="utf-8")
    session = IRCSession.from_config(AppConfig(str(ini)), transport)
    assert session.nick == "Tester"
    assert session.on_command(".join #x") is True
    assert transport.joined == ["#x"]


def test_initial_snapshot(session):
    snap = session.snapshot()
    assert snap.nick == "WebIRC"
    assert snap.selected == "status"
    assert list(snap.channels) == ["status"]
    assert snap["status"].selected is True


def test_self_join_dispatches_created_and_selection(session, recorded):
    session.on_join({"source": SELF_SOURCE, "channel": "#test"})
    assert _names(recorded) == [CHANNEL_CREATED, SELECTION_CHANGED, SESSION_UPDATED]
    assert recorded[0]["channel"] == "#test"
    assert recorded[1]["previous"] == "status"
    assert recorded[1]["channel"] == "#test"
    assert recorded[2]["snapshot"].selected == "#test"


def test_self_part_dispatches_removed_and_selection(joined_session):
    events = []
    for name in (SESSION_UPDATED, CHANNEL_REMOVED, SELECTION_CHANGED):
        joined_session.event_manager.subscribe(name, events.append, "test")
    joined_session.on_part({"source": SELF_SOURCE, "channel": "#test"})
    assert _names(events) == [CHANNEL_REMOVED, SELECTION_CHANGED, SESSION_UPDATED]


def test_no_update_for_dropped_or_noop_events(session, recorded):
    session.on_join(None)
    session.on_quit({"source": "ghost!g@h"})
    session.on_command("not sent from status")
    assert recorded == []


def test_on_channel_selected(session, recorded):
    session.on_privmsg({"source": "bob!b@h", "target": "#a", "message": "1"})
    session.on_privmsg({"source": "bob!b@h", "target": "#a", "message": "2"})
    assert session.snapshot()["#a"].unread_count == 2
    recorded.clear()

    assert session.on_channel_selected("#a") is True
    snap = session.snapshot()
    assert snap.selected == "#a"
    assert snap["#a"].unread_count == 0
    assert SELECTION_CHANGED in _names(recorded)

    assert session.on_channel_selected("#missing") is False
    assert session.snapshot().selected == "#a"


def test_cycle_channel_moves_selection(joined_session):
    assert joined_session.cycle_channel("next") == "status"
    assert joined_session.snapshot().selected == "status"
    assert joined_session.cycle_channel("prev") == "#test"
    assert joined_session.cycle_channel("up") is None
    assert joined_session.snapshot().selected == "#test"


def test_close_channel(joined_session, transport):
    assert joined_session.close_channel("status") is False
    assert joined_session.close_channel("#test") is True
    assert joined_session.snapshot().selected == "status"
    assert "#test" not in joined_session.snapshot()
    assert transport.left == []


def test_snapshot_is_not_affected_by_later_events(joined_session):
    snap = joined_session.snapshot()
    joined_session.on_privmsg({"source": "bob!b@h", "target": "#test", "message": "late"})
    assert snap["#test"].messages == ()
    assert len(joined_session.snapshot()["#test"].messages) == 1


def test_failing_subscriber_does_not_break_session(session):
    def broken(data):
        raise RuntimeError("view crashed")

    session.event_manager.subscribe(SESSION_UPDATED, broken, "view")
    assert session.on_message({"command": "NOTICE", "args": ["x"]}) is True
    assert session.on_message({"command": "NOTICE", "args": ["y"]}) is True
    assert len(session.snapshot()["status"].messages) == 2
    assert session.event_manager.has_subscribers(SESSION_UPDATED) is False


def test_unknown_event_kind_is_dropped(session):
    assert session.handle_event("kick", {"channel": "#a"}) is False
    assert session.handle_event(None, {}) is False


def test_handler_error_is_logged_and_absorbed(session, monkeypatch, caplog):
    from webirc_core.irc import irc_protocol
    from webirc_core.irc.irc_event import EventKind

    def explode(client, event):
        raise ValueError("boom")

    monkeypatch.setitem(irc_protocol.EVENT_HANDLERS, EventKind.MESSAGE, explode)
    assert session.on_message({"command": "TEST"}) is False
    assert "boom" in caplog.text
