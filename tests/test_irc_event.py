import pytest

from webirc_core.irc.irc_event import (
    EventKind,
    JoinEvent,
    MessageEvent,
    NumericEvent,
    PartEvent,
    PrivmsgEvent,
    QuitEvent,
    nick_from_source,
    parse_event,
)


def test_nick_from_source():
    assert nick_from_source("bob!b@host") == "bob"
    assert nick_from_source("server.example") == "server.example"
    assert nick_from_source(None) == ""


def test_event_kind_from_name():
    assert EventKind.from_name("JOIN") is EventKind.JOIN
    assert EventKind.from_name(EventKind.QUIT) is EventKind.QUIT
    assert EventKind.from_name("kick") is None
    assert EventKind.from_name(None) is None


@pytest.mark.parametrize(
    "kind,payload,expected_type",
    [
        ("message", {"command": "TEST"}, MessageEvent),
        ("join", {"source": "bob!b@h", "channel": "#a"}, JoinEvent),
        ("part", {"source": "bob!b@h", "channel": "#a", "message": "bye"}, PartEvent),
        ("quit", {"source": "bob!b@h"}, QuitEvent),
        ("privmsg", {"source": "bob!b@h", "target": "#a", "message": ""}, PrivmsgEvent),
        ("numeric", {"numeric": "353", "args": ["a", "=", "#a", "b"]}, NumericEvent),
        ("numeric", {"command": "001", "args": ["hi"]}, NumericEvent),
    ],
)
def test_parse_event_builds_variants(kind, payload, expected_type):
    assert isinstance(parse_event(kind, payload), expected_type)


@pytest.mark.parametrize(
    "kind,payload",
    [
        ("message", {}),
        ("join", {"channel": "#a"}),
        ("join", {"source": "bob!b@h"}),
        ("part", {"source": "", "channel": "#a"}),
        ("quit", {}),
        ("privmsg", {"target": "#a"}),
        ("numeric", {"command": "PRIVMSG"}),
        ("join", None),
        ("join", "JOIN #a"),
        ("bogus", {"command": "X"}),
    ],
)
def test_parse_event_drops_partial_payloads(kind, payload):
    assert parse_event(kind, payload) is None


def test_message_event_defaults_args():
    event = parse_event("message", {"command": "TEST"})
    assert event.command == "TEST"
    assert event.args == ()
    assert event.target is None


def test_parse_event_passes_typed_events_through():
    event = JoinEvent(source="bob!b@h", channel="#a")
    assert parse_event("join", event) is event
    assert parse_event("part", event) is None


def test_numeric_event_command_is_code():
    event = parse_event("numeric", {"numeric": "353", "args": ["x"]})
    assert event.command == "353"
    assert event.args == ("x",)
