import pytest

from webirc_core.client.irc_client_logic import IRCSession

SELF_SOURCE = "WebIRC!webirc@localhost"


class RecordingTransport:
    """Transport double that records every outbound action."""

    def __init__(self):
        self.joined = []
        self.left = []
        self.messages = []

    def join_channel(self, channel_name):
        self.joined.append(channel_name)

    def leave_channel(self, channel_name):
        self.left.append(channel_name)

    def send_message(self, target_name, text):
        self.messages.append((target_name, text))


class FailingTransport:
    def join_channel(self, channel_name):
        raise ConnectionError("socket closed")

    def leave_channel(self, channel_name):
        raise ConnectionError("socket closed")

    def send_message(self, target_name, text):
        raise ConnectionError("socket closed")


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def session(transport):
    return IRCSession("WebIRC", transport)


@pytest.fixture
def failing_session():
    return IRCSession("WebIRC", FailingTransport())


@pytest.fixture
def joined_session(session):
    """Session that has joined #test and has it selected."""
    session.on_join({"source": SELF_SOURCE, "channel": "#test"})
    return session
