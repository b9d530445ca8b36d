# webirc_core/client/irc_client_logic.py
import logging
from typing import Any, Callable, Mapping, Optional, Set, Union

from webirc_core.app_config import AppConfig, ConfigError
from webirc_core.client.client_view_manager import ClientViewManager
from webirc_core.commands.command_handler import CommandHandler
from webirc_core.config_defs import DEFAULT_COMMAND_PREFIX
from webirc_core.context_manager import Channel, ChannelRegistry, SessionSnapshot
from webirc_core.event_manager import (
    CHANNEL_CREATED,
    CHANNEL_REMOVED,
    SELECTION_CHANGED,
    SESSION_UPDATED,
    EventManager,
)
from webirc_core.irc import irc_protocol
from webirc_core.irc.irc_event import EventKind, nick_from_source
from webirc_core.message_formatter import Message
from webirc_core.network_handler import IRCTransport, call_transport

logger = logging.getLogger("webirc.logic")

EventPayload = Optional[Mapping[str, Any]]


class IRCSession:
    """
    Client-side state of one IRC connection.

    The session is the only writer of its ChannelRegistry. Inbound transport
    events enter through the `on_*` callbacks (or `handle_event`), user intent
    through `on_command`, `on_channel_selected` and `close_channel`. Views read
    `snapshot()` and may subscribe to change events on `event_manager`.
    """

    def __init__(
        self,
        nick: str,
        transport: IRCTransport,
        config: Optional[AppConfig] = None,
        event_manager: Optional[EventManager] = None,
        command_prefix: Optional[str] = None,
    ):
        if not nick or not nick.strip():
            raise ConfigError("A nickname is required to start a session.")
        self.nick: str = nick.strip()
        self.transport = transport
        self.config = config
        self.registry = ChannelRegistry()
        self.view_manager = ClientViewManager(self.registry)
        self.event_manager = event_manager or EventManager()

        prefix = command_prefix or (config.command_prefix if config else DEFAULT_COMMAND_PREFIX)
        self.command_handler = CommandHandler(self, command_prefix=prefix)
        logger.info(f"Session started for nick '{self.nick}' (command prefix '{prefix}').")

    @classmethod
    def from_config(cls, config: AppConfig, transport: IRCTransport, **kwargs: Any) -> "IRCSession":
        return cls(config.nick, transport, config=config, **kwargs)

    # --- Identity ---

    def is_self_nick(self, nick: Optional[str]) -> bool:
        return bool(nick) and nick.lower() == self.nick.lower()

    def is_self(self, source: Optional[str]) -> bool:
        """True when a `nick!user@host` source is the local user."""
        return self.is_self_nick(nick_from_source(source))

    # --- Registry writes used by handlers and commands ---

    def add_message(self, channel_name: str, message: Message) -> Channel:
        channel = self.registry.add_message(channel_name, message)
        logger.debug(f"[{channel_name}] {message.command} {message.source} {message.text[:100]}")
        return channel

    # --- Outbound actions ---

    def join_channel(self, channel_name: str) -> bool:
        return call_transport(self.transport.join_channel, channel_name)

    def leave_channel(self, channel_name: str) -> bool:
        return call_transport(self.transport.leave_channel, channel_name)

    def send_message(self, target_name: str, text: str) -> bool:
        return call_transport(self.transport.send_message, target_name, text)

    # --- Inbound transport callbacks ---

    def handle_event(self, kind: Union[str, EventKind, None], payload: EventPayload = None) -> bool:
        """Processes one transport event to completion. Returns False if it was dropped."""
        return self._run_and_notify(lambda: irc_protocol.dispatch_event(self, kind, payload) is not None)

    def on_message(self, event: EventPayload = None) -> bool:
        return self.handle_event(EventKind.MESSAGE, event)

    def on_join(self, event: EventPayload = None) -> bool:
        return self.handle_event(EventKind.JOIN, event)

    def on_part(self, event: EventPayload = None) -> bool:
        return self.handle_event(EventKind.PART, event)

    def on_quit(self, event: EventPayload = None) -> bool:
        return self.handle_event(EventKind.QUIT, event)

    def on_privmsg(self, event: EventPayload = None) -> bool:
        return self.handle_event(EventKind.PRIVMSG, event)

    def on_numeric(self, event: EventPayload = None) -> bool:
        return self.handle_event(EventKind.NUMERIC, event)

    def on_353_numeric(self, event: EventPayload = None) -> bool:
        return self.on_numeric(event)

    # --- User intent ---

    def on_command(self, text: Optional[str]) -> bool:
        return self._run_and_notify(lambda: self.command_handler.process_user_command(text))

    def on_channel_selected(self, channel_name: str) -> bool:
        return self._run_and_notify(lambda: self.view_manager.switch_active_channel(channel_name))

    def cycle_channel(self, direction: str) -> Optional[str]:
        new_name: Optional[str] = None

        def _cycle() -> bool:
            nonlocal new_name
            new_name = self.view_manager.cycle(direction)
            return new_name is not None

        self._run_and_notify(_cycle)
        return new_name

    def close_channel(self, channel_name: str) -> bool:
        """Drops a channel window locally. The status channel cannot be closed."""
        return self._run_and_notify(lambda: self.registry.remove_channel(channel_name))

    # --- Read side ---

    @property
    def selected_channel(self) -> str:
        return self.registry.selected_name

    def snapshot(self) -> SessionSnapshot:
        return self.registry.snapshot(self.nick)

    # --- Change notification ---

    def _run_and_notify(self, operation: Callable[[], bool]) -> bool:
        names_before: Set[str] = set(self.registry.channel_names())
        selected_before = self.registry.selected_name
        revision_before = self.registry.revision

        result = bool(operation())

        names_after = set(self.registry.channel_names())
        for name in sorted(names_after - names_before):
            self.event_manager.dispatch_event(CHANNEL_CREATED, {"channel": name})
        for name in sorted(names_before - names_after):
            self.event_manager.dispatch_event(CHANNEL_REMOVED, {"channel": name})
        if self.registry.selected_name != selected_before:
            self.event_manager.dispatch_event(
                SELECTION_CHANGED,
                {"previous": selected_before, "channel": self.registry.selected_name},
            )
        if self.registry.revision != revision_before:
            self.event_manager.dispatch_event(SESSION_UPDATED, {"snapshot": self.snapshot()})
        return result

    def __repr__(self):
        return f"<IRCSession nick='{self.nick}' channels={len(self.registry.channels)} selected='{self.registry.selected_name}'>"
