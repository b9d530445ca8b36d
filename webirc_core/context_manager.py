# webirc_core/context_manager.py
import logging
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple, FrozenSet

from webirc_core.config_defs import STATUS_CHANNEL_NAME
from webirc_core.message_formatter import Message

logger = logging.getLogger("webirc.context")


class Channel:
    """Represents a single conversation context (status log, channel, or query)."""

    def __init__(self, name: str):
        self.name: str = name
        self.messages: List[Message] = []
        self.users: Set[str] = set()
        self.selected: bool = False
        self.unread_count: int = 0

    @property
    def is_status(self) -> bool:
        return self.name == STATUS_CHANNEL_NAME

    def add_message(self, message: Message) -> Message:
        # Keep timestamps non-decreasing even if the wall clock steps back.
        if self.messages and message.timestamp < self.messages[-1].timestamp:
            message = replace(message, timestamp=self.messages[-1].timestamp)
        self.messages.append(message)
        if not self.selected:
            self.unread_count += 1
        return message

    def snapshot(self) -> "ChannelSnapshot":
        return ChannelSnapshot(
            name=self.name,
            messages=tuple(self.messages),
            users=frozenset(self.users),
            selected=self.selected,
            unread_count=self.unread_count,
        )

    def __repr__(self):
        return f"<Channel name='{self.name}' users={len(self.users)} messages={len(self.messages)} unread={self.unread_count} selected={self.selected}>"


@dataclass(frozen=True)
class ChannelSnapshot:
    name: str
    messages: Tuple[Message, ...] = ()
    users: FrozenSet[str] = frozenset()
    selected: bool = False
    unread_count: int = 0


@dataclass(frozen=True)
class SessionSnapshot:
    nick: str
    selected: str
    channels: Mapping[str, ChannelSnapshot] = field(default_factory=lambda: MappingProxyType({}))

    def __getitem__(self, name: str) -> ChannelSnapshot:
        return self.channels[name]

    def __contains__(self, name: object) -> bool:
        return name in self.channels


class ChannelRegistry:
    """
    Owns every Channel of a session, keyed by exact name.

    The status channel is created on construction, starts selected, and can
    never be removed. Exactly one channel is selected at any time.

    `revision` increases on every mutation made through the registry.
    """

    def __init__(self):
        self.channels: Dict[str, Channel] = {}
        self.selected_name: str = STATUS_CHANNEL_NAME
        self.revision: int = 0
        status = Channel(STATUS_CHANNEL_NAME)
        status.selected = True
        self.channels[STATUS_CHANNEL_NAME] = status
        logger.debug("ChannelRegistry initialized with status channel selected.")

    def get_channel(self, name: Optional[str]) -> Optional[Channel]:
        if not name:
            return None
        return self.channels.get(name)

    def has_channel(self, name: Optional[str]) -> bool:
        return self.get_channel(name) is not None

    def find_channel(self, name: Optional[str], casefold: bool = True) -> Optional[Channel]:
        """Looks a channel up by name, ignoring letter case unless told otherwise."""
        if not name:
            return None
        exact = self.channels.get(name)
        if exact is not None or not casefold:
            return exact
        wanted = name.lower()
        for channel in self.channels.values():
            if channel.name.lower() == wanted:
                return channel
        return None

    def ensure_channel(self, name: str) -> Channel:
        channel = self.channels.get(name)
        if channel is not None:
            return channel
        channel = Channel(name)
        self.channels[name] = channel
        self.revision += 1
        logger.debug(f"Created channel: '{name}'")
        return channel

    def remove_channel(self, name: str) -> bool:
        if name == STATUS_CHANNEL_NAME:
            logger.warning("Refusing to remove the status channel.")
            return False
        channel = self.channels.pop(name, None)
        if channel is None:
            logger.debug(f"Channel '{name}' not found, cannot remove.")
            return False
        self.revision += 1
        if channel.selected:
            self.select_channel(STATUS_CHANNEL_NAME)
        logger.info(f"Removed channel: '{name}'")
        return True

    def select_channel(self, name: str) -> bool:
        target = self.channels.get(name)
        if target is None:
            logger.warning(f"Cannot select non-existent channel: '{name}'")
            return False
        for channel in self.channels.values():
            channel.selected = False
        target.selected = True
        target.unread_count = 0
        self.selected_name = name
        self.revision += 1
        logger.debug(f"Selected channel: '{name}'")
        return True

    def get_selected(self) -> Channel:
        return self.channels[self.selected_name]

    def add_message(self, name: str, message: Message) -> Channel:
        """Appends to the named channel, creating it if needed."""
        channel = self.ensure_channel(name)
        channel.add_message(message)
        self.revision += 1
        return channel

    def add_user(self, name: str, nick: str) -> bool:
        channel = self.channels.get(name)
        if channel is None or not nick:
            return False
        if nick not in channel.users:
            channel.users.add(nick)
            self.revision += 1
        return True

    def add_users(self, name: str, nicks: Iterable[str]) -> int:
        channel = self.channels.get(name)
        if channel is None:
            return 0
        before = len(channel.users)
        channel.users.update(nick for nick in nicks if nick)
        added = len(channel.users) - before
        if added:
            self.revision += 1
        return added

    def remove_user(self, name: str, nick: str) -> bool:
        channel = self.channels.get(name)
        if channel is None or nick not in channel.users:
            return False
        channel.users.discard(nick)
        self.revision += 1
        return True

    def channels_with_user(self, nick: str) -> List[Channel]:
        return [channel for channel in self.channels.values() if nick in channel.users]

    def channel_names(self) -> List[str]:
        return list(self.channels.keys())

    def snapshot(self, nick: str) -> SessionSnapshot:
        return SessionSnapshot(
            nick=nick,
            selected=self.selected_name,
            channels=MappingProxyType({name: channel.snapshot() for name, channel in self.channels.items()}),
        )
