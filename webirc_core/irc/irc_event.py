# webirc_core/irc/irc_event.py
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Mapping, Optional, Tuple, Type, Union

logger = logging.getLogger("webirc.irc.event")


class EventKind(Enum):
    """Inbound event categories delivered by the transport."""

    MESSAGE = "message"
    JOIN = "join"
    PART = "part"
    QUIT = "quit"
    PRIVMSG = "privmsg"
    NUMERIC = "numeric"

    @classmethod
    def from_name(cls, name: Union[str, "EventKind", None]) -> Optional["EventKind"]:
        if isinstance(name, EventKind):
            return name
        if not name:
            return None
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            return None


def nick_from_source(source: Optional[str]) -> str:
    """Returns the nick part of a `nick!user@host` identity."""
    if not source:
        return ""
    return source.split("!", 1)[0]


def _str_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _args_tuple(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    try:
        return tuple(str(arg) for arg in value)
    except TypeError:
        return (str(value),)


@dataclass(frozen=True)
class IRCEvent:
    kind: ClassVar[EventKind]
    source: Optional[str] = None

    @property
    def source_nick(self) -> str:
        return nick_from_source(self.source)

    @property
    def command(self) -> str:
        return self.kind.name

    @property
    def args(self) -> Tuple[str, ...]:
        return ()


@dataclass(frozen=True)
class MessageEvent(IRCEvent):
    kind: ClassVar[EventKind] = EventKind.MESSAGE
    raw_command: str = ""
    raw_args: Tuple[str, ...] = ()
    target: Optional[str] = None

    @property
    def command(self) -> str:
        return self.raw_command

    @property
    def args(self) -> Tuple[str, ...]:
        return self.raw_args


@dataclass(frozen=True)
class JoinEvent(IRCEvent):
    kind: ClassVar[EventKind] = EventKind.JOIN
    channel: str = ""

    @property
    def args(self) -> Tuple[str, ...]:
        return (self.channel,)


@dataclass(frozen=True)
class PartEvent(IRCEvent):
    kind: ClassVar[EventKind] = EventKind.PART
    channel: str = ""
    message: Optional[str] = None

    @property
    def args(self) -> Tuple[str, ...]:
        return (self.channel, self.message) if self.message else (self.channel,)


@dataclass(frozen=True)
class QuitEvent(IRCEvent):
    kind: ClassVar[EventKind] = EventKind.QUIT
    message: Optional[str] = None

    @property
    def args(self) -> Tuple[str, ...]:
        return (self.message,) if self.message else ()


@dataclass(frozen=True)
class PrivmsgEvent(IRCEvent):
    kind: ClassVar[EventKind] = EventKind.PRIVMSG
    target: str = ""
    message: str = ""

    @property
    def args(self) -> Tuple[str, ...]:
        return (self.target, self.message)


@dataclass(frozen=True)
class NumericEvent(IRCEvent):
    kind: ClassVar[EventKind] = EventKind.NUMERIC
    numeric: str = ""
    raw_args: Tuple[str, ...] = ()

    @property
    def command(self) -> str:
        return self.numeric

    @property
    def args(self) -> Tuple[str, ...]:
        return self.raw_args


def _parse_message(payload: Mapping[str, Any]) -> Optional[IRCEvent]:
    command = _str_or_none(payload.get("command"))
    if not command:
        return None
    return MessageEvent(
        source=_str_or_none(payload.get("source")),
        raw_command=command,
        raw_args=_args_tuple(payload.get("args")),
        target=_str_or_none(payload.get("target")) or None,
    )


def _parse_join(payload: Mapping[str, Any]) -> Optional[IRCEvent]:
    channel = _str_or_none(payload.get("channel"))
    source = _str_or_none(payload.get("source"))
    if not channel or not nick_from_source(source):
        return None
    return JoinEvent(source=source, channel=channel)


def _parse_part(payload: Mapping[str, Any]) -> Optional[IRCEvent]:
    channel = _str_or_none(payload.get("channel"))
    source = _str_or_none(payload.get("source"))
    if not channel or not nick_from_source(source):
        return None
    return PartEvent(source=source, channel=channel, message=_str_or_none(payload.get("message")))


def _parse_quit(payload: Mapping[str, Any]) -> Optional[IRCEvent]:
    source = _str_or_none(payload.get("source"))
    if not nick_from_source(source):
        return None
    return QuitEvent(source=source, message=_str_or_none(payload.get("message")))


def _parse_privmsg(payload: Mapping[str, Any]) -> Optional[IRCEvent]:
    target = _str_or_none(payload.get("target"))
    message = _str_or_none(payload.get("message"))
    if not target or message is None:
        return None
    return PrivmsgEvent(source=_str_or_none(payload.get("source")), target=target, message=message)


def _parse_numeric(payload: Mapping[str, Any]) -> Optional[IRCEvent]:
    numeric = _str_or_none(payload.get("numeric")) or _str_or_none(payload.get("command"))
    if not numeric or not numeric.strip().isdigit():
        return None
    return NumericEvent(
        source=_str_or_none(payload.get("source")),
        numeric=numeric.strip(),
        raw_args=_args_tuple(payload.get("args")),
    )


EVENT_PARSERS: Dict[EventKind, Any] = {
    EventKind.MESSAGE: _parse_message,
    EventKind.JOIN: _parse_join,
    EventKind.PART: _parse_part,
    EventKind.QUIT: _parse_quit,
    EventKind.PRIVMSG: _parse_privmsg,
    EventKind.NUMERIC: _parse_numeric,
}

EVENT_TYPES: Dict[EventKind, Type[IRCEvent]] = {
    EventKind.MESSAGE: MessageEvent,
    EventKind.JOIN: JoinEvent,
    EventKind.PART: PartEvent,
    EventKind.QUIT: QuitEvent,
    EventKind.PRIVMSG: PrivmsgEvent,
    EventKind.NUMERIC: NumericEvent,
}


def parse_event(kind: Union[str, EventKind, None], payload: Any) -> Optional[IRCEvent]:
    """
    Converts a loose transport payload into a typed event.

    Returns None when the kind is unknown, the payload is not a mapping, or a
    field the kind depends on is missing. Partial events are expected while a
    connection is coming up, so this is never treated as an error.
    """
    event_kind = EventKind.from_name(kind)
    if event_kind is None:
        logger.debug(f"parse_event: unknown event kind {kind!r}")
        return None
    if isinstance(payload, IRCEvent):
        return payload if isinstance(payload, EVENT_TYPES[event_kind]) else None
    if not isinstance(payload, Mapping):
        logger.debug(f"parse_event: {event_kind.value} payload is not a mapping: {payload!r}")
        return None
    event = EVENT_PARSERS[event_kind](payload)
    if event is None:
        logger.debug(f"parse_event: {event_kind.value} payload missing required fields: {dict(payload)!r}")
    return event
