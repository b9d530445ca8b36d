# webirc_core/message_formatter.py
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Iterable, Optional, Tuple

from webirc_core.config_defs import LOCAL_ECHO_MARKER, NOTICE_MARKER

if TYPE_CHECKING:
    from webirc_core.irc.irc_event import IRCEvent

logger = logging.getLogger("webirc.formatter")


@dataclass(frozen=True)
class Message:
    """
    A single displayable line in a channel.

    Attributes:
        source (str): Nick or prefix the line came from, empty for synthetic lines.
        command (str): Protocol verb, numeric code, or one of the synthetic markers.
        args (Tuple[str, ...]): Positional arguments of the line.
        timestamp (datetime): When the line was created.
    """
    source: str = ""
    command: str = ""
    args: Tuple[str, ...] = ()
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def is_notice(self) -> bool:
        return self.command == NOTICE_MARKER

    @property
    def is_local_echo(self) -> bool:
        return self.command == LOCAL_ECHO_MARKER

    @property
    def text(self) -> str:
        return " ".join(self.args)


def _as_args(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, Iterable):
        return tuple(str(arg) for arg in value)
    return (str(value),)


def format_event(event: "IRCEvent") -> Message:
    """Builds a Message from an inbound event. Missing fields fall back to empty values."""
    source = getattr(event, "source", None) or ""
    command = getattr(event, "command", None) or ""
    args = _as_args(getattr(event, "args", None))
    return Message(source=str(source), command=str(command), args=args)


def format_raw(source: Optional[str], command: Optional[str], args: Any = None) -> Message:
    return Message(source=source or "", command=command or "", args=_as_args(args))


def format_notice(text: str) -> Message:
    return Message(source="", command=NOTICE_MARKER, args=(text,))


def format_local_echo(nick: str, text: str) -> Message:
    return Message(source=nick or "", command=LOCAL_ECHO_MARKER, args=(text,))


def join_notice(nick: str, channel: str) -> Message:
    return format_notice(f"{nick} has joined {channel}")


def part_notice(nick: str, channel: str, reason: Optional[str] = None) -> Message:
    text = f"{nick} has left {channel}"
    if reason:
        text += f" ({reason})"
    return format_notice(text)


def quit_notice(nick: str, reason: Optional[str] = None) -> Message:
    text = f"{nick} has quit"
    if reason:
        text += f" ({reason})"
    return format_notice(text)
