# webirc_core/irc/irc_protocol.py
import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, Union

from webirc_core.irc.irc_event import EventKind, IRCEvent, parse_event
from webirc_core.irc.handlers import (
    message_handlers,
    membership_handlers,
    irc_numeric_handlers,
)

if TYPE_CHECKING:
    from webirc_core.client.irc_client_logic import IRCSession

logger = logging.getLogger("webirc.protocol")

HandlerFunction = Callable[["IRCSession", Any], None]


EVENT_HANDLERS: Dict[EventKind, HandlerFunction] = {
    EventKind.MESSAGE: message_handlers._handle_message,
    EventKind.PRIVMSG: message_handlers._handle_privmsg,
    EventKind.JOIN: membership_handlers._handle_join,
    EventKind.PART: membership_handlers._handle_part,
    EventKind.QUIT: membership_handlers._handle_quit,
    EventKind.NUMERIC: irc_numeric_handlers._handle_numeric_command,
}


def dispatch_event(client: "IRCSession", kind: Union[str, EventKind, None], payload: Any) -> Optional[IRCEvent]:
    """
    Parses one transport event and routes it to its handler.

    Returns the typed event that was handled, or None when the payload was
    dropped as partial or a handler failed.
    """
    event = parse_event(kind, payload)
    if event is None:
        return None

    handler = EVENT_HANDLERS[event.kind]
    try:
        handler(client, event)
    except Exception as e:
        logger.error(f"Error in handler for {event.kind.name} event {event!r}: {e}", exc_info=True)
        return None
    return event
