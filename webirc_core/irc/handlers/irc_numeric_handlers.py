# webirc_core/irc/handlers/irc_numeric_handlers.py
import logging
from typing import TYPE_CHECKING, Callable, Dict, List

from webirc_core.config_defs import MEMBERSHIP_PREFIXES, STATUS_CHANNEL_NAME
from webirc_core.irc.irc_event import NumericEvent
from webirc_core.message_formatter import format_event

if TYPE_CHECKING:
    from webirc_core.client.irc_client_logic import IRCSession

logger = logging.getLogger("webirc.handlers.numeric")

RPL_NAMREPLY = 353


def split_names(names: str) -> List[str]:
    """Splits a NAMES list into bare nicks, dropping channel membership prefixes."""
    nicks = []
    for entry in names.split():
        nick = entry.lstrip("".join(MEMBERSHIP_PREFIXES))
        if nick:
            nicks.append(nick)
    return nicks


def _handle_rpl_namreply(client: "IRCSession", event: NumericEvent) -> None:
    """Handles RPL_NAMREPLY (353): <me> <symbol> <channel> :<nick list>."""
    args = event.args
    if len(args) < 4:
        logger.debug(f"RPL_NAMREPLY with too few args: {args!r}")
        return

    channel_in_reply = args[2]
    if not client.registry.has_channel(channel_in_reply):
        logger.debug(f"RPL_NAMREPLY for unknown channel '{channel_in_reply}'. Ignoring.")
        return

    added = client.registry.add_users(channel_in_reply, split_names(args[-1]))
    logger.debug(f"RPL_NAMREPLY for {channel_in_reply}: added {added} user(s).")


def _handle_generic_numeric(client: "IRCSession", event: NumericEvent) -> None:
    client.add_message(STATUS_CHANNEL_NAME, format_event(event))


NUMERIC_HANDLERS: Dict[int, Callable[["IRCSession", NumericEvent], None]] = {
    RPL_NAMREPLY: _handle_rpl_namreply,
}


def _handle_numeric_command(client: "IRCSession", event: NumericEvent) -> None:
    """Handles numeric replies, falling back to a status line for codes without a handler."""
    code = int(event.numeric)
    handler = NUMERIC_HANDLERS.get(code, _handle_generic_numeric)
    handler(client, event)
