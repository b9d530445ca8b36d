# webirc_core/irc/handlers/message_handlers.py
import logging
from typing import TYPE_CHECKING

from webirc_core.config_defs import CHANNEL_PREFIXES, STATUS_CHANNEL_NAME
from webirc_core.irc.irc_event import MessageEvent, PrivmsgEvent
from webirc_core.message_formatter import format_event

if TYPE_CHECKING:
    from webirc_core.client.irc_client_logic import IRCSession

logger = logging.getLogger("webirc.handlers.message")


def _handle_message(client: "IRCSession", event: MessageEvent) -> None:
    """Handles generic server messages; anything without a target lands in status."""
    context_name = event.target or STATUS_CHANNEL_NAME
    client.add_message(context_name, format_event(event))


def resolve_privmsg_context(client: "IRCSession", event: PrivmsgEvent) -> str:
    """
    Picks the channel a PRIVMSG belongs to.

    Messages addressed to us go to a per-nick query named after the sender.
    A target matching an open channel in any letter case uses that channel's
    stored name. Other channel-prefixed targets open a new channel, anything
    else is logged to status.
    """
    target = event.target
    if client.is_self_nick(target):
        target = event.source_nick
        if not target:
            return STATUS_CHANNEL_NAME
        known = client.registry.find_channel(target, casefold=True)
        return known.name if known is not None else target
    known = client.registry.find_channel(target, casefold=True)
    if known is not None:
        return known.name
    if target.startswith(CHANNEL_PREFIXES):
        return target
    return STATUS_CHANNEL_NAME


def _handle_privmsg(client: "IRCSession", event: PrivmsgEvent) -> None:
    """Handles PRIVMSG events."""
    context_name = resolve_privmsg_context(client, event)
    if context_name == STATUS_CHANNEL_NAME and event.target != STATUS_CHANNEL_NAME:
        logger.debug(f"PRIVMSG to '{event.target}' matched no channel or self, logging to status.")
    client.add_message(context_name, format_event(event))
