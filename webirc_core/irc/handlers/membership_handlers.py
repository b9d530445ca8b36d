# webirc_core/irc/handlers/membership_handlers.py
import logging
from typing import TYPE_CHECKING

from webirc_core.irc.irc_event import JoinEvent, PartEvent, QuitEvent
from webirc_core.message_formatter import join_notice, part_notice, quit_notice

if TYPE_CHECKING:
    from webirc_core.client.irc_client_logic import IRCSession

logger = logging.getLogger("webirc.handlers.membership")


def _handle_join(client: "IRCSession", event: JoinEvent) -> None:
    """Handles JOIN events from the transport."""
    channel_name = event.channel
    source_nick = event.source_nick

    if client.is_self(event.source):
        client.registry.ensure_channel(channel_name)
        client.view_manager.switch_active_channel(channel_name)
        logger.info(f"Successfully joined channel: {channel_name}")
        return

    client.registry.ensure_channel(channel_name)
    client.registry.add_user(channel_name, source_nick)
    client.add_message(channel_name, join_notice(source_nick, channel_name))


def _handle_part(client: "IRCSession", event: PartEvent) -> None:
    channel_name = event.channel
    source_nick = event.source_nick

    if client.is_self(event.source):
        if client.registry.remove_channel(channel_name):
            logger.info(f"Left channel: {channel_name}")
        else:
            logger.debug(f"Self PART for unknown channel '{channel_name}', nothing to remove.")
        return

    if not client.registry.has_channel(channel_name):
        logger.debug(f"PART from {source_nick} for unknown channel '{channel_name}'. Ignoring.")
        return

    client.registry.remove_user(channel_name, source_nick)
    client.add_message(channel_name, part_notice(source_nick, channel_name, event.message))


def _handle_quit(client: "IRCSession", event: QuitEvent) -> None:
    source_nick = event.source_nick

    channels = client.registry.channels_with_user(source_nick)
    if not channels:
        logger.debug(f"QUIT from {source_nick}, who is not on any known channel.")
        return

    for channel in channels:
        client.registry.remove_user(channel.name, source_nick)
        client.add_message(channel.name, quit_notice(source_nick, event.message))
