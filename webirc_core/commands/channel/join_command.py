# webirc_core/commands/channel/join_command.py
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from webirc_core.client.irc_client_logic import IRCSession

logger = logging.getLogger("webirc.commands.channel.join")

COMMAND_DEFINITIONS = [
    {
        "name": "join",
        "handler": "handle_join_command",
        "help": {
            "usage": "/join <channel>",
            "description": "Joins an IRC channel. The channel window opens once the server confirms the join.",
            "aliases": ["j"]
        }
    }
]


def handle_join_command(client: "IRCSession", args_str: str) -> bool:
    """Handles the /join command."""
    parts = args_str.split()
    if not parts:
        logger.debug("/join without a channel name.")
        return False

    channel_name = parts[0]
    client.join_channel(channel_name)
    logger.info(f"Requested JOIN for channel: {channel_name}")
    return True
