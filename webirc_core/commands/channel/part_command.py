# webirc_core/commands/channel/part_command.py
import logging
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from webirc_core.client.irc_client_logic import IRCSession

logger = logging.getLogger("webirc.commands.channel.part")

COMMAND_DEFINITIONS = [
    {
        "name": "part",
        "handler": "handle_part_command",
        "help": {
            "usage": "/part [channel]",
            "description": "Leaves the specified channel, or the selected one if none is given.",
            "aliases": ["p", "leave"]
        }
    }
]


def handle_part_command(client: "IRCSession", args_str: str) -> bool:
    """Handles the /part command."""
    parts = args_str.split()
    target_channel: Optional[str] = None

    if not parts:
        selected = client.registry.get_selected()
        if selected.is_status:
            logger.debug("/part with no argument while status is selected.")
            return False
        target_channel = selected.name
    else:
        channel = client.registry.find_channel(parts[0], casefold=True)
        if channel is None or channel.is_status:
            logger.debug(f"/part {parts[0]}: not a joined channel.")
            return False
        # Leave using the stored name, not what the user typed.
        target_channel = channel.name

    client.leave_channel(target_channel)
    logger.info(f"Requested PART for channel: {target_channel}")
    return True
