# webirc_core/client/client_view_manager.py
import logging
from typing import TYPE_CHECKING, List, Optional

from webirc_core.config_defs import STATUS_CHANNEL_NAME

if TYPE_CHECKING:
    from webirc_core.context_manager import ChannelRegistry

logger = logging.getLogger("webirc.view_manager")


class ClientViewManager:
    """Tracks which channel is active for display and unread suppression."""

    def __init__(self, registry: "ChannelRegistry"):
        self.registry = registry

    @property
    def active_channel_name(self) -> str:
        return self.registry.selected_name

    def switch_active_channel(self, channel_name: str) -> bool:
        """Selects `channel_name`; its unread count always resets, even if it was already active."""
        if not self.registry.select_channel(channel_name):
            return False
        logger.debug(f"Active channel is now '{channel_name}'")
        return True

    def ordered_channel_names(self) -> List[str]:
        """Status first, then the remaining channels sorted case-insensitively."""
        names = self.registry.channel_names()
        regular = sorted((name for name in names if name != STATUS_CHANNEL_NAME), key=lambda x: x.lower())
        return [STATUS_CHANNEL_NAME] + regular

    def cycle(self, direction: str) -> Optional[str]:
        """Moves the selection to the next or previous channel and returns its name."""
        ordered = self.ordered_channel_names()
        try:
            current_idx = ordered.index(self.active_channel_name)
        except ValueError:
            current_idx = 0

        if direction == "next":
            new_idx = (current_idx + 1) % len(ordered)
        elif direction == "prev":
            new_idx = (current_idx - 1 + len(ordered)) % len(ordered)
        else:
            logger.warning(f"Unknown cycle direction '{direction}'")
            return None

        new_name = ordered[new_idx]
        if new_name != self.active_channel_name:
            self.switch_active_channel(new_name)
        return new_name
