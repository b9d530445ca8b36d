# webirc_core/network_handler.py
import logging
from typing import Any, Callable, List, Protocol, Tuple

logger = logging.getLogger("webirc.network")


class IRCTransport(Protocol):
    """Outbound actions of the relayed IRC connection. All calls are fire-and-forget."""

    def join_channel(self, channel_name: str) -> Any: ...

    def leave_channel(self, channel_name: str) -> Any: ...

    def send_message(self, target_name: str, text: str) -> Any: ...


class LoggingTransport:
    """
    Headless transport that records and logs outbound actions instead of
    sending them. Used for transcript replays.
    """

    def __init__(self):
        self.sent: List[Tuple[str, Tuple[str, ...]]] = []

    def join_channel(self, channel_name: str) -> None:
        self.sent.append(("join_channel", (channel_name,)))
        logger.info(f"C >> JOIN {channel_name}")

    def leave_channel(self, channel_name: str) -> None:
        self.sent.append(("leave_channel", (channel_name,)))
        logger.info(f"C >> PART {channel_name}")

    def send_message(self, target_name: str, text: str) -> None:
        self.sent.append(("send_message", (target_name, text)))
        logger.info(f"C >> PRIVMSG {target_name} :{text}")


def call_transport(action: Callable[..., Any], *args: str) -> bool:
    """
    Invokes one outbound action. Delivery is not tracked here, so a failing
    transport is logged and reported as False without touching session state.
    """
    try:
        action(*args)
        return True
    except Exception as e:
        logger.error(f"Transport action '{getattr(action, '__name__', 'unknown')}' failed for {args}: {e}", exc_info=True)
        return False
