# webirc_core/event_manager.py
import logging
import time
from typing import Any, Callable, Dict, List

logger = logging.getLogger("webirc.event_manager")

SESSION_UPDATED = "SESSION_UPDATED"
CHANNEL_CREATED = "CHANNEL_CREATED"
CHANNEL_REMOVED = "CHANNEL_REMOVED"
SELECTION_CHANGED = "SELECTION_CHANGED"


class EventManager:
    """Fans session change notifications out to views and other subscribers."""

    def __init__(self):
        self.subscriptions: Dict[str, List[Dict[str, Any]]] = {}

    def subscribe(self, event_name: str, handler_function: Callable[[Dict[str, Any]], Any], owner: str) -> None:
        if not callable(handler_function):
            logger.error(f"'{owner}' attempted to subscribe non-callable handler for event '{event_name}'.")
            return
        subscribers = self.subscriptions.setdefault(event_name, [])
        for sub in subscribers:
            if sub["handler"] == handler_function and sub["owner"] == owner:
                logger.warning(f"'{owner}' handler already subscribed to event '{event_name}'. Ignoring duplicate.")
                return
        subscribers.append({"handler": handler_function, "owner": owner, "enabled": True})
        logger.debug(
            f"'{owner}' subscribed to event '{event_name}' with handler '{getattr(handler_function, '__name__', 'unknown')}'."
        )

    def unsubscribe(self, event_name: str, handler_function: Callable[[Dict[str, Any]], Any], owner: str) -> None:
        if event_name not in self.subscriptions:
            logger.debug(f"Attempted to unsubscribe '{owner}' from event '{event_name}', but no subscriptions found.")
            return
        self.subscriptions[event_name] = [
            sub
            for sub in self.subscriptions[event_name]
            if not (sub["handler"] == handler_function and sub["owner"] == owner)
        ]
        if not self.subscriptions[event_name]:
            del self.subscriptions[event_name]

    def has_subscribers(self, event_name: str) -> bool:
        return any(sub["enabled"] for sub in self.subscriptions.get(event_name, []))

    def dispatch_event(self, event_name: str, specific_event_data: Dict[str, Any]) -> None:
        """
        Calls every enabled subscriber of `event_name` with the event data.

        A subscriber that raises is logged and disabled so it cannot break the
        event stream for the session.
        """
        final_event_data = {"timestamp": time.time(), "event": event_name, **specific_event_data}
        for subscription in list(self.subscriptions.get(event_name, [])):
            if not subscription.get("enabled", True):
                continue
            handler = subscription["handler"]
            owner = subscription["owner"]
            try:
                handler(final_event_data)
            except Exception as e:
                logger.error(
                    f"Error in event handler '{getattr(handler, '__name__', 'unknown')}' from '{owner}' for event '{event_name}': {e}",
                    exc_info=True,
                )
                subscription["enabled"] = False
                logger.warning(
                    f"Disabled event handler '{getattr(handler, '__name__', 'unknown')}' from '{owner}' due to error."
                )
