# webirc_core/client/event_pump.py
import asyncio
import logging
from typing import TYPE_CHECKING, Any, Optional, Tuple

if TYPE_CHECKING:
    from webirc_core.client.irc_client_logic import IRCSession

logger = logging.getLogger("webirc.event_pump")

_EVENT = "event"
_COMMAND = "command"
_SELECT = "select"


class EventPump:
    """
    Feeds transport events and user input to an IRCSession one item at a time.

    Producers (the transport callback, the input bar) only enqueue. The single
    consumer in `run()` hands each item to the session and lets it finish
    before taking the next, so session state is never observed half-updated.
    """

    def __init__(self, session: "IRCSession"):
        self.session = session
        self._queue: "asyncio.Queue[Tuple[str, Any, Any]]" = asyncio.Queue()
        self._should_stop = asyncio.Event()
        self.processed_count = 0

    def put_event(self, kind: str, payload: Any = None) -> None:
        self._queue.put_nowait((_EVENT, kind, payload))

    def put_command(self, text: str) -> None:
        self._queue.put_nowait((_COMMAND, text, None))

    def put_selection(self, channel_name: str) -> None:
        self._queue.put_nowait((_SELECT, channel_name, None))

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def _process_item(self, item_type: str, value: Any, payload: Any) -> bool:
        if item_type == _EVENT:
            return self.session.handle_event(value, payload)
        if item_type == _COMMAND:
            return self.session.on_command(value)
        if item_type == _SELECT:
            return self.session.on_channel_selected(value)
        logger.warning(f"Dropping unknown queue item type '{item_type}'")
        return False

    def _consume(self, item: Tuple[str, Any, Any]) -> None:
        item_type, value, payload = item
        try:
            self._process_item(item_type, value, payload)
            self.processed_count += 1
        except Exception as e:
            logger.error(f"Error processing queued {item_type} {value!r}: {e}", exc_info=True)
        finally:
            self._queue.task_done()

    async def run(self) -> None:
        """Consumes the queue until stop(); anything already queued at that point is still processed."""
        logger.info("Event pump started.")
        get_task: Optional["asyncio.Task[Tuple[str, Any, Any]]"] = None
        stop_task = asyncio.ensure_future(self._should_stop.wait())
        try:
            while not self._should_stop.is_set():
                get_task = asyncio.ensure_future(self._queue.get())
                done, _ = await asyncio.wait({get_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)
                if get_task not in done:
                    get_task.cancel()
                    break
                item = get_task.result()
                get_task = None
                self._consume(item)

            # Items queued before stop() are still applied so drain() can complete.
            while not self._queue.empty():
                self._consume(self._queue.get_nowait())
        except asyncio.CancelledError:
            logger.info("Event pump task cancelled.")
            raise
        finally:
            for task in (get_task, stop_task):
                if task is not None and not task.done():
                    task.cancel()
            logger.info(f"Event pump stopped after {self.processed_count} item(s).")

    def stop(self) -> None:
        self._should_stop.set()

    async def drain(self) -> None:
        """Waits until every item queued so far has been processed."""
        await self._queue.join()
