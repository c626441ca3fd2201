from collections import defaultdict
from typing import Any, Callable, Dict, List, Union

from ...enum import StreamEvent
from ...logging_config import get_logger

logger = get_logger(__name__)

EventHandler = Callable[..., None]


class _EventEmitter:
    """
    Synchronous observer registry.

    Handlers run on the thread that emits the event, in registration order.
    A failing handler is logged and does not prevent the others from running.
    """

    def __init__(self):
        self._subscribers: Dict[StreamEvent, List[EventHandler]] = defaultdict(list)

    def on(self, event: Union[StreamEvent, str], handler: EventHandler) -> None:
        self._subscribers[StreamEvent(event)].append(handler)

    def off(self, event: Union[StreamEvent, str], handler: EventHandler) -> None:
        handlers = self._subscribers.get(StreamEvent(event), [])
        if handler in handlers:
            handlers.remove(handler)

    def has_handlers(self, event: Union[StreamEvent, str]) -> bool:
        return bool(self._subscribers.get(StreamEvent(event)))

    def emit(self, event: StreamEvent, *payload: Any) -> None:
        handlers = list(self._subscribers.get(event, []))
        if not handlers:
            logger.debug(f"No handlers for event '{event}'")
            return

        for handler in handlers:
            try:
                handler(*payload)
            except Exception:
                logger.exception(f"Handler for event '{event}' failed")
