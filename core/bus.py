"""
In-process Event Bus for the LiveLens Node.

Carries the control plane: recognition updates for the display, camera
status changes and shutdown requests. The frame data plane never goes
through the bus; only the small results derived from it do.

Thread-safe. Handlers run synchronously on the publisher's thread, which
for recognition updates is the pipeline worker.
"""
import threading
from collections import defaultdict
from typing import Callable, Any, Dict, List, Type
from utils.logger import Logger


class EventBus:
    """
    Simple publish/subscribe event bus.

    Usage:
        bus = EventBus()
        bus.subscribe(RecognitionsUpdated, display_subscriber.on_update)
        bus.publish(RecognitionsUpdated(recognitions=results))
    """

    def __init__(self):
        self._subscribers: Dict[Type, List[Callable]] = defaultdict(list)
        self._lock = threading.Lock()
        self.logger = Logger("EventBus")

    def subscribe(self, event_type: Type, handler: Callable[[Any], None]) -> None:
        """Register ``handler`` to be called with every ``event_type`` instance."""
        with self._lock:
            self._subscribers[event_type].append(handler)
        self.logger.debug(f"Subscribed {handler.__qualname__} to {event_type.__name__}")

    def unsubscribe(self, event_type: Type, handler: Callable[[Any], None]) -> None:
        """Remove a handler from a specific event type."""
        with self._lock:
            handlers = self._subscribers.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)

    def publish(self, event: Any) -> int:
        """
        Deliver ``event`` to every handler subscribed to its exact type.

        A failing handler is logged and skipped; the remaining handlers
        still run and the publisher never sees the exception.

        Returns:
            The number of handlers that completed without raising.
        """
        event_type = type(event)
        with self._lock:
            handlers = list(self._subscribers.get(event_type, []))

        if not handlers:
            self.logger.debug(f"No subscribers for {event_type.__name__}")
            return 0

        delivered = 0
        for handler in handlers:
            try:
                handler(event)
                delivered += 1
            except Exception as e:
                self.logger.error(
                    f"Error in handler {handler.__qualname__} for "
                    f"{event_type.__name__}: {e}"
                )
        return delivered

    def clear(self) -> None:
        """Remove all subscriptions."""
        with self._lock:
            self._subscribers.clear()
