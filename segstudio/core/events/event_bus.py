from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from threading import RLock
from typing import TypeVar, cast

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Subscription:
    event_type: type[object]
    handler: Callable[[object], None]


TEvent = TypeVar("TEvent")


class EventBus:
    """Simple, synchronous, in-process event bus.

    - Thread-safe subscribe/unsubscribe/publish.
    - Handlers are called synchronously in the publisher's thread, so events
      published from the segmentation worker arrive on that worker; a UI
      re-dispatches to its own thread if needed.
    - A failing handler is logged and does not stop the others.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._subs: defaultdict[type[object], list[Callable[[object], None]]] = defaultdict(list)

    def subscribe(
        self, event_type: type[TEvent], handler: Callable[[TEvent], None]
    ) -> Subscription:
        def _wrapped(event: object) -> None:
            handler(cast(TEvent, event))

        with self._lock:
            self._subs[event_type].append(_wrapped)
        return Subscription(event_type=event_type, handler=_wrapped)

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            handlers = self._subs.get(subscription.event_type)
            if not handlers:
                return
            try:
                handlers.remove(subscription.handler)
            except ValueError:
                return

    def publish(self, event: object) -> None:
        # Copy handlers under lock, then execute outside the lock.
        with self._lock:
            handlers = list(self._subs.get(type(event), []))
        for handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.exception(
                    "Event handler failed",
                    extra={"event": type(event).__name__},
                )

    def clear(self) -> None:
        """Remove all subscriptions."""
        with self._lock:
            self._subs.clear()
