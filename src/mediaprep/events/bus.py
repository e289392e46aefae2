import logging
import threading
import uuid
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Type


@dataclass(kw_only=True)
class Event:
    """Base event class."""
    timestamp: datetime = field(default_factory=datetime.now)
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))


@dataclass
class Subscription:
    """Handle returned by subscribe(); can be used to unsubscribe."""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    event_type: Type = Event
    handler: Callable = field(default=lambda e: None)
    active: bool = True

    def cancel(self):
        self.active = False


class EventBus:
    """
    Synchronous publish/subscribe hub.

    Handlers registered for a base class also receive its subclasses, so a
    subscription to :class:`Event` observes everything published on the bus.
    Publishers run inside coroutines; handlers should be quick and must not
    block on I/O.
    """

    def __init__(self, logger: logging.Logger = None):
        self._logger = logger or logging.getLogger(__name__)
        self._handlers: Dict[Type[Event], List[Subscription]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, event_type: Type[Event], handler: Callable) -> Subscription:
        sub = Subscription(event_type=event_type, handler=handler)
        with self._lock:
            self._handlers[event_type].append(sub)
        return sub

    def unsubscribe(self, subscription: Subscription):
        subscription.cancel()
        with self._lock:
            subs = self._handlers.get(subscription.event_type, [])
            if subscription in subs:
                subs.remove(subscription)

    def _subscriptions_for(self, event_type: Type[Event]) -> List[Subscription]:
        with self._lock:
            return [
                sub
                for klass in event_type.__mro__
                for sub in self._handlers.get(klass, ())
            ]

    def publish(self, event: Event) -> int:
        """Deliver *event* and return how many handlers ran successfully."""

        event_type = type(event)
        delivered = 0
        for sub in self._subscriptions_for(event_type):
            if not sub.active:
                continue
            try:
                sub.handler(event)
            except Exception as e:
                self._logger.error("Handler failed for %s: %s", event_type.__name__, e)
                continue
            delivered += 1
        return delivered
