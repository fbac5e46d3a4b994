"""
Message Bus

Delivers committed domain events to the handlers subscribed to their type.
Commands are not routed here: callers invoke their handler directly.
"""

from typing import Callable, Dict, Iterable, List, Type
import logging

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


class MessageBus:
    """
    Event bus, one event type to many handlers

    Handlers run synchronously in registration order. By the time an event
    arrives the write that raised it is durable, so a handler failure is
    logged and the remaining handlers still run.
    """

    def __init__(self):
        self._subscribers: Dict[Type[DomainEvent], List[EventHandler]] = {}

    def register_event_handler(self, event_type: Type[DomainEvent], handler: EventHandler):
        """Subscribe ``handler``; subscribing it again is a no-op."""
        subscribers = self._subscribers.setdefault(event_type, [])
        if handler in subscribers:
            return
        subscribers.append(handler)
        logger.debug(f"Subscribed {_name(handler)} to {event_type.__name__}")

    def handlers_for(self, event_type: Type[DomainEvent]) -> List[EventHandler]:
        return list(self._subscribers.get(event_type, []))

    def publish_events(self, events: Iterable[DomainEvent]):
        for event in events:
            self._dispatch(event)

    def _dispatch(self, event: DomainEvent):
        event_name = type(event).__name__
        subscribers = self.handlers_for(type(event))
        if not subscribers:
            logger.debug(f"No subscribers for {event_name}")
            return

        logger.info(f"Dispatching {event_name} {event.event_id} to {len(subscribers)} handler(s)")
        for handler in subscribers:
            try:
                handler(event)
            except Exception as e:
                logger.error(
                    f"Handler {_name(handler)} failed on {event_name} {event.event_id}: {e}",
                    exc_info=True,
                )


def _name(handler) -> str:
    return getattr(handler, "__qualname__", None) or getattr(handler, "__name__", repr(handler))


# Process-wide bus; apps subscribe in AppConfig.ready()
message_bus = MessageBus()
