"""
In-process event bus.

Handlers are registered explicitly per event type and awaited one after the
other in registration order when an event is published.
"""

from collections import defaultdict
from collections.abc import Awaitable, Callable
from typing import Any

from fanblog.monitoring import get_logger

logger = get_logger(__name__)

Handler = Callable[[Any], Awaitable[None]]


class EventBus:
    def __init__(self) -> None:
        self._handlers: defaultdict[type, list[Handler]] = defaultdict(list)

    def subscribe(self, event_type: type, handler: Handler) -> None:
        self._handlers[event_type].append(handler)

    def handlers_for(self, event_type: type) -> list[Handler]:
        return list(self._handlers.get(event_type, ()))

    async def publish(self, event: object) -> None:
        """
        Deliver ``event`` to every handler subscribed to its exact type.

        A failing handler propagates its exception; the remaining handlers
        are not called.
        """
        handlers = self._handlers.get(type(event), [])
        logger.debug("Publishing event", event_type=type(event).__name__, handlers=len(handlers))
        for handler in handlers:
            await handler(event)
