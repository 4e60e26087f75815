import inspect
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable
from typing import Any

from stripe_listener.events import Event

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Awaitable[None] | None]


class EventDispatcher:
    def __init__(self) -> None:
        self._handlers: defaultdict[type, list[Handler]] = defaultdict(list)

    def register(self, event_cls: type, handler: Handler) -> None:
        self._handlers[event_cls].append(handler)

    def on(self, event_cls: type) -> Callable[[Handler], Handler]:
        def decorator(handler: Handler) -> Handler:
            self.register(event_cls, handler)
            return handler

        return decorator

    async def dispatch(self, event: Event) -> bool:
        handlers = self._handlers.get(type(event))
        if not handlers:
            logger.info("Unhandled event type=%s", event.type)
            return False
        for handler in handlers:
            result = handler(event)
            if inspect.isawaitable(result):
                await result
        return True
