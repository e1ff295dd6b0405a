# roomchat/infrastructure/event_dispatcher.py
from collections import defaultdict
from collections.abc import Awaitable, Callable

from roomchat.domain.events import Event

Handler = Callable[[Event], Awaitable[None]]


class EventDispatcher:
    def __init__(self) -> None:
        self.handlers: dict[type[Event], list[Handler]] = defaultdict(list)

    def register(self, event_type: type[Event], handler: Handler) -> None:
        self.handlers[event_type].append(handler)

    async def dispatch(self, event: Event) -> None:
        # handlers registered for a base class also see its subclasses
        for event_type in type(event).__mro__:
            for handler in self.handlers.get(event_type, []):
                await handler(event)


class PendingEvents:
    """Collects the events of one request until its session has committed."""

    def __init__(self, dispatcher: EventDispatcher) -> None:
        self.dispatcher = dispatcher
        self.events: list[Event] = []

    async def dispatch(self, event: Event) -> None:
        self.events.append(event)

    async def flush(self) -> None:
        events, self.events = self.events, []
        for event in events:
            await self.dispatcher.dispatch(event)
