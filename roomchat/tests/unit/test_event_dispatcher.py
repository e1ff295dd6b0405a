# roomchat/tests/unit/test_event_dispatcher.py
from datetime import UTC, datetime

import pytest

from roomchat.domain.events import (
    Event,
    MessageCreated,
    MessageEvent,
    RoomDeleted,
    UserInfo,
)
from roomchat.infrastructure.event_dispatcher import EventDispatcher, PendingEvents


def make_message_created():
    return MessageCreated(
        room_id=1,
        message_id=1,
        user_id=1,
        text="Test",
        timestamp=datetime.now(UTC),
        user=UserInfo(id=1, display_name="testuser"),
    )


@pytest.mark.asyncio
async def test_event_dispatcher():
    dispatcher = EventDispatcher()

    events_received = []

    async def test_handler(event):
        events_received.append(event)

    dispatcher.register(MessageCreated, test_handler)

    await dispatcher.dispatch(make_message_created())
    await dispatcher.dispatch(RoomDeleted(room_id=1, deleted_by=1))

    assert len(events_received) == 1
    assert isinstance(events_received[0], MessageCreated)


@pytest.mark.asyncio
async def test_base_class_handler_sees_subclasses():
    dispatcher = EventDispatcher()
    seen = []

    async def on_any(event):
        seen.append(("any", type(event)))

    async def on_message(event):
        seen.append(("message", type(event)))

    dispatcher.register(Event, on_any)
    dispatcher.register(MessageEvent, on_message)

    await dispatcher.dispatch(make_message_created())
    await dispatcher.dispatch(RoomDeleted(room_id=1, deleted_by=1))

    assert seen == [
        ("message", MessageCreated),
        ("any", MessageCreated),
        ("any", RoomDeleted),
    ]



@pytest.mark.asyncio
async def test_pending_events_wait_for_flush():
    dispatcher = EventDispatcher()
    seen = []

    async def handler(event):
        seen.append(type(event))

    dispatcher.register(Event, handler)
    pending = PendingEvents(dispatcher)

    await pending.dispatch(make_message_created())
    await pending.dispatch(RoomDeleted(room_id=1, deleted_by=1))
    assert seen == []

    await pending.flush()
    assert seen == [MessageCreated, RoomDeleted]

    await pending.flush()
    assert seen == [MessageCreated, RoomDeleted]
