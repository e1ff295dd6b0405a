# roomchat/infrastructure/event_handlers.py
from roomchat.domain.events import Event
from roomchat.infrastructure.redis_client import RedisClient


def room_channel(room_id: int) -> str:
    return f"room:{room_id}"


class EventHandlers:
    def __init__(self, redis_client: RedisClient):
        self.redis_client = redis_client

    async def publish_room_event(self, event: Event) -> None:
        payload = event.model_dump(mode="json")
        payload["type"] = event.__class__.__name__
        await self.redis_client.publish_json(room_channel(event.room_id), payload)
