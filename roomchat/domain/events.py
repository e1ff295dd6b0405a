# roomchat/domain/events.py
from datetime import datetime

from pydantic import BaseModel


class Event(BaseModel):
    room_id: int


class UserInfo(BaseModel):
    id: int
    name: str | None = None
    display_name: str | None = None


class MessageEvent(Event):
    message_id: int
    user_id: int
    text: str
    timestamp: datetime
    parent_message_id: int | None = None
    is_edited: bool = False
    user: UserInfo


class MessageCreated(MessageEvent):
    pass


class MessageUpdated(MessageEvent):
    pass


class MessageDeleted(Event):
    message_id: int
    deleted_by: int


class ReactionToggled(Event):
    message_id: int
    user_id: int
    emoji: str
    added: bool


class MessageSeen(Event):
    message_id: int
    user_id: int


class ParticipantJoined(Event):
    user_id: int
    participant_count: int


class ParticipantLeft(Event):
    user_id: int
    participant_count: int


class RoomStatusChanged(Event):
    is_active: bool


class RoomDeleted(Event):
    deleted_by: int
