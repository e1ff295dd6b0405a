# roomchat/interactors/message_interactor.py
from datetime import datetime, timedelta
from typing import List, Tuple

from roomchat.config import AppConfig
from roomchat.domain.entities import as_utc, is_admin, utcnow
from roomchat.domain.exceptions import (
    DomainValidationError,
    ForbiddenError,
    NotFoundError,
)
from roomchat.gateways.interfaces import IMessageGateway, IRoomGateway
from roomchat.infrastructure import schemas
from roomchat.infrastructure.uow import UoWModel


class MessageInteractor:
    def __init__(
        self,
        config: AppConfig,
        room_gateway: IRoomGateway,
        message_gateway: IMessageGateway,
    ):
        self.config = config
        self.room_gateway = room_gateway
        self.message_gateway = message_gateway

    def _validate_text(self, text: str) -> None:
        if not text.strip():
            raise DomainValidationError("Message text is required")
        if len(text) > self.config.MAX_MESSAGE_LENGTH:
            raise DomainValidationError(
                f"Message text exceeds {self.config.MAX_MESSAGE_LENGTH} characters"
            )

    async def _require_message(self, message_id: int) -> UoWModel:
        message = await self.message_gateway.get_message(message_id)
        if not message:
            raise NotFoundError("Message not found")
        return message

    def can_edit(self, timestamp: datetime, now: datetime) -> bool:
        window = timedelta(seconds=self.config.MESSAGE_EDIT_WINDOW_SECONDS)
        return now - as_utc(timestamp) < window

    async def send_message(
        self, message: schemas.MessageCreate, caller: schemas.User
    ) -> schemas.Message:
        self._validate_text(message.text)
        if not await self.room_gateway.get_room(message.room_id):
            raise NotFoundError("Room not found")
        if message.parent_message_id is not None:
            parent = await self.message_gateway.get_message(message.parent_message_id)
            if not parent or parent.room_id != message.room_id:
                raise NotFoundError("Parent message not found")
        new_message = await self.message_gateway.create_message(message, caller.id)
        return schemas.Message.model_validate(new_message)

    async def get_room_messages(self, room_id: int) -> List[schemas.Message]:
        if not await self.room_gateway.get_room(room_id):
            raise NotFoundError("Room not found")
        messages = await self.message_gateway.get_recent(
            room_id, self.config.ROOM_MESSAGES_LIMIT
        )
        return [schemas.Message.model_validate(message) for message in messages]

    async def edit_message(
        self,
        message_id: int,
        update: schemas.MessageUpdate,
        caller: schemas.User,
        now: datetime | None = None,
    ) -> schemas.Message:
        now = now or utcnow()
        message = await self._require_message(message_id)
        if message.user_id != caller.id:
            raise ForbiddenError("Only the author can edit this message")
        if not self.can_edit(message.timestamp, now):
            raise ForbiddenError("The edit window for this message has expired")
        self._validate_text(update.text)
        updated = await self.message_gateway.update_text(message, update.text)
        return schemas.Message.model_validate(updated)

    async def delete_message(
        self, message_id: int, caller: schemas.User
    ) -> schemas.Message:
        message = await self._require_message(message_id)
        if message.user_id != caller.id and not is_admin(caller):
            raise ForbiddenError("Only the author or an admin can delete this message")
        snapshot = schemas.Message.model_validate(message)
        await self.message_gateway.delete_message(message)
        return snapshot

    async def toggle_reaction(
        self, message_id: int, emoji: str, caller: schemas.User
    ) -> Tuple[schemas.Message, bool]:
        await self._require_message(message_id)
        added = await self.message_gateway.toggle_reaction(message_id, caller.id, emoji)
        message = await self._require_message(message_id)
        return schemas.Message.model_validate(message), added
