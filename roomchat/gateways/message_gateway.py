# roomchat/gateways/message_gateway.py
from datetime import datetime

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from roomchat.domain.entities import utcnow
from roomchat.gateways.interfaces import IMessageGateway
from roomchat.infrastructure import models, schemas
from roomchat.infrastructure.data_mappers import MessageMapper, ReactionMapper
from roomchat.infrastructure.uow import UnitOfWork, UoWModel


def _with_details(stmt):
    # a parent that is also on the page is re-populated, so it reloads its
    # reactions too
    return stmt.options(
        selectinload(models.Message.parent).selectinload(models.Message.reactions),
        selectinload(models.Message.reactions),
    ).execution_options(populate_existing=True)


class MessageGateway(IMessageGateway):
    def __init__(self, session: AsyncSession, uow: UnitOfWork):
        self.session = session
        self.uow = uow
        uow.mappers[models.Message] = MessageMapper(session)
        uow.mappers[models.Reaction] = ReactionMapper(session)

    async def get_message(self, message_id: int) -> UoWModel | None:
        stmt = _with_details(
            select(models.Message).filter(models.Message.id == message_id)
        )
        result = await self.session.execute(stmt)
        message = result.scalar_one_or_none()
        return UoWModel(message, self.uow) if message else None

    async def get_recent(self, room_id: int, limit: int = 100) -> list[UoWModel]:
        stmt = _with_details(
            select(models.Message)
            .filter(models.Message.room_id == room_id)
            .order_by(models.Message.timestamp.desc(), models.Message.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        messages = list(result.scalars().all())
        messages.reverse()
        return [UoWModel(message, self.uow) for message in messages]

    async def create_message(
        self, message: schemas.MessageCreate, user_id: int
    ) -> UoWModel:
        db_message = models.Message(
            room_id=message.room_id,
            user_id=user_id,
            text=message.text,
            timestamp=utcnow(),
            parent_message_id=message.parent_message_id,
            is_edited=False,
        )
        self.uow.register_new(db_message)
        await self.uow.commit()

        # Reload with proper eager loading for return
        return await self.get_message(db_message.id)

    async def update_text(self, message: UoWModel, text: str) -> UoWModel:
        message.text = text
        message.is_edited = True
        await self.uow.commit()
        return await self.get_message(message.id)

    async def delete_message(self, message: UoWModel) -> None:
        message_id = message.id
        self.uow.register_deleted(message)
        await self.uow.commit()
        # reactions that were never loaded are not covered by the ORM cascade
        await self.session.execute(
            delete(models.Reaction)
            .where(models.Reaction.message_id == message_id)
            .execution_options(synchronize_session=False)
        )
        # replies keep their text but lose the preview
        await self.session.execute(
            update(models.Message)
            .where(models.Message.parent_message_id == message_id)
            .values(parent_message_id=None)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(
            update(models.Participant)
            .where(models.Participant.last_seen_message_id == message_id)
            .values(last_seen_message_id=None)
            .execution_options(synchronize_session=False)
        )

    async def toggle_reaction(self, message_id: int, user_id: int, emoji: str) -> bool:
        stmt = select(models.Reaction).filter(
            models.Reaction.message_id == message_id,
            models.Reaction.user_id == user_id,
            models.Reaction.emoji == emoji,
        )
        result = await self.session.execute(stmt)
        existing = result.scalar_one_or_none()
        if existing:
            self.uow.register_deleted(existing)
            added = False
        else:
            self.uow.register_new(
                models.Reaction(message_id=message_id, user_id=user_id, emoji=emoji)
            )
            added = True
        await self.uow.commit()
        return added

    async def get_expired_ids(self, cutoff: datetime, limit: int) -> list[int]:
        stmt = (
            select(models.Message.id)
            .filter(models.Message.timestamp < cutoff)
            .order_by(models.Message.timestamp, models.Message.id)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete_by_id(self, message_id: int) -> bool:
        stmt = select(models.Message).filter(models.Message.id == message_id)
        result = await self.session.execute(stmt)
        message = result.scalar_one_or_none()
        if not message:
            return False
        await self.delete_message(UoWModel(message, self.uow))
        return True
