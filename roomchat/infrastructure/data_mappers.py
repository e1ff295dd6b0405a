# roomchat/infrastructure/data_mappers.py

from typing import Generic, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from roomchat.infrastructure import models

ModelT = TypeVar("ModelT")


class SessionMapper(Generic[ModelT]):
    """Writes models through the request session; flushes so ids are assigned."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def insert(self, model: ModelT):
        self.session.add(model)
        await self.session.flush()

    async def delete(self, model: ModelT):
        await self.session.delete(model)
        await self.session.flush()

    async def update(self, model: ModelT):
        await self.session.merge(model)
        await self.session.flush()


class UserMapper(SessionMapper[models.User]):
    pass


class RoomMapper(SessionMapper[models.Room]):
    pass


class ParticipantMapper(SessionMapper[models.Participant]):
    pass


class MessageMapper(SessionMapper[models.Message]):
    pass


class ReactionMapper(SessionMapper[models.Reaction]):
    pass


class TokenMapper(SessionMapper[models.Token]):
    pass


class OneTimeCodeMapper(SessionMapper[models.OneTimeCode]):
    pass
