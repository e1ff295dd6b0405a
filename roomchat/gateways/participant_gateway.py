# roomchat/gateways/participant_gateway.py
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from roomchat.domain.entities import utcnow
from roomchat.gateways.interfaces import IParticipantGateway
from roomchat.infrastructure import models
from roomchat.infrastructure.data_mappers import ParticipantMapper
from roomchat.infrastructure.uow import UnitOfWork, UoWModel


class ParticipantGateway(IParticipantGateway):
    def __init__(self, session: AsyncSession, uow: UnitOfWork):
        self.session = session
        self.uow = uow
        uow.mappers[models.Participant] = ParticipantMapper(session)

    async def get_participant(self, room_id: int, user_id: int) -> Optional[UoWModel]:
        stmt = select(models.Participant).filter(
            models.Participant.room_id == room_id,
            models.Participant.user_id == user_id,
        )
        result = await self.session.execute(stmt)
        participant = result.scalar_one_or_none()
        return UoWModel(participant, self.uow) if participant else None

    async def get_active(self, room_id: int) -> List[UoWModel]:
        stmt = (
            select(models.Participant)
            .filter(
                models.Participant.room_id == room_id,
                models.Participant.is_active.is_(True),
            )
            .order_by(models.Participant.joined_at, models.Participant.id)
        )
        result = await self.session.execute(stmt)
        participants = result.scalars().all()
        return [UoWModel(participant, self.uow) for participant in participants]

    async def _reactivate(self, participant: UoWModel) -> UoWModel:
        participant.is_active = True
        participant.joined_at = utcnow()
        await self.uow.commit()
        return participant

    async def join(self, room_id: int, user_id: int) -> UoWModel:
        existing = await self.get_participant(room_id, user_id)
        if existing:
            return await self._reactivate(existing)

        db_participant = models.Participant(
            room_id=room_id,
            user_id=user_id,
            joined_at=utcnow(),
            is_active=True,
        )
        uow_participant = self.uow.register_new(db_participant)
        try:
            async with self.session.begin_nested():
                await self.uow.commit()
        except IntegrityError:
            # a concurrent join inserted the row first; the unique index won
            self.uow.rollback()
            existing = await self.get_participant(room_id, user_id)
            if existing is None:
                raise
            return await self._reactivate(existing)
        await self.session.refresh(db_participant, attribute_names=["user"])
        return uow_participant

    async def deactivate(self, participant: UoWModel) -> UoWModel:
        participant.is_active = False
        await self.uow.commit()
        return participant

    async def set_last_seen(self, participant: UoWModel, message_id: int) -> UoWModel:
        participant.last_seen_message_id = message_id
        await self.uow.commit()
        return participant
