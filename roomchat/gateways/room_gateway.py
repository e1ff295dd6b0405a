# roomchat/gateways/room_gateway.py
from typing import Dict, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from roomchat.gateways.interfaces import IRoomGateway
from roomchat.infrastructure import models
from roomchat.infrastructure.data_mappers import RoomMapper
from roomchat.infrastructure.uow import UnitOfWork, UoWModel


class RoomGateway(IRoomGateway):
    def __init__(self, session: AsyncSession, uow: UnitOfWork):
        self.session = session
        self.uow = uow
        uow.mappers[models.Room] = RoomMapper(session)

    async def get_room(self, room_id: int) -> Optional[UoWModel]:
        stmt = select(models.Room).filter(models.Room.id == room_id)
        result = await self.session.execute(stmt)
        room = result.scalar_one_or_none()
        return UoWModel(room, self.uow) if room else None

    async def get_all(self, active_only: bool = True) -> List[UoWModel]:
        stmt = select(models.Room)
        if active_only:
            stmt = stmt.filter(models.Room.is_active.is_(True))
        stmt = stmt.order_by(models.Room.created_at.desc(), models.Room.id.desc())
        result = await self.session.execute(stmt)
        rooms = result.scalars().all()
        return [UoWModel(room, self.uow) for room in rooms]

    async def create_room(
        self, title: str, room_type: str, owner_id: int, max_participants: int
    ) -> UoWModel:
        db_room = models.Room(
            title=title,
            type=room_type,
            owner_id=owner_id,
            is_active=True,
            max_participants=max_participants,
        )
        uow_room = self.uow.register_new(db_room)
        await self.uow.commit()
        # load the owner for the response
        await self.session.refresh(db_room, attribute_names=["owner"])
        return uow_room

    async def count_active_participants(self, room_ids: List[int]) -> Dict[int, int]:
        if not room_ids:
            return {}
        stmt = (
            select(
                models.Participant.room_id,
                func.count(models.Participant.id).label("participant_count"),
            )
            .filter(
                models.Participant.room_id.in_(room_ids),
                models.Participant.is_active.is_(True),
            )
            .group_by(models.Participant.room_id)
        )
        result = await self.session.execute(stmt)
        counts = {row.room_id: row.participant_count for row in result}
        return {room_id: counts.get(room_id, 0) for room_id in room_ids}

    async def set_active(self, room: UoWModel, is_active: bool) -> UoWModel:
        room.is_active = is_active
        await self.uow.commit()
        return room

    async def delete_room(self, room: UoWModel) -> None:
        """Remove the room with its reactions, messages and participants.

        Everything runs on the request session, so the caller's transaction
        either commits all of it or rolls all of it back.
        """
        room_id = room.id
        message_ids = select(models.Message.id).filter(
            models.Message.room_id == room_id
        )
        await self.session.execute(
            delete(models.Reaction)
            .where(models.Reaction.message_id.in_(message_ids))
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(
            delete(models.Participant)
            .where(models.Participant.room_id == room_id)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(
            delete(models.Message)
            .where(models.Message.room_id == room_id)
            .execution_options(synchronize_session=False)
        )
        self.uow.register_deleted(room)
        await self.uow.commit()
