# roomchat/interactors/room_interactor.py
from typing import List

from roomchat.config import AppConfig
from roomchat.domain.entities import RoomType, is_admin
from roomchat.domain.exceptions import (
    DomainValidationError,
    ForbiddenError,
    NotFoundError,
)
from roomchat.gateways.interfaces import IParticipantGateway, IRoomGateway
from roomchat.infrastructure import schemas
from roomchat.infrastructure.uow import UoWModel


class RoomInteractor:
    def __init__(
        self,
        config: AppConfig,
        room_gateway: IRoomGateway,
        participant_gateway: IParticipantGateway,
    ):
        self.config = config
        self.room_gateway = room_gateway
        self.participant_gateway = participant_gateway

    def capacity_for(self, room_type: RoomType) -> int:
        if room_type == RoomType.PREMIUM:
            return self.config.PREMIUM_ROOM_CAPACITY
        return self.config.FREE_ROOM_CAPACITY

    async def _to_views(self, rooms: List[UoWModel]) -> List[schemas.Room]:
        counts = await self.room_gateway.count_active_participants(
            [room.id for room in rooms]
        )
        return [
            schemas.Room.model_validate(room).model_copy(
                update={"participant_count": counts.get(room.id, 0)}
            )
            for room in rooms
        ]

    async def _require_room(self, room_id: int) -> UoWModel:
        room = await self.room_gateway.get_room(room_id)
        if not room:
            raise NotFoundError("Room not found")
        return room

    def _require_owner_or_admin(self, room: UoWModel, caller: schemas.User) -> None:
        if room.owner_id != caller.id and not is_admin(caller):
            raise ForbiddenError("Only admins or room owners can manage this room")

    async def create_room(
        self, room: schemas.RoomCreate, owner: schemas.User
    ) -> schemas.Room:
        title = room.title.strip()
        if not title:
            raise DomainValidationError("Room title is required")
        new_room = await self.room_gateway.create_room(
            title, room.type.value, owner.id, self.capacity_for(room.type)
        )
        (view,) = await self._to_views([new_room])
        return view

    async def get_room(self, room_id: int) -> schemas.Room:
        room = await self._require_room(room_id)
        (view,) = await self._to_views([room])
        return view

    async def list_active_rooms(self) -> List[schemas.Room]:
        rooms = await self.room_gateway.get_all(active_only=True)
        return await self._to_views(rooms)

    async def list_all_rooms(self, caller: schemas.User) -> List[schemas.Room]:
        if not is_admin(caller):
            raise ForbiddenError("Admin access required")
        rooms = await self.room_gateway.get_all(active_only=False)
        return await self._to_views(rooms)

    async def toggle_room_status(
        self, room_id: int, caller: schemas.User
    ) -> schemas.Room:
        room = await self._require_room(room_id)
        self._require_owner_or_admin(room, caller)
        room = await self.room_gateway.set_active(room, not room.is_active)
        (view,) = await self._to_views([room])
        return view

    async def delete_room(self, room_id: int, caller: schemas.User) -> None:
        room = await self._require_room(room_id)
        self._require_owner_or_admin(room, caller)
        await self.room_gateway.delete_room(room)

    async def join_room(self, room_id: int, caller: schemas.User) -> schemas.Participant:
        room = await self.room_gateway.get_room(room_id)
        if not room or not room.is_active:
            raise NotFoundError("Room not found or inactive")

        existing = await self.participant_gateway.get_participant(room_id, caller.id)
        if not (existing and existing.is_active):
            counts = await self.room_gateway.count_active_participants([room_id])
            if counts.get(room_id, 0) >= room.max_participants:
                raise ForbiddenError("Room is full")

        participant = await self.participant_gateway.join(room_id, caller.id)
        return schemas.Participant.model_validate(participant)

    async def leave_room(
        self, room_id: int, caller: schemas.User
    ) -> schemas.Participant | None:
        participant = await self.participant_gateway.get_participant(room_id, caller.id)
        if not participant:
            return None
        participant = await self.participant_gateway.deactivate(participant)
        return schemas.Participant.model_validate(participant)

    async def participant_count(self, room_id: int) -> int:
        counts = await self.room_gateway.count_active_participants([room_id])
        return counts.get(room_id, 0)
