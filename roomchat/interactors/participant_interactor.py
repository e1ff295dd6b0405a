# roomchat/interactors/participant_interactor.py
from typing import List

from roomchat.domain.exceptions import NotFoundError
from roomchat.gateways.interfaces import (
    IMessageGateway,
    IParticipantGateway,
    IRoomGateway,
)
from roomchat.infrastructure import schemas


class ParticipantInteractor:
    def __init__(
        self,
        room_gateway: IRoomGateway,
        participant_gateway: IParticipantGateway,
        message_gateway: IMessageGateway,
    ):
        self.room_gateway = room_gateway
        self.participant_gateway = participant_gateway
        self.message_gateway = message_gateway

    async def get_room_participants(self, room_id: int) -> List[schemas.Participant]:
        if not await self.room_gateway.get_room(room_id):
            raise NotFoundError("Room not found")
        participants = await self.participant_gateway.get_active(room_id)
        return [schemas.Participant.model_validate(p) for p in participants]

    async def mark_as_seen(
        self, room_id: int, message_id: int, caller: schemas.User
    ) -> schemas.Participant:
        participant = await self.participant_gateway.get_participant(room_id, caller.id)
        if not participant:
            raise NotFoundError("You are not a participant of this room")
        message = await self.message_gateway.get_message(message_id)
        if not message or message.room_id != room_id:
            raise NotFoundError("Message not found")
        participant = await self.participant_gateway.set_last_seen(
            participant, message_id
        )
        return schemas.Participant.model_validate(participant)
