# roomchat/api/rooms.py
from fastapi import APIRouter, Depends

from roomchat.api.dependencies import (
    get_current_user,
    get_event_dispatcher,
    get_participant_interactor,
    get_room_interactor,
)
from roomchat.domain.events import (
    MessageSeen,
    ParticipantJoined,
    ParticipantLeft,
    RoomDeleted,
    RoomStatusChanged,
)
from roomchat.infrastructure import schemas
from roomchat.infrastructure.event_dispatcher import PendingEvents
from roomchat.interactors.participant_interactor import ParticipantInteractor
from roomchat.interactors.room_interactor import RoomInteractor

router = APIRouter()


@router.post("/", response_model=schemas.Room)
async def create_room(
    room: schemas.RoomCreate,
    room_interactor: RoomInteractor = Depends(get_room_interactor),
    current_user: schemas.User = Depends(get_current_user),
):
    return await room_interactor.create_room(room, current_user)


@router.get("/", response_model=list[schemas.Room])
async def list_active_rooms(
    room_interactor: RoomInteractor = Depends(get_room_interactor),
):
    return await room_interactor.list_active_rooms()


@router.get("/all", response_model=list[schemas.Room])
async def list_all_rooms(
    room_interactor: RoomInteractor = Depends(get_room_interactor),
    current_user: schemas.User = Depends(get_current_user),
):
    return await room_interactor.list_all_rooms(current_user)


@router.get("/{room_id}", response_model=schemas.Room)
async def read_room(
    room_id: int,
    room_interactor: RoomInteractor = Depends(get_room_interactor),
):
    return await room_interactor.get_room(room_id)


@router.post("/{room_id}/join", response_model=schemas.Participant)
async def join_room(
    room_id: int,
    room_interactor: RoomInteractor = Depends(get_room_interactor),
    current_user: schemas.User = Depends(get_current_user),
    event_dispatcher: PendingEvents = Depends(get_event_dispatcher),
):
    participant = await room_interactor.join_room(room_id, current_user)
    await event_dispatcher.dispatch(
        ParticipantJoined(
            room_id=room_id,
            user_id=current_user.id,
            participant_count=await room_interactor.participant_count(room_id),
        )
    )
    return participant


@router.post("/{room_id}/leave", response_model=schemas.Participant | None)
async def leave_room(
    room_id: int,
    room_interactor: RoomInteractor = Depends(get_room_interactor),
    current_user: schemas.User = Depends(get_current_user),
    event_dispatcher: PendingEvents = Depends(get_event_dispatcher),
):
    participant = await room_interactor.leave_room(room_id, current_user)
    if participant:
        await event_dispatcher.dispatch(
            ParticipantLeft(
                room_id=room_id,
                user_id=current_user.id,
                participant_count=await room_interactor.participant_count(room_id),
            )
        )
    return participant


@router.post("/{room_id}/toggle", response_model=schemas.Room)
async def toggle_room_status(
    room_id: int,
    room_interactor: RoomInteractor = Depends(get_room_interactor),
    current_user: schemas.User = Depends(get_current_user),
    event_dispatcher: PendingEvents = Depends(get_event_dispatcher),
):
    room = await room_interactor.toggle_room_status(room_id, current_user)
    await event_dispatcher.dispatch(
        RoomStatusChanged(room_id=room.id, is_active=room.is_active)
    )
    return room


@router.delete("/{room_id}", status_code=204)
async def delete_room(
    room_id: int,
    room_interactor: RoomInteractor = Depends(get_room_interactor),
    current_user: schemas.User = Depends(get_current_user),
    event_dispatcher: PendingEvents = Depends(get_event_dispatcher),
):
    await room_interactor.delete_room(room_id, current_user)
    await event_dispatcher.dispatch(
        RoomDeleted(room_id=room_id, deleted_by=current_user.id)
    )


@router.get("/{room_id}/participants", response_model=list[schemas.Participant])
async def read_room_participants(
    room_id: int,
    participant_interactor: ParticipantInteractor = Depends(get_participant_interactor),
):
    return await participant_interactor.get_room_participants(room_id)


@router.post("/{room_id}/seen", response_model=schemas.Participant)
async def mark_as_seen(
    room_id: int,
    seen: schemas.SeenUpdate,
    participant_interactor: ParticipantInteractor = Depends(get_participant_interactor),
    current_user: schemas.User = Depends(get_current_user),
    event_dispatcher: PendingEvents = Depends(get_event_dispatcher),
):
    participant = await participant_interactor.mark_as_seen(
        room_id, seen.message_id, current_user
    )
    await event_dispatcher.dispatch(
        MessageSeen(room_id=room_id, message_id=seen.message_id, user_id=current_user.id)
    )
    return participant
