# roomchat/api/messages.py
from fastapi import APIRouter, Depends

from roomchat.api.dependencies import (
    get_current_user,
    get_event_dispatcher,
    get_message_interactor,
)
from roomchat.domain.events import (
    MessageCreated,
    MessageDeleted,
    MessageEvent,
    MessageUpdated,
    ReactionToggled,
    UserInfo,
)
from roomchat.infrastructure import schemas
from roomchat.infrastructure.event_dispatcher import PendingEvents
from roomchat.interactors.message_interactor import MessageInteractor

router = APIRouter()


def message_event(
    event_type: type[MessageEvent], message: schemas.Message, author: schemas.User
) -> MessageEvent:
    return event_type(
        room_id=message.room_id,
        message_id=message.id,
        user_id=message.user_id,
        text=message.text,
        timestamp=message.timestamp,
        parent_message_id=message.parent_message_id,
        is_edited=message.is_edited,
        user=UserInfo(
            id=author.id, name=author.name, display_name=author.display_name
        ),
    )


@router.post("/", response_model=schemas.Message)
async def send_message(
    message: schemas.MessageCreate,
    message_interactor: MessageInteractor = Depends(get_message_interactor),
    current_user: schemas.User = Depends(get_current_user),
    event_dispatcher: PendingEvents = Depends(get_event_dispatcher),
):
    new_message = await message_interactor.send_message(message, current_user)
    await event_dispatcher.dispatch(
        message_event(MessageCreated, new_message, current_user)
    )
    return new_message


@router.get("/room/{room_id}", response_model=list[schemas.Message])
async def read_room_messages(
    room_id: int,
    message_interactor: MessageInteractor = Depends(get_message_interactor),
):
    return await message_interactor.get_room_messages(room_id)


@router.put("/{message_id}", response_model=schemas.Message)
async def edit_message(
    message_id: int,
    message_update: schemas.MessageUpdate,
    message_interactor: MessageInteractor = Depends(get_message_interactor),
    current_user: schemas.User = Depends(get_current_user),
    event_dispatcher: PendingEvents = Depends(get_event_dispatcher),
):
    updated_message = await message_interactor.edit_message(
        message_id, message_update, current_user
    )
    await event_dispatcher.dispatch(
        message_event(MessageUpdated, updated_message, current_user)
    )
    return updated_message


@router.delete("/{message_id}", status_code=204)
async def delete_message(
    message_id: int,
    message_interactor: MessageInteractor = Depends(get_message_interactor),
    current_user: schemas.User = Depends(get_current_user),
    event_dispatcher: PendingEvents = Depends(get_event_dispatcher),
):
    deleted_message = await message_interactor.delete_message(message_id, current_user)
    await event_dispatcher.dispatch(
        MessageDeleted(
            room_id=deleted_message.room_id,
            message_id=deleted_message.id,
            deleted_by=current_user.id,
        )
    )


@router.post("/{message_id}/reactions", response_model=schemas.Message)
async def toggle_reaction(
    message_id: int,
    reaction: schemas.ReactionToggle,
    message_interactor: MessageInteractor = Depends(get_message_interactor),
    current_user: schemas.User = Depends(get_current_user),
    event_dispatcher: PendingEvents = Depends(get_event_dispatcher),
):
    message, added = await message_interactor.toggle_reaction(
        message_id, reaction.emoji, current_user
    )
    await event_dispatcher.dispatch(
        ReactionToggled(
            room_id=message.room_id,
            message_id=message.id,
            user_id=current_user.id,
            emoji=reaction.emoji,
            added=added,
        )
    )
    return message
