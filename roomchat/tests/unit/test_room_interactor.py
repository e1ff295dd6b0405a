# roomchat/tests/unit/test_room_interactor.py
from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from roomchat.config import AppConfig
from roomchat.domain.entities import Role, RoomType
from roomchat.domain.exceptions import (
    DomainValidationError,
    ForbiddenError,
    NotFoundError,
)
from roomchat.gateways.interfaces import IParticipantGateway, IRoomGateway
from roomchat.infrastructure import models, schemas
from roomchat.infrastructure.uow import UnitOfWork, UoWModel
from roomchat.interactors.room_interactor import RoomInteractor

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def config():
    return AppConfig(
        SECRET_KEY="test_secret",
        REFRESH_SECRET_KEY="test_refresh_secret",
        REDIS_HOST="localhost",
        REDIS_PORT=6379,
    )


@pytest.fixture
def mock_room_gateway():
    return AsyncMock(spec=IRoomGateway)


@pytest.fixture
def mock_participant_gateway():
    return AsyncMock(spec=IParticipantGateway)


@pytest.fixture
def room_interactor(config, mock_room_gateway, mock_participant_gateway):
    return RoomInteractor(config, mock_room_gateway, mock_participant_gateway)


def make_room(**overrides):
    values = dict(
        id=1,
        title="Room",
        type="free",
        owner_id=1,
        is_active=True,
        max_participants=2,
        created_at=NOW,
    )
    values.update(overrides)
    return UoWModel(models.Room(**values), UnitOfWork())


def make_participant(is_active=True, user_id=5):
    return UoWModel(
        models.Participant(
            id=10, room_id=1, user_id=user_id, joined_at=NOW, is_active=is_active
        ),
        UnitOfWork(),
    )


def make_caller(user_id=5, role=None):
    return schemas.User(id=user_id, role=role, created_at=NOW)


def test_capacity_for(room_interactor):
    assert room_interactor.capacity_for(RoomType.FREE) == 10
    assert room_interactor.capacity_for(RoomType.PREMIUM) == 100


@pytest.mark.asyncio
async def test_create_room_uses_capacity(room_interactor, mock_room_gateway):
    mock_room_gateway.create_room.return_value = make_room(type="premium", max_participants=100)
    mock_room_gateway.count_active_participants.return_value = {1: 0}

    view = await room_interactor.create_room(
        schemas.RoomCreate(title="  Town hall ", type=RoomType.PREMIUM), make_caller(1)
    )

    mock_room_gateway.create_room.assert_awaited_once_with("Town hall", "premium", 1, 100)
    assert view.participant_count == 0


@pytest.mark.asyncio
async def test_create_room_blank_title(room_interactor, mock_room_gateway):
    with pytest.raises(DomainValidationError):
        await room_interactor.create_room(schemas.RoomCreate(title=" "), make_caller(1))
    mock_room_gateway.create_room.assert_not_awaited()


@pytest.mark.asyncio
async def test_get_room_counts_participants(room_interactor, mock_room_gateway):
    mock_room_gateway.get_room.return_value = make_room()
    mock_room_gateway.count_active_participants.return_value = {1: 1}

    view = await room_interactor.get_room(1)

    assert view.participant_count == 1


@pytest.mark.asyncio
async def test_get_missing_room(room_interactor, mock_room_gateway):
    mock_room_gateway.get_room.return_value = None

    with pytest.raises(NotFoundError):
        await room_interactor.get_room(1)


@pytest.mark.asyncio
async def test_join_full_room(room_interactor, mock_room_gateway, mock_participant_gateway):
    mock_room_gateway.get_room.return_value = make_room(max_participants=2)
    mock_participant_gateway.get_participant.return_value = None
    mock_room_gateway.count_active_participants.return_value = {1: 2}

    with pytest.raises(ForbiddenError, match="Room is full"):
        await room_interactor.join_room(1, make_caller())
    mock_participant_gateway.join.assert_not_awaited()


@pytest.mark.asyncio
async def test_active_participant_rejoins_full_room(
    room_interactor, mock_room_gateway, mock_participant_gateway
):
    participant = make_participant()
    mock_room_gateway.get_room.return_value = make_room(max_participants=2)
    mock_participant_gateway.get_participant.return_value = participant
    mock_participant_gateway.join.return_value = participant

    result = await room_interactor.join_room(1, make_caller())

    assert result.is_active is True
    mock_room_gateway.count_active_participants.assert_not_awaited()


@pytest.mark.asyncio
async def test_join_inactive_room(room_interactor, mock_room_gateway):
    mock_room_gateway.get_room.return_value = make_room(is_active=False)

    with pytest.raises(NotFoundError):
        await room_interactor.join_room(1, make_caller())


@pytest.mark.asyncio
async def test_leave_without_row(room_interactor, mock_participant_gateway):
    mock_participant_gateway.get_participant.return_value = None

    assert await room_interactor.leave_room(1, make_caller()) is None
    mock_participant_gateway.deactivate.assert_not_awaited()


@pytest.mark.asyncio
async def test_toggle_requires_owner_or_admin(room_interactor, mock_room_gateway):
    mock_room_gateway.get_room.return_value = make_room(owner_id=1)

    with pytest.raises(ForbiddenError):
        await room_interactor.toggle_room_status(1, make_caller(user_id=2))
    mock_room_gateway.set_active.assert_not_awaited()


@pytest.mark.asyncio
async def test_admin_toggles_any_room(room_interactor, mock_room_gateway):
    room = make_room(owner_id=1)
    mock_room_gateway.get_room.return_value = room
    mock_room_gateway.set_active.return_value = make_room(owner_id=1, is_active=False)
    mock_room_gateway.count_active_participants.return_value = {1: 0}

    view = await room_interactor.toggle_room_status(1, make_caller(user_id=2, role=Role.ADMIN))

    mock_room_gateway.set_active.assert_awaited_once_with(room, False)
    assert view.is_active is False


@pytest.mark.asyncio
async def test_list_all_rooms_requires_admin(room_interactor, mock_room_gateway):
    with pytest.raises(ForbiddenError):
        await room_interactor.list_all_rooms(make_caller())
    mock_room_gateway.get_all.assert_not_awaited()


@pytest.mark.asyncio
async def test_delete_room_by_owner(room_interactor, mock_room_gateway):
    room = make_room(owner_id=5)
    mock_room_gateway.get_room.return_value = room

    await room_interactor.delete_room(1, make_caller(user_id=5))

    mock_room_gateway.delete_room.assert_awaited_once_with(room)
