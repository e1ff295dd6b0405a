# roomchat/api/dependencies.py
import logging
from typing import AsyncGenerator

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from roomchat.config import AppConfig
from roomchat.domain.exceptions import UnauthorizedError
from roomchat.gateways.message_gateway import MessageGateway
from roomchat.gateways.otp_gateway import OneTimeCodeGateway
from roomchat.gateways.participant_gateway import ParticipantGateway
from roomchat.gateways.room_gateway import RoomGateway
from roomchat.gateways.token_gateway import TokenGateway
from roomchat.gateways.user_gateway import UserGateway
from roomchat.infrastructure import schemas
from roomchat.infrastructure.event_dispatcher import PendingEvents
from roomchat.infrastructure.mailer import EmailClient
from roomchat.infrastructure.security import SecurityService
from roomchat.infrastructure.uow import UnitOfWork
from roomchat.interactors.auth_interactor import AuthInteractor
from roomchat.interactors.message_interactor import MessageInteractor
from roomchat.interactors.participant_interactor import ParticipantInteractor
from roomchat.interactors.room_interactor import RoomInteractor
from roomchat.interactors.token_interactor import TokenInteractor
from roomchat.interactors.user_interactor import UserInteractor

# auto_error is off so anonymous callers reach the public reads
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/otp/verify", auto_error=False)


def get_config(request: Request) -> AppConfig:
    return request.app.state.config


def get_logger(request: Request) -> logging.Logger:
    return request.app.state.logger


def get_security_service(request: Request) -> SecurityService:
    return request.app.state.security_service


async def get_event_dispatcher(
    request: Request,
) -> AsyncGenerator[PendingEvents, None]:
    pending = PendingEvents(request.app.state.event_dispatcher)
    yield pending
    # get_session depends on this, so its commit has already happened here
    await pending.flush()


def get_mailer(request: Request) -> EmailClient:
    return request.app.state.mailer


async def get_session(
    request: Request, _events: PendingEvents = Depends(get_event_dispatcher)
) -> AsyncGenerator[AsyncSession, None]:
    async with request.app.state.database.session() as session:
        try:
            yield session
            await session.commit()  # Commit the transaction
        except Exception:
            await session.rollback()  # Rollback in case of error
            raise


async def get_uow() -> UnitOfWork:
    return UnitOfWork()


async def get_user_gateway(
    session: AsyncSession = Depends(get_session), uow: UnitOfWork = Depends(get_uow)
):
    return UserGateway(session, uow)


async def get_room_gateway(
    session: AsyncSession = Depends(get_session), uow: UnitOfWork = Depends(get_uow)
):
    return RoomGateway(session, uow)


async def get_participant_gateway(
    session: AsyncSession = Depends(get_session), uow: UnitOfWork = Depends(get_uow)
):
    return ParticipantGateway(session, uow)


async def get_message_gateway(
    session: AsyncSession = Depends(get_session), uow: UnitOfWork = Depends(get_uow)
):
    return MessageGateway(session, uow)


async def get_token_gateway(
    session: AsyncSession = Depends(get_session), uow: UnitOfWork = Depends(get_uow)
):
    return TokenGateway(session, uow)


async def get_otp_gateway(
    session: AsyncSession = Depends(get_session), uow: UnitOfWork = Depends(get_uow)
):
    return OneTimeCodeGateway(session, uow)


async def get_user_interactor(
    config: AppConfig = Depends(get_config),
    user_gateway: UserGateway = Depends(get_user_gateway),
):
    return UserInteractor(config, user_gateway)


async def get_room_interactor(
    config: AppConfig = Depends(get_config),
    room_gateway: RoomGateway = Depends(get_room_gateway),
    participant_gateway: ParticipantGateway = Depends(get_participant_gateway),
):
    return RoomInteractor(config, room_gateway, participant_gateway)


async def get_participant_interactor(
    room_gateway: RoomGateway = Depends(get_room_gateway),
    participant_gateway: ParticipantGateway = Depends(get_participant_gateway),
    message_gateway: MessageGateway = Depends(get_message_gateway),
):
    return ParticipantInteractor(room_gateway, participant_gateway, message_gateway)


async def get_message_interactor(
    config: AppConfig = Depends(get_config),
    room_gateway: RoomGateway = Depends(get_room_gateway),
    message_gateway: MessageGateway = Depends(get_message_gateway),
):
    return MessageInteractor(config, room_gateway, message_gateway)


async def get_token_interactor(
    config: AppConfig = Depends(get_config),
    security_service: SecurityService = Depends(get_security_service),
    token_gateway: TokenGateway = Depends(get_token_gateway),
):
    return TokenInteractor(config, security_service, token_gateway)


async def get_auth_interactor(
    config: AppConfig = Depends(get_config),
    security_service: SecurityService = Depends(get_security_service),
    user_gateway: UserGateway = Depends(get_user_gateway),
    otp_gateway: OneTimeCodeGateway = Depends(get_otp_gateway),
    mailer: EmailClient = Depends(get_mailer),
    logger: logging.Logger = Depends(get_logger),
):
    return AuthInteractor(
        config, security_service, user_gateway, otp_gateway, mailer, logger
    )


async def get_optional_user(
    token: str | None = Depends(oauth2_scheme),
    token_interactor: TokenInteractor = Depends(get_token_interactor),
    user_interactor: UserInteractor = Depends(get_user_interactor),
) -> schemas.User | None:
    if not token:
        return None
    user_id = await token_interactor.resolve_user_id(token)
    if user_id is None:
        return None
    return await user_interactor.get_user(user_id)


async def get_current_user(
    current_user: schemas.User | None = Depends(get_optional_user),
) -> schemas.User:
    if current_user is None:
        raise UnauthorizedError("Could not validate credentials")
    return current_user


async def get_bearer_token(token: str | None = Depends(oauth2_scheme)) -> str:
    if not token:
        raise UnauthorizedError("Not authenticated")
    return token
