# roomchat/tests/unit/test_auth_interactor.py
import logging
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from roomchat.config import AppConfig
from roomchat.domain.exceptions import UnauthorizedError
from roomchat.gateways.interfaces import IOneTimeCodeGateway, IUserGateway
from roomchat.infrastructure import models
from roomchat.infrastructure.security import SecurityService
from roomchat.infrastructure.uow import UnitOfWork, UoWModel
from roomchat.interactors.auth_interactor import AuthInteractor

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
def security_service(config):
    return SecurityService(config)


@pytest.fixture
def mock_user_gateway():
    return AsyncMock(spec=IUserGateway)


@pytest.fixture
def mock_otp_gateway():
    return AsyncMock(spec=IOneTimeCodeGateway)


@pytest.fixture
def mock_mailer():
    return AsyncMock()


@pytest.fixture
def auth_interactor(config, security_service, mock_user_gateway, mock_otp_gateway, mock_mailer):
    return AuthInteractor(
        config,
        security_service,
        mock_user_gateway,
        mock_otp_gateway,
        mock_mailer,
        logging.getLogger("test_auth"),
    )


def stored_code(security_service, code="123456", expires_at=NOW + timedelta(minutes=5)):
    return UoWModel(
        models.OneTimeCode(
            id=1,
            email="user@example.com",
            code_hash=security_service.hash_code(code),
            expires_at=expires_at,
        ),
        UnitOfWork(),
    )


def make_user(**overrides):
    values = dict(id=1, email="user@example.com", is_premium=False, is_guest=False, created_at=NOW)
    values.update(overrides)
    return UoWModel(models.User(**values), UnitOfWork())


@pytest.mark.asyncio
async def test_request_code_stores_hash_and_mails_code(
    auth_interactor, mock_otp_gateway, mock_mailer, security_service
):
    await auth_interactor.request_code("user@example.com", now=NOW)

    email, code_hash, expires_at = mock_otp_gateway.replace_code.call_args[0]
    _, code, minutes = mock_mailer.send_verification_code.call_args[0]
    assert email == "user@example.com"
    assert expires_at == NOW + timedelta(minutes=15)
    assert minutes == 15
    assert code_hash != code
    assert security_service.verify_code(code, code_hash)


@pytest.mark.asyncio
async def test_verify_expired_code(auth_interactor, mock_otp_gateway, security_service):
    mock_otp_gateway.get_by_email.return_value = stored_code(
        security_service, expires_at=NOW - timedelta(seconds=1)
    )

    with pytest.raises(UnauthorizedError):
        await auth_interactor.verify_code("user@example.com", "123456", now=NOW)
    mock_otp_gateway.consume.assert_not_awaited()


@pytest.mark.asyncio
async def test_verify_creates_user(
    auth_interactor, mock_otp_gateway, mock_user_gateway, security_service
):
    code = stored_code(security_service)
    mock_otp_gateway.get_by_email.return_value = code
    mock_user_gateway.get_by_email.return_value = None
    mock_user_gateway.create_user.return_value = make_user(email_verified_at=NOW)

    user = await auth_interactor.verify_code("user@example.com", "123456", now=NOW)

    assert user.email == "user@example.com"
    mock_otp_gateway.consume.assert_awaited_once_with(code)
    mock_user_gateway.create_user.assert_awaited_once_with(
        email="user@example.com", email_verified_at=NOW
    )


@pytest.mark.asyncio
async def test_verify_marks_existing_email_verified(
    auth_interactor, mock_otp_gateway, mock_user_gateway, security_service
):
    existing = make_user(email_verified_at=None)
    mock_otp_gateway.get_by_email.return_value = stored_code(security_service)
    mock_user_gateway.get_by_email.return_value = existing
    mock_user_gateway.mark_email_verified.return_value = make_user(email_verified_at=NOW)

    user = await auth_interactor.verify_code("user@example.com", "123456", now=NOW)

    assert user.email_verified_at == NOW
    mock_user_gateway.mark_email_verified.assert_awaited_once_with(existing, NOW)
    mock_user_gateway.create_user.assert_not_awaited()


@pytest.mark.asyncio
async def test_sign_in_guest(auth_interactor, mock_user_gateway):
    mock_user_gateway.create_user.return_value = make_user(
        email=None, is_guest=True, display_name="Visitor"
    )

    user = await auth_interactor.sign_in_guest("Visitor")

    assert user.is_guest is True
    kwargs = mock_user_gateway.create_user.call_args.kwargs
    assert kwargs["is_guest"] is True
    assert kwargs["guest_token"]


@pytest.mark.asyncio
async def test_verify_wrong_code_counts_failure(
    auth_interactor, mock_otp_gateway, mock_user_gateway, security_service, config
):
    code = stored_code(security_service)
    mock_otp_gateway.get_by_email.return_value = code
    mock_otp_gateway.record_failure.return_value = False

    with pytest.raises(UnauthorizedError):
        await auth_interactor.verify_code("user@example.com", "654321", now=NOW)

    mock_otp_gateway.record_failure.assert_awaited_once_with(code, config.OTP_MAX_ATTEMPTS)
    mock_otp_gateway.consume.assert_not_awaited()
    mock_user_gateway.get_by_email.assert_not_awaited()
