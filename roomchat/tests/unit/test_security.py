# roomchat/tests/unit/test_security.py
import datetime

import jwt
import pytest

from roomchat.config import AppConfig
from roomchat.infrastructure.security import SecurityService


@pytest.fixture
def security_service():
    config = AppConfig(
        SECRET_KEY="test_secret",
        ALGORITHM="HS256",
        REFRESH_SECRET_KEY="test_refresh_secret",
        REDIS_HOST="localhost",
        REDIS_PORT=6379,
    )
    return SecurityService(config)


def test_one_time_code_format(security_service):
    code = security_service.generate_one_time_code()
    assert len(code) == 6
    assert code.isdigit()


def test_code_hashing(security_service):
    code = "123456"
    hashed = security_service.hash_code(code)
    assert hashed != code
    assert security_service.verify_code(code, hashed)
    assert not security_service.verify_code("654321", hashed)


def test_guest_tokens_are_unique(security_service):
    assert security_service.generate_guest_token() != security_service.generate_guest_token()


def test_token_creation(security_service):
    data = {"sub": "1"}
    access_token, access_expire = security_service.create_access_token(data)
    refresh_token, refresh_expire = security_service.create_refresh_token(data)
    assert access_token
    assert refresh_token
    assert refresh_expire > access_expire


def test_token_decoding(security_service):
    data = {"sub": "42"}
    access_token, _ = security_service.create_access_token(data)
    refresh_token, _ = security_service.create_refresh_token(data)

    assert security_service.decode_access_token(access_token) == 42
    assert security_service.decode_refresh_token(refresh_token) == 42


def test_tokens_are_not_interchangeable(security_service):
    access_token, _ = security_service.create_access_token({"sub": "1"})
    refresh_token, _ = security_service.create_refresh_token({"sub": "1"})

    assert security_service.decode_refresh_token(access_token) is None
    assert security_service.decode_access_token(refresh_token) is None


def test_expired_token(security_service):
    token, _ = security_service.create_access_token(
        {"sub": "1"}, expires_delta=datetime.timedelta(seconds=-1)
    )
    assert security_service.decode_access_token(token) is None


def test_token_with_bad_subject(security_service):
    token = jwt.encode({"sub": "alice"}, "test_secret", algorithm="HS256")
    assert security_service.decode_access_token(token) is None
    assert security_service.decode_access_token("not-a-jwt") is None
