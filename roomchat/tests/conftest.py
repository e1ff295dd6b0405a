# roomchat/tests/conftest.py

import random
import string

import pytest
from fakeredis import aioredis
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from roomchat.api import dependencies
from roomchat.config import AppConfig
from roomchat.domain.entities import Role, RoomType, utcnow
from roomchat.gateways.room_gateway import RoomGateway
from roomchat.gateways.token_gateway import TokenGateway
from roomchat.gateways.user_gateway import UserGateway
from roomchat.infrastructure.database import create_database
from roomchat.infrastructure.security import SecurityService
from roomchat.infrastructure.uow import UnitOfWork
from roomchat.interactors.token_interactor import TokenInteractor
from roomchat.main import Application


class RecordingMailer:
    """Stands in for the email API and keeps every code it was asked to send."""

    def __init__(self):
        self.sent = []

    async def send_verification_code(self, email, code, expires_minutes):
        self.sent.append(
            {"email": email, "code": code, "expires_minutes": expires_minutes}
        )

    def last_code(self, email):
        for entry in reversed(self.sent):
            if entry["email"] == email:
                return entry["code"]
        return None


def random_suffix(k=10):
    return "".join(random.choices(string.ascii_lowercase + string.digits, k=k))


@pytest.fixture(scope="function")
def app_config():
    """
    Provide a test configuration with an in-memory SQLite database.
    """
    return AppConfig(
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
        REDIS_HOST="localhost",
        REDIS_PORT=6379,
        SECRET_KEY="test_secret_key",
        REFRESH_SECRET_KEY="test_refresh_secret_key",
        PROJECT_NAME="Test RoomChat API",
        PROJECT_VERSION="1.0.0",
        PROJECT_DESCRIPTION="Test RoomChat API",
        API_V1_STR="/api/v1",
        ALGORITHM="HS256",
        ACCESS_TOKEN_EXPIRE_MINUTES=5,
        REFRESH_TOKEN_EXPIRE_DAYS=7,
        HOUSEKEEPING_ENABLED=False,
        ADMIN_SETUP_KEY="test_setup_key",
        EMAIL_API_KEY="test_email_key",
    )


@pytest.fixture(scope="function")
async def mock_redis():
    """Provide a fake Redis client for testing."""
    redis = aioredis.FakeRedis()
    yield redis
    await redis.flushall()
    await redis.aclose()


@pytest.fixture(scope="function")
async def engine(app_config):
    """Create a SQLAlchemy engine for testing with in-memory SQLite."""
    engine = create_async_engine(
        app_config.DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,  # Reuse the same connection
        echo=False,
    )
    async with engine.begin() as conn:
        from roomchat.infrastructure import models

        await conn.run_sync(models.Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture(scope="function")
async def db_session(engine):
    """Provide a SQLAlchemy session for testing."""
    async_session_factory = sessionmaker(
        bind=engine, class_=AsyncSession, expire_on_commit=False
    )
    session = async_session_factory()
    yield session
    await session.close()


@pytest.fixture(scope="function")
async def uow():
    """Provide a UnitOfWork instance for testing."""
    return UnitOfWork()


@pytest.fixture(scope="function")
def mailer():
    return RecordingMailer()


@pytest.fixture(scope="function")
def override_get_db(db_session):
    """Override the get_session dependency to use the test session."""

    async def _override_get_db():
        yield db_session

    return _override_get_db


@pytest.fixture(scope="function")
async def app(app_config, mock_redis, engine, mailer):
    """Create the FastAPI app with the test database."""
    database = create_database(engine)
    application = Application(config=app_config)
    application.database = database
    application.redis_client.client = mock_redis
    application.mailer = mailer

    app_instance = application.create_app()

    return app_instance


@pytest.fixture(scope="function")
async def app_with_db(app, override_get_db):
    """Override dependencies to use the test database session."""
    app.dependency_overrides[dependencies.get_session] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def client(app_with_db):
    """Provide an HTTP client with the test app."""
    async with AsyncClient(
        transport=ASGITransport(app=app_with_db), base_url="http://test"
    ) as ac:
        yield ac


@pytest.fixture(scope="function")
async def committing_client(app):
    """HTTP client whose requests run on their own sessions, as in production.

    Data prepared through db_session must be committed before it is visible.
    """
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture(scope="function")
def make_user(db_session):
    """Factory for verified users; pass role to create admins or members."""

    async def _make_user(display_name=None, role=None, email=None):
        user_gateway = UserGateway(db_session, UnitOfWork())
        user = await user_gateway.create_user(
            email=email or f"user_{random_suffix()}@example.com",
            display_name=display_name,
            email_verified_at=utcnow(),
        )
        if role is not None:
            user = await user_gateway.set_role(user, role)
        return user

    return _make_user


@pytest.fixture(scope="function")
async def test_user(make_user):
    return await make_user(display_name="Alice")


@pytest.fixture(scope="function")
async def test_user2(make_user):
    return await make_user(display_name="Bob")


@pytest.fixture(scope="function")
async def admin_user(make_user):
    return await make_user(display_name="Admin", role=Role.ADMIN)


@pytest.fixture(scope="function")
def make_auth_header(db_session, app_config):
    """Issue a stored token pair for a user and return the bearer header."""

    async def _make_auth_header(user):
        token_interactor = TokenInteractor(
            app_config,
            SecurityService(app_config),
            TokenGateway(db_session, UnitOfWork()),
        )
        tokens = await token_interactor.issue_tokens(user.id)
        return {"Authorization": f"Bearer {tokens.access_token}"}

    return _make_auth_header


@pytest.fixture(scope="function")
async def auth_header(make_auth_header, test_user):
    return await make_auth_header(test_user)


@pytest.fixture(scope="function")
async def auth_header2(make_auth_header, test_user2):
    return await make_auth_header(test_user2)


@pytest.fixture(scope="function")
async def admin_header(make_auth_header, admin_user):
    return await make_auth_header(admin_user)


@pytest.fixture(scope="function")
def make_room(db_session, app_config):
    async def _make_room(owner, title="Test Room", room_type=RoomType.FREE, max_participants=None):
        room_gateway = RoomGateway(db_session, UnitOfWork())
        if max_participants is None:
            max_participants = (
                app_config.PREMIUM_ROOM_CAPACITY
                if room_type == RoomType.PREMIUM
                else app_config.FREE_ROOM_CAPACITY
            )
        return await room_gateway.create_room(
            title, room_type.value, owner.id, max_participants
        )

    return _make_room


@pytest.fixture(scope="function")
async def test_room(make_room, test_user):
    """A free room owned by test_user; nobody has joined it yet."""
    return await make_room(test_user, title=f"TestRoom_{random.randint(1, 1000)}")
