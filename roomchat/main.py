# roomchat/main.py
import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import create_async_engine

from roomchat.api import admin, auth, messages, rooms, users
from roomchat.config import AppConfig
from roomchat.domain.events import Event
from roomchat.domain.exceptions import DomainError, UnauthorizedError
from roomchat.infrastructure.database import create_database
from roomchat.infrastructure.event_dispatcher import EventDispatcher
from roomchat.infrastructure.event_handlers import EventHandlers
from roomchat.infrastructure.mailer import EmailClient
from roomchat.infrastructure.redis_client import RedisClient
from roomchat.infrastructure.scheduler import PeriodicScheduler
from roomchat.infrastructure.security import SecurityService
from roomchat.interactors.housekeeping_interactor import HousekeepingInteractor


class Application:
    def __init__(self, config: AppConfig):
        self.config = config
        self.logger = self.setup_logger()
        engine = create_async_engine(config.DATABASE_URL, echo=False)
        self.database = create_database(engine)
        self.redis_client = RedisClient(
            config.REDIS_HOST, config.REDIS_PORT, self.logger
        )
        self.event_dispatcher = EventDispatcher()
        self.security_service = SecurityService(config)
        self.event_handlers = EventHandlers(self.redis_client)
        self.mailer = EmailClient(
            config.EMAIL_API_URL, config.EMAIL_API_KEY, config.APP_NAME, self.logger
        )
        self.scheduler = PeriodicScheduler(self.logger)

        # Every room event fans out on the room's Redis channel
        self.event_dispatcher.register(Event, self.event_handlers.publish_room_event)

    def register_jobs(self) -> None:
        # database may be swapped after construction, so jobs bind late
        housekeeping = HousekeepingInteractor(self.database, self.config, self.logger)
        interval = self.config.HOUSEKEEPING_INTERVAL_SECONDS
        self.scheduler.add_job(
            "check premium expiration",
            interval,
            housekeeping.check_premium_expiration,
        )
        self.scheduler.add_job(
            "delete old messages", interval, housekeeping.delete_old_messages
        )

    @asynccontextmanager
    async def lifespan(self, app: FastAPI):
        await self.database.connect()
        await self.redis_client.connect()
        if self.config.HOUSEKEEPING_ENABLED:
            self.register_jobs()
            self.scheduler.start()
        yield
        await self.scheduler.stop()
        await self.database.disconnect()
        await self.redis_client.disconnect()

    def setup_logger(self):
        logger = logging.getLogger("RoomChatAPI")
        logger.setLevel(logging.INFO)

        if not logger.handlers:
            c_handler = logging.StreamHandler(sys.stdout)
            formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            )
            c_handler.setFormatter(formatter)
            logger.addHandler(c_handler)

        return logger

    def create_app(self) -> FastAPI:
        app = FastAPI(
            title=self.config.PROJECT_NAME,
            version=self.config.PROJECT_VERSION,
            description=self.config.PROJECT_DESCRIPTION,
            openapi_url=f"{self.config.API_V1_STR}/openapi.json",
            lifespan=self.lifespan,
        )

        app.state.config = self.config
        app.state.security_service = self.security_service
        app.state.event_dispatcher = self.event_dispatcher
        app.state.database = self.database
        app.state.logger = self.logger
        app.state.mailer = self.mailer

        # Create routers
        app.include_router(
            auth.router, prefix=f"{self.config.API_V1_STR}/auth", tags=["auth"]
        )
        app.include_router(
            users.router, prefix=f"{self.config.API_V1_STR}/users", tags=["users"]
        )
        app.include_router(
            rooms.router, prefix=f"{self.config.API_V1_STR}/rooms", tags=["rooms"]
        )
        app.include_router(
            messages.router,
            prefix=f"{self.config.API_V1_STR}/messages",
            tags=["messages"],
        )
        app.include_router(
            admin.router, prefix=f"{self.config.API_V1_STR}/admin", tags=["admin"]
        )

        logger = self.logger

        @app.exception_handler(DomainError)
        async def domain_exception_handler(request: Request, exc: DomainError):
            headers = None
            if isinstance(exc, UnauthorizedError):
                headers = {"WWW-Authenticate": "Bearer"}
            if exc.status_code >= 500:
                logger.error(f"{request.method} {request.url.path}: {exc.detail}")
            return JSONResponse(
                status_code=exc.status_code,
                content={"detail": exc.detail},
                headers=headers,
            )

        @app.exception_handler(Exception)
        async def global_exception_handler(request: Request, exc: Exception):
            logger.exception(f"Unhandled error on {request.method} {request.url.path}")
            return JSONResponse(
                status_code=500,
                content={"message": f"An unexpected error occurred: {str(exc)}"},
            )

        return app


def create():
    config = AppConfig()
    application = Application(config)
    app = application.create_app()
    application.logger.info("Application created and configured")

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(create(), host="127.0.0.1", port=8000)
