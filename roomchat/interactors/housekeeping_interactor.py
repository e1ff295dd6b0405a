# roomchat/interactors/housekeeping_interactor.py
import logging
from datetime import datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError

from roomchat.config import AppConfig
from roomchat.domain.entities import utcnow
from roomchat.gateways.message_gateway import MessageGateway
from roomchat.gateways.user_gateway import UserGateway
from roomchat.infrastructure.database import Database
from roomchat.infrastructure.uow import UnitOfWork


class HousekeepingInteractor:
    """Periodic sweeps over bounded batches.

    Candidates are read in one session, then every row is handled in its own
    transaction. A row that fails is logged and left for the next run.
    """

    def __init__(self, database: Database, config: AppConfig, logger: logging.Logger):
        self.database = database
        self.config = config
        self.logger = logger

    async def check_premium_expiration(self, now: datetime | None = None) -> int:
        now = now or utcnow()
        async with self.database.session() as session:
            user_ids = await UserGateway(session, UnitOfWork()).get_expired_premium_ids(
                now, self.config.PREMIUM_EXPIRY_BATCH_SIZE
            )

        expired = 0
        for user_id in user_ids:
            try:
                async with self.database.transaction() as session:
                    if await UserGateway(session, UnitOfWork()).expire_premium(
                        user_id, now
                    ):
                        expired += 1
            except SQLAlchemyError:
                self.logger.exception(f"Could not expire premium for user {user_id}")

        if expired:
            self.logger.info(f"Expired premium for {expired} user(s)")
        return expired

    async def delete_old_messages(self, now: datetime | None = None) -> int:
        now = now or utcnow()
        cutoff = now - timedelta(hours=self.config.MESSAGE_RETENTION_HOURS)
        async with self.database.session() as session:
            message_ids = await MessageGateway(session, UnitOfWork()).get_expired_ids(
                cutoff, self.config.MESSAGE_PURGE_BATCH_SIZE
            )

        deleted = 0
        for message_id in message_ids:
            try:
                async with self.database.transaction() as session:
                    if await MessageGateway(session, UnitOfWork()).delete_by_id(
                        message_id
                    ):
                        deleted += 1
            except SQLAlchemyError:
                self.logger.exception(f"Could not delete message {message_id}")

        if deleted:
            self.logger.info(f"Deleted {deleted} message(s) older than {cutoff}")
        return deleted
