# roomchat/gateways/otp_gateway.py
from datetime import datetime
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from roomchat.gateways.interfaces import IOneTimeCodeGateway
from roomchat.infrastructure import models
from roomchat.infrastructure.data_mappers import OneTimeCodeMapper
from roomchat.infrastructure.uow import UnitOfWork, UoWModel


class OneTimeCodeGateway(IOneTimeCodeGateway):
    def __init__(self, session: AsyncSession, uow: UnitOfWork):
        self.session = session
        self.uow = uow
        uow.mappers[models.OneTimeCode] = OneTimeCodeMapper(session)

    async def get_by_email(self, email: str) -> Optional[UoWModel]:
        stmt = select(models.OneTimeCode).filter(
            func.lower(models.OneTimeCode.email) == func.lower(email)
        )
        result = await self.session.execute(stmt)
        code = result.scalar_one_or_none()
        return UoWModel(code, self.uow) if code else None

    async def replace_code(
        self, email: str, code_hash: str, expires_at: datetime
    ) -> UoWModel:
        code = await self.get_by_email(email)
        if code:
            code.code_hash = code_hash
            code.expires_at = expires_at
            code.failed_attempts = 0
        else:
            code = self.uow.register_new(
                models.OneTimeCode(
                    email=email.lower(),
                    code_hash=code_hash,
                    expires_at=expires_at,
                    failed_attempts=0,
                )
            )
        await self.uow.commit()
        return code

    async def consume(self, code: UoWModel) -> None:
        self.uow.register_deleted(code)
        await self.uow.commit()

    async def record_failure(self, code: UoWModel, max_attempts: int) -> bool:
        """Count a wrong guess; the code is dropped once the limit is reached.

        Commits right away so the rollback of the failing request keeps the
        count. Returns True if the code was dropped.
        """
        code.failed_attempts = (code.failed_attempts or 0) + 1
        exhausted = code.failed_attempts >= max_attempts
        if exhausted:
            self.uow.register_deleted(code)
        await self.uow.commit()
        await self.session.commit()
        return exhausted
