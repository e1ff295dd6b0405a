# roomchat/gateways/user_gateway.py
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from roomchat.domain.entities import Role, as_utc
from roomchat.gateways.interfaces import IUserGateway
from roomchat.infrastructure import models
from roomchat.infrastructure.data_mappers import UserMapper
from roomchat.infrastructure.uow import UnitOfWork, UoWModel


class UserGateway(IUserGateway):
    def __init__(self, session: AsyncSession, uow: UnitOfWork):
        self.session = session
        self.uow = uow
        uow.mappers[models.User] = UserMapper(session)

    async def get_user(self, user_id: int) -> UoWModel | None:
        stmt = select(models.User).filter(models.User.id == user_id)
        result = await self.session.execute(stmt)
        user = result.scalar_one_or_none()
        return UoWModel(user, self.uow) if user else None

    async def get_by_email(self, email: str) -> UoWModel | None:
        stmt = select(models.User).filter(
            func.lower(models.User.email) == func.lower(email)
        )
        result = await self.session.execute(stmt)
        user = result.scalar_one_or_none()
        return UoWModel(user, self.uow) if user else None

    async def create_user(
        self,
        email: str | None = None,
        display_name: str | None = None,
        is_guest: bool = False,
        guest_token: str | None = None,
        email_verified_at: datetime | None = None,
    ) -> UoWModel:
        db_user = models.User(
            email=email.lower() if email else None,
            display_name=display_name,
            is_guest=is_guest,
            guest_token=guest_token,
            email_verified_at=email_verified_at,
            is_premium=False,
        )
        uow_user = self.uow.register_new(db_user)
        await self.uow.commit()
        return uow_user

    async def mark_email_verified(self, user: UoWModel, verified_at: datetime) -> UoWModel:
        user.email_verified_at = verified_at
        await self.uow.commit()
        return user

    async def update_profile(
        self, user: UoWModel, display_name: str | None, name: str | None
    ) -> UoWModel:
        user.display_name = display_name
        user.name = name
        await self.uow.commit()
        return user

    async def set_premium(self, user: UoWModel, expires_at: datetime) -> UoWModel:
        user.is_premium = True
        user.premium_expires_at = expires_at
        await self.uow.commit()
        return user

    async def set_role(self, user: UoWModel, role: Role) -> UoWModel:
        user.role = role.value
        await self.uow.commit()
        return user

    async def get_expired_premium_ids(self, now: datetime, limit: int) -> list[int]:
        stmt = (
            select(models.User.id)
            .filter(
                models.User.is_premium.is_(True),
                models.User.premium_expires_at.is_not(None),
                models.User.premium_expires_at < now,
            )
            .order_by(models.User.premium_expires_at)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def expire_premium(self, user_id: int, now: datetime) -> bool:
        user = await self.get_user(user_id)
        # renewed between the scan and this row's transaction
        if not user or not user.is_premium:
            return False
        if user.premium_expires_at is not None and as_utc(user.premium_expires_at) >= now:
            return False
        user.is_premium = False
        user.premium_expires_at = None
        await self.uow.commit()
        return True
