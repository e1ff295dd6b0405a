# roomchat/interactors/user_interactor.py
import secrets
from datetime import datetime, timedelta

from roomchat.config import AppConfig
from roomchat.domain.entities import Role, as_utc, is_admin, utcnow
from roomchat.domain.exceptions import ForbiddenError, NotFoundError
from roomchat.gateways.interfaces import IUserGateway
from roomchat.infrastructure import schemas
from roomchat.infrastructure.uow import UoWModel


class UserInteractor:
    def __init__(self, config: AppConfig, user_gateway: IUserGateway):
        self.config = config
        self.user_gateway = user_gateway

    async def get_user(self, user_id: int) -> schemas.User | None:
        user: UoWModel | None = await self.user_gateway.get_user(user_id)
        return schemas.User.model_validate(user._model) if user else None

    async def _require_user(self, user_id: int) -> UoWModel:
        user = await self.user_gateway.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    async def update_profile(
        self, user_id: int, profile: schemas.ProfileUpdate
    ) -> schemas.User:
        user = await self._require_user(user_id)
        updated = await self.user_gateway.update_profile(
            user, profile.display_name, profile.name
        )
        return schemas.User.model_validate(updated._model)

    def next_premium_expiry(
        self, is_premium: bool, expires_at: datetime | None, now: datetime
    ) -> datetime:
        """Renewals extend an unexpired subscription instead of restarting it."""
        current = as_utc(expires_at)
        base = current if is_premium and current is not None and current > now else now
        return base + timedelta(days=self.config.PREMIUM_PERIOD_DAYS)

    async def upgrade_to_premium(
        self, user_id: int, now: datetime | None = None
    ) -> schemas.User:
        now = now or utcnow()
        user = await self._require_user(user_id)
        expires_at = self.next_premium_expiry(
            user.is_premium, user.premium_expires_at, now
        )
        updated = await self.user_gateway.set_premium(user, expires_at)
        return schemas.User.model_validate(updated._model)

    async def set_user_role(
        self, caller: schemas.User, email: str, role: Role
    ) -> schemas.User:
        if not is_admin(caller):
            raise ForbiddenError("Admin access required")
        target = await self.user_gateway.get_by_email(email)
        if not target:
            raise NotFoundError(f"User with email {email} not found")
        updated = await self.user_gateway.set_role(target, role)
        return schemas.User.model_validate(updated._model)

    async def grant_admin_access(
        self, caller: schemas.User | None, email: str, setup_key: str | None = None
    ) -> schemas.User:
        expected_key = self.config.ADMIN_SETUP_KEY
        key_ok = bool(expected_key and setup_key) and secrets.compare_digest(
            setup_key, expected_key
        )
        if not key_ok and not is_admin(caller):
            raise ForbiddenError("Admin access required")
        target = await self.user_gateway.get_by_email(email)
        if not target:
            raise NotFoundError(f"User with email {email} not found")
        if target.role != Role.ADMIN:
            target = await self.user_gateway.set_role(target, Role.ADMIN)
        return schemas.User.model_validate(target._model)
