# roomchat/interactors/auth_interactor.py
import logging
from datetime import datetime, timedelta

from roomchat.config import AppConfig
from roomchat.domain.entities import as_utc, utcnow
from roomchat.domain.exceptions import UnauthorizedError
from roomchat.gateways.interfaces import IOneTimeCodeGateway, IUserGateway
from roomchat.infrastructure import schemas
from roomchat.infrastructure.mailer import EmailClient
from roomchat.infrastructure.security import SecurityService


class AuthInteractor:
    """Email one-time codes and guest sign-in; both end in a user row."""

    def __init__(
        self,
        config: AppConfig,
        security_service: SecurityService,
        user_gateway: IUserGateway,
        otp_gateway: IOneTimeCodeGateway,
        mailer: EmailClient,
        logger: logging.Logger,
    ):
        self.config = config
        self.security_service = security_service
        self.user_gateway = user_gateway
        self.otp_gateway = otp_gateway
        self.mailer = mailer
        self.logger = logger

    async def request_code(self, email: str, now: datetime | None = None) -> None:
        now = now or utcnow()
        code = self.security_service.generate_one_time_code()
        expires_at = now + timedelta(minutes=self.config.OTP_EXPIRE_MINUTES)
        await self.otp_gateway.replace_code(
            email, self.security_service.hash_code(code), expires_at
        )
        await self.mailer.send_verification_code(
            email, code, self.config.OTP_EXPIRE_MINUTES
        )

    async def verify_code(
        self, email: str, code: str, now: datetime | None = None
    ) -> schemas.User:
        now = now or utcnow()
        stored = await self.otp_gateway.get_by_email(email)
        if stored is None:
            raise UnauthorizedError("Invalid or expired code")
        if as_utc(stored.expires_at) <= now:
            raise UnauthorizedError("Invalid or expired code")
        if not self.security_service.verify_code(code, stored.code_hash):
            if await self.otp_gateway.record_failure(
                stored, self.config.OTP_MAX_ATTEMPTS
            ):
                self.logger.warning(f"Code for {email} dropped after too many failures")
            raise UnauthorizedError("Invalid or expired code")
        await self.otp_gateway.consume(stored)

        user = await self.user_gateway.get_by_email(email)
        if user is None:
            user = await self.user_gateway.create_user(
                email=email, email_verified_at=now
            )
            self.logger.info(f"Created user {user.id} on first sign-in")
        elif user.email_verified_at is None:
            user = await self.user_gateway.mark_email_verified(user, now)
        return schemas.User.model_validate(user._model)

    async def sign_in_guest(self, display_name: str | None = None) -> schemas.User:
        user = await self.user_gateway.create_user(
            display_name=display_name,
            is_guest=True,
            guest_token=self.security_service.generate_guest_token(),
        )
        return schemas.User.model_validate(user._model)
