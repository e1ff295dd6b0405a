# roomchat/interactors/token_interactor.py

from roomchat.config import AppConfig
from roomchat.domain.exceptions import UnauthorizedError
from roomchat.gateways.interfaces import ITokenGateway
from roomchat.infrastructure import schemas
from roomchat.infrastructure.security import SecurityService


class TokenInteractor:
    def __init__(
        self,
        config: AppConfig,
        security_service: SecurityService,
        token_gateway: ITokenGateway,
    ):
        self.config = config
        self.security_service = security_service
        self.token_gateway = token_gateway

    async def issue_tokens(self, user_id: int) -> schemas.TokenResponse:
        access_token, access_expire = self.security_service.create_access_token(
            data={"sub": str(user_id)}
        )
        refresh_token, _ = self.security_service.create_refresh_token(
            data={"sub": str(user_id)}
        )
        token = await self.token_gateway.create_token(
            schemas.TokenCreate(
                access_token=access_token,
                refresh_token=refresh_token,
                token_type="bearer",
                expires_at=access_expire,
                user_id=user_id,
            )
        )
        return schemas.TokenResponse(
            access_token=token.access_token,
            refresh_token=token.refresh_token,
            token_type=token.token_type,
            expires_at=token.expires_at,
            user_id=token.user_id,
        )

    async def resolve_user_id(self, access_token: str) -> int | None:
        """User id for a signed access token that is still stored, else None."""
        user_id = self.security_service.decode_access_token(access_token)
        if user_id is None:
            return None
        stored = await self.token_gateway.get_by_access_token(access_token)
        if stored is None or stored.user_id != user_id:
            return None
        return user_id

    async def refresh(self, refresh_token: str) -> schemas.TokenResponse:
        stored = await self.token_gateway.get_by_refresh_token(refresh_token)
        user_id = self.security_service.decode_refresh_token(refresh_token)
        if stored is None or user_id is None or stored.user_id != user_id:
            raise UnauthorizedError("Invalid refresh token")
        await self.token_gateway.delete_token_by_refresh_token(refresh_token)
        return await self.issue_tokens(user_id)

    async def revoke(self, access_token: str) -> None:
        if not await self.token_gateway.delete_token_by_access_token(access_token):
            raise UnauthorizedError("Invalid token")
