# roomchat/gateways/interfaces.py
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from roomchat.domain.entities import Role
from roomchat.infrastructure import schemas
from roomchat.infrastructure.uow import UoWModel


class IUserGateway(ABC):
    @abstractmethod
    async def get_user(self, user_id: int) -> Optional[UoWModel]:
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[UoWModel]:
        pass

    @abstractmethod
    async def create_user(
        self,
        email: Optional[str] = None,
        display_name: Optional[str] = None,
        is_guest: bool = False,
        guest_token: Optional[str] = None,
        email_verified_at: Optional[datetime] = None,
    ) -> UoWModel:
        pass

    @abstractmethod
    async def mark_email_verified(self, user: UoWModel, verified_at: datetime) -> UoWModel:
        pass

    @abstractmethod
    async def update_profile(
        self, user: UoWModel, display_name: Optional[str], name: Optional[str]
    ) -> UoWModel:
        pass

    @abstractmethod
    async def set_premium(self, user: UoWModel, expires_at: datetime) -> UoWModel:
        pass

    @abstractmethod
    async def set_role(self, user: UoWModel, role: Role) -> UoWModel:
        pass

    @abstractmethod
    async def get_expired_premium_ids(self, now: datetime, limit: int) -> List[int]:
        pass

    @abstractmethod
    async def expire_premium(self, user_id: int, now: datetime) -> bool:
        pass


class IRoomGateway(ABC):
    @abstractmethod
    async def get_room(self, room_id: int) -> Optional[UoWModel]:
        pass

    @abstractmethod
    async def get_all(self, active_only: bool = True) -> List[UoWModel]:
        pass

    @abstractmethod
    async def create_room(
        self, title: str, room_type: str, owner_id: int, max_participants: int
    ) -> UoWModel:
        pass

    @abstractmethod
    async def count_active_participants(self, room_ids: List[int]) -> dict[int, int]:
        pass

    @abstractmethod
    async def set_active(self, room: UoWModel, is_active: bool) -> UoWModel:
        pass

    @abstractmethod
    async def delete_room(self, room: UoWModel) -> None:
        pass


class IParticipantGateway(ABC):
    @abstractmethod
    async def get_participant(self, room_id: int, user_id: int) -> Optional[UoWModel]:
        pass

    @abstractmethod
    async def get_active(self, room_id: int) -> List[UoWModel]:
        pass

    @abstractmethod
    async def join(self, room_id: int, user_id: int) -> UoWModel:
        pass

    @abstractmethod
    async def deactivate(self, participant: UoWModel) -> UoWModel:
        pass

    @abstractmethod
    async def set_last_seen(self, participant: UoWModel, message_id: int) -> UoWModel:
        pass


class IMessageGateway(ABC):
    @abstractmethod
    async def get_message(self, message_id: int) -> Optional[UoWModel]:
        pass

    @abstractmethod
    async def get_recent(self, room_id: int, limit: int = 100) -> List[UoWModel]:
        pass

    @abstractmethod
    async def create_message(
        self, message: schemas.MessageCreate, user_id: int
    ) -> UoWModel:
        pass

    @abstractmethod
    async def update_text(self, message: UoWModel, text: str) -> UoWModel:
        pass

    @abstractmethod
    async def delete_message(self, message: UoWModel) -> None:
        pass

    @abstractmethod
    async def toggle_reaction(self, message_id: int, user_id: int, emoji: str) -> bool:
        pass

    @abstractmethod
    async def get_expired_ids(self, cutoff: datetime, limit: int) -> List[int]:
        pass

    @abstractmethod
    async def delete_by_id(self, message_id: int) -> bool:
        pass


class ITokenGateway(ABC):
    @abstractmethod
    async def create_token(self, token: schemas.TokenCreate) -> UoWModel:
        pass

    @abstractmethod
    async def get_by_user_id(self, user_id: int) -> Optional[UoWModel]:
        pass

    @abstractmethod
    async def get_by_access_token(self, access_token: str) -> Optional[UoWModel]:
        pass

    @abstractmethod
    async def get_by_refresh_token(self, refresh_token: str) -> Optional[UoWModel]:
        pass

    @abstractmethod
    async def delete_token_by_access_token(self, access_token: str) -> bool:
        pass

    @abstractmethod
    async def delete_token_by_refresh_token(self, refresh_token: str) -> bool:
        pass


class IOneTimeCodeGateway(ABC):
    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[UoWModel]:
        pass

    @abstractmethod
    async def replace_code(
        self, email: str, code_hash: str, expires_at: datetime
    ) -> UoWModel:
        pass

    @abstractmethod
    async def consume(self, code: UoWModel) -> None:
        pass

    @abstractmethod
    async def record_failure(self, code: UoWModel, max_attempts: int) -> bool:
        pass
