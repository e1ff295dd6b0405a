# roomchat/infrastructure/schemas.py
from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field

from roomchat.domain.entities import Role, RoomType


class UserSummary(BaseModel):
    id: int
    name: str | None = None
    display_name: str | None = None

    model_config = ConfigDict(from_attributes=True)


class AuthorSummary(UserSummary):
    is_premium: bool = False
    role: Role | None = None


class ParticipantUser(UserSummary):
    is_premium: bool = False
    is_guest: bool = False


class User(BaseModel):
    id: int
    name: str | None = None
    display_name: str | None = None
    email: EmailStr | None = None
    email_verified_at: datetime | None = None
    role: Role | None = None
    is_premium: bool = False
    premium_expires_at: datetime | None = None
    is_guest: bool = False
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProfileUpdate(BaseModel):
    # both fields are always written; omitting one clears it
    display_name: str | None = None
    name: str | None = None


class RoleUpdate(BaseModel):
    email: EmailStr
    role: Role


class AdminGrant(BaseModel):
    email: EmailStr
    setup_key: str | None = None


class RoomCreate(BaseModel):
    title: str
    type: RoomType = RoomType.FREE


class Room(BaseModel):
    id: int
    title: str
    type: RoomType
    owner_id: int
    is_active: bool
    max_participants: int
    created_at: datetime
    owner: UserSummary | None = None
    participant_count: int = 0

    model_config = ConfigDict(from_attributes=True)


class Participant(BaseModel):
    id: int
    room_id: int
    user_id: int
    joined_at: datetime
    is_active: bool
    last_seen_message_id: int | None = None
    user: ParticipantUser | None = None

    model_config = ConfigDict(from_attributes=True)


class SeenUpdate(BaseModel):
    message_id: int


class MessageCreate(BaseModel):
    room_id: int
    text: str
    parent_message_id: int | None = None


class MessageUpdate(BaseModel):
    text: str


class ReactionToggle(BaseModel):
    emoji: str = Field(..., min_length=1, max_length=64)


class Reaction(BaseModel):
    user_id: int
    emoji: str
    user: UserSummary | None = None

    model_config = ConfigDict(from_attributes=True)


class ParentPreview(BaseModel):
    id: int
    text: str
    user: AuthorSummary | None = None

    model_config = ConfigDict(from_attributes=True)


class Message(BaseModel):
    id: int
    room_id: int
    user_id: int
    text: str
    timestamp: datetime
    parent_message_id: int | None = None
    is_edited: bool
    user: AuthorSummary | None = None
    parent_message: ParentPreview | None = Field(
        default=None, validation_alias=AliasChoices("parent_message", "parent")
    )
    reactions: list[Reaction] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class TokenBase(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str


class TokenCreate(TokenBase):
    expires_at: datetime
    user_id: int


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str
    expires_at: datetime
    user_id: int


class RefreshTokenRequest(BaseModel):
    refresh_token: str


class OtpRequest(BaseModel):
    email: EmailStr


class OtpVerify(BaseModel):
    email: EmailStr
    code: str


class GuestSignIn(BaseModel):
    display_name: str | None = None
