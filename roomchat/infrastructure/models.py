# roomchat/infrastructure/models.py
from typing import Optional, List
from datetime import datetime

from roomchat.domain.entities import utcnow
from roomchat.infrastructure.database import Base
from sqlalchemy import (
    Integer,
    String,
    Text,
    DateTime,
    ForeignKey,
    Boolean,
    Index,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship, Mapped, mapped_column


class User(Base):
    __tablename__ = "users"

    __table_args__ = (Index("ix_users_premium_expires", "is_premium", "premium_expires_at"),)

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, index=True, autoincrement=True
    )
    name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    display_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    email: Mapped[Optional[str]] = mapped_column(
        String, unique=True, index=True, nullable=True
    )
    email_verified_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    role: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    is_premium: Mapped[bool] = mapped_column(Boolean, default=False)
    premium_expires_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    is_guest: Mapped[bool] = mapped_column(Boolean, default=False)
    guest_token: Mapped[Optional[str]] = mapped_column(
        String, unique=True, nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )

    owned_rooms: Mapped[List["Room"]] = relationship(
        "Room", back_populates="owner", lazy="select"
    )
    tokens: Mapped[List["Token"]] = relationship(
        "Token", back_populates="user", lazy="select"
    )


class Room(Base):
    __tablename__ = "rooms"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, index=True, autoincrement=True
    )
    title: Mapped[str] = mapped_column(String)
    type: Mapped[str] = mapped_column(String(16))
    owner_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    max_participants: Mapped[int] = mapped_column(Integer)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )

    owner: Mapped[Optional[User]] = relationship(
        "User",
        back_populates="owned_rooms",
        lazy="joined",  # Many-to-one, always rendered with the room
    )


class Participant(Base):
    __tablename__ = "participants"

    __table_args__ = (
        UniqueConstraint("room_id", "user_id", name="uq_participants_room_user"),
        Index("ix_participants_room_active", "room_id", "is_active"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, index=True, autoincrement=True
    )
    room_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("rooms.id", ondelete="CASCADE"), index=True
    )
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), index=True)
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    last_seen_message_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("messages.id", ondelete="SET NULL"), nullable=True
    )

    user: Mapped[Optional[User]] = relationship(
        "User",
        lazy="joined",  # Many-to-one, always rendered with the participant
    )


class Message(Base):
    __tablename__ = "messages"

    __table_args__ = (
        Index("ix_messages_room_timestamp", "room_id", "timestamp"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, index=True, autoincrement=True
    )
    room_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("rooms.id", ondelete="CASCADE"), index=True
    )
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), index=True)
    text: Mapped[str] = mapped_column(Text)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, index=True
    )
    parent_message_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("messages.id", ondelete="SET NULL"), nullable=True
    )
    is_edited: Mapped[bool] = mapped_column(Boolean, default=False)

    user: Mapped[Optional[User]] = relationship(
        "User",
        lazy="joined",  # Many-to-one, often accessed
    )
    parent: Mapped[Optional["Message"]] = relationship(
        "Message",
        remote_side=[id],
        lazy="select",
    )
    reactions: Mapped[List["Reaction"]] = relationship(
        "Reaction",
        back_populates="message",
        order_by="Reaction.id",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="select",
    )


class Reaction(Base):
    __tablename__ = "reactions"

    __table_args__ = (
        UniqueConstraint(
            "message_id", "user_id", "emoji", name="uq_reactions_message_user_emoji"
        ),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, index=True, autoincrement=True
    )
    message_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("messages.id", ondelete="CASCADE"), index=True
    )
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), index=True)
    emoji: Mapped[str] = mapped_column(String(64))

    message: Mapped[Message] = relationship(
        "Message", back_populates="reactions", lazy="select"
    )
    user: Mapped[Optional[User]] = relationship(
        "User",
        lazy="joined",  # Many-to-one, rendered with every reaction
    )


class Token(Base):
    __tablename__ = "tokens"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, index=True, autoincrement=True
    )
    access_token: Mapped[str] = mapped_column(String, unique=True, index=True)
    refresh_token: Mapped[Optional[str]] = mapped_column(
        String, unique=True, index=True, nullable=True
    )
    token_type: Mapped[str] = mapped_column(String)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE")
    )

    user: Mapped[User] = relationship("User", back_populates="tokens", lazy="select")


class OneTimeCode(Base):
    __tablename__ = "one_time_codes"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, index=True, autoincrement=True
    )
    email: Mapped[str] = mapped_column(String, unique=True, index=True)
    code_hash: Mapped[str] = mapped_column(String)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    failed_attempts: Mapped[int] = mapped_column(Integer, default=0)
