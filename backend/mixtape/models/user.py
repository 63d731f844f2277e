"""
Mixtape Backend — User and Friend SQLAlchemy Models
====================================================

What:  ORM models for the `users` and `friends` tables.
Who:   Used by UserService for CRUD and by the detailed-user aggregation,
       and by Alembic for schema management.

Table Design:
    - UUID primary keys (non-sequential, not enumerable)
    - username and email are unique; violations surface as ConflictError
    - password holds the encoded argon2 hash, never plaintext
    - Friend is a directed request row: user_id asked friend_id.
      A user's outgoing rows are `friends`, incoming rows are `friends_request`.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional, TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    String,
    UniqueConstraint,
    Uuid,
    false,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mixtape.database import Base

if TYPE_CHECKING:
    from mixtape.models.playlist import Playlist, PlaylistLike
    from mixtape.models.song import SongLike


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """
    A registered account.

    Lifecycle:
        1. Created on signup (password hashed before insert)
        2. Partially updated through UserService.update
        3. Hard-deleted; dependent rows go with it through ON DELETE CASCADE
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    username: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Encoded argon2 hash",
    )
    img_url: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    is_admin: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    # ── Relationships ─────────────────────────────────────────────────────
    playlists: Mapped[List["Playlist"]] = relationship(
        back_populates="owner",
        order_by="Playlist.created_at",
        passive_deletes=True,
    )
    # Like order is the order the user liked things in
    song_likes: Mapped[List["SongLike"]] = relationship(
        back_populates="user",
        order_by="SongLike.created_at",
        passive_deletes=True,
    )
    playlist_likes: Mapped[List["PlaylistLike"]] = relationship(
        back_populates="user",
        order_by="PlaylistLike.created_at",
        passive_deletes=True,
    )
    friends: Mapped[List["Friend"]] = relationship(
        back_populates="user",
        foreign_keys="Friend.user_id",
        order_by="Friend.created_at",
        passive_deletes=True,
    )
    friends_request: Mapped[List["Friend"]] = relationship(
        back_populates="friend",
        foreign_keys="Friend.friend_id",
        order_by="Friend.created_at",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"


class Friend(Base):
    """Directed friend relation with a status: pending, accepted, rejected."""

    __tablename__ = "friends"
    __table_args__ = (
        UniqueConstraint("user_id", "friend_id", name="uq_friend_pair"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    friend_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="pending",
        server_default=text("'pending'"),
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    user: Mapped["User"] = relationship(back_populates="friends", foreign_keys=[user_id])
    friend: Mapped["User"] = relationship(back_populates="friends_request", foreign_keys=[friend_id])

    def __repr__(self) -> str:
        return f"<Friend(user_id={self.user_id}, friend_id={self.friend_id}, status='{self.status}')>"
