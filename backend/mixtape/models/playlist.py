"""
Mixtape Backend — Playlist SQLAlchemy Models
=============================================

What:  ORM models for `playlists` and its association tables
       (`playlist_songs`, `playlist_likes`, `playlist_shares`).

Table Design:
    - genres/types are JSON string lists (portable across PostgreSQL and SQLite)
    - playlist_songs keeps insertion order through added_at; the
      `playlist_songs` relationship is ordered by it
    - playlist_likes works like song_likes: existence of a row = liked
"""

import uuid
from datetime import datetime
from typing import List, Optional, TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    false,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mixtape.database import Base
from mixtape.models.user import utcnow

if TYPE_CHECKING:
    from mixtape.models.song import Song
    from mixtape.models.user import User


class Playlist(Base):
    """
    A user-owned, ordered collection of songs.

    Every user also owns one managed playlist named "Liked Songs" whose song
    list is derived from their song likes rather than from playlist_songs.
    """

    __tablename__ = "playlists"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_public: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )
    img_url: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    genres: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    types: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    owner: Mapped["User"] = relationship(back_populates="playlists")
    playlist_songs: Mapped[List["PlaylistSong"]] = relationship(
        back_populates="playlist",
        order_by="PlaylistSong.added_at",
        passive_deletes=True,
    )
    likes: Mapped[List["PlaylistLike"]] = relationship(
        back_populates="playlist",
        passive_deletes=True,
    )
    shares: Mapped[List["PlaylistShare"]] = relationship(
        back_populates="playlist",
        order_by="PlaylistShare.created_at",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Playlist(id={self.id}, name='{self.name}', owner_id={self.owner_id})>"


class PlaylistSong(Base):
    """Membership row: `song` was put on `playlist` by user `added_by_id` at `added_at`."""

    __tablename__ = "playlist_songs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    playlist_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("playlists.id", ondelete="CASCADE"), nullable=False, index=True
    )
    song_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("songs.id", ondelete="CASCADE"), nullable=False
    )
    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    added_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    playlist: Mapped["Playlist"] = relationship(back_populates="playlist_songs")
    song: Mapped["Song"] = relationship()


class PlaylistLike(Base):
    __tablename__ = "playlist_likes"
    __table_args__ = (
        UniqueConstraint("user_id", "playlist_id", name="uq_playlist_like"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    playlist_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("playlists.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    user: Mapped["User"] = relationship(back_populates="playlist_likes")
    playlist: Mapped["Playlist"] = relationship(back_populates="likes")


class PlaylistShare(Base):
    """A playlist shared with another user."""

    __tablename__ = "playlist_shares"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    playlist_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("playlists.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    playlist: Mapped["Playlist"] = relationship(back_populates="shares")
