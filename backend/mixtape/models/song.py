"""
Mixtape Backend — Song SQLAlchemy Models
=========================================

What:  ORM models for `songs` and the `song_likes` association.
Who:   Loaded by SongService/PlaylistService loader options and the
       detailed-user aggregation.

Song likes are plain join rows: a row for (user, song) means "liked".
The `likes` relationship is normally loaded with a per-viewer criteria, so on a
loaded Song it holds at most the requesting user's own like row.
"""

import uuid
from datetime import datetime
from typing import List, Optional, TYPE_CHECKING

from sqlalchemy import (
    JSON,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mixtape.database import Base
from mixtape.models.user import utcnow

if TYPE_CHECKING:
    from mixtape.models.user import User


class Song(Base):
    """A track that has been added to the catalogue by some user."""

    __tablename__ = "songs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    artist: Mapped[str] = mapped_column(String(255), nullable=False)
    img_url: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    duration: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Track length in seconds",
    )
    genres: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    youtube_id: Mapped[str] = mapped_column(String(32), nullable=False)
    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    added_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    added_by: Mapped[Optional["User"]] = relationship(foreign_keys=[added_by_id])
    likes: Mapped[List["SongLike"]] = relationship(
        back_populates="song",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Song(id={self.id}, name='{self.name}', artist='{self.artist}')>"


class SongLike(Base):
    __tablename__ = "song_likes"
    __table_args__ = (
        UniqueConstraint("user_id", "song_id", name="uq_song_like"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    song_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("songs.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    user: Mapped["User"] = relationship(back_populates="song_likes")
    song: Mapped["Song"] = relationship(back_populates="likes")
