"""
Mixtape Backend — Playlist Service
===================================

What:  Loads, creates, and flattens playlists.
How:   Playlist rows are loaded with `load_options(viewer_id)` so that every
       like collection (on the playlist and on each member song) contains
       only the viewer's own row. `playlist_data_to_playlist` then turns those
       rows into PlaylistView objects without further I/O.
Who:   Playlist routes and UserService.get_detailed_user.
"""

import logging
import uuid
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.interfaces import LoaderOption

from mixtape.exceptions import DatabaseError, NotFoundError
from mixtape.models.playlist import Playlist, PlaylistLike, PlaylistSong
from mixtape.models.user import User
from mixtape.schemas.playlist import PlaylistCreate, PlaylistShareView, PlaylistView
from mixtape.services.song_service import SongService, song_service

logger = logging.getLogger(__name__)


class PlaylistService:
    """
    Business logic for playlists.

    Stateless; the song helper is injected so tests can swap it.
    """

    def __init__(self, songs: Optional[SongService] = None):
        self.songs = songs or song_service

    def load_options(self, viewer_id: Optional[uuid.UUID]) -> Tuple[LoaderOption, ...]:
        """
        Loader options (relative to Playlist) for one playlist row.

        Shape:
            playlist
            ├── likes            (viewer's row only)
            ├── playlist_songs   (membership order)
            │   └── song         (SongService.load_options)
            └── shares
        """
        return (
            selectinload(Playlist.likes.and_(PlaylistLike.user_id == viewer_id)),
            selectinload(Playlist.playlist_songs)
            .selectinload(PlaylistSong.song)
            .options(*self.songs.load_options(viewer_id)),
            selectinload(Playlist.shares),
        )

    def playlist_data_to_playlist(self, rows: Iterable[Playlist]) -> List[PlaylistView]:
        """Map loaded playlist rows to views, preserving order. Pure."""
        views = []
        for row in rows:
            songs = self.songs.song_data_to_song(
                membership.song for membership in row.playlist_songs
            )
            views.append(
                PlaylistView(
                    id=row.id,
                    name=row.name,
                    is_public=row.is_public,
                    img_url=row.img_url,
                    description=row.description or "",
                    genres=list(row.genres or []),
                    types=list(row.types or []),
                    created_at=row.created_at,
                    songs=songs,
                    is_liked=bool(row.likes),
                    shares=[PlaylistShareView.model_validate(share) for share in row.shares],
                )
            )
        return views

    async def create(
        self,
        db: AsyncSession,
        descriptor: PlaylistCreate,
        owner_id: uuid.UUID,
    ) -> PlaylistView:
        """
        Persist a new, empty playlist owned by `owner_id`.

        Args:
            db: Async database session
            descriptor: Playlist fields (any owner_id on it is ignored)
            owner_id: Owning user

        Returns:
            PlaylistView with no songs, not liked, not shared

        Raises:
            NotFoundError: No user with id `owner_id` (→ 404)
            DatabaseError: Insert failed
        """
        await self._require_owner(db, owner_id)

        fields = descriptor.model_dump(include=set(PlaylistCreate.model_fields))
        # Collections are initialised so the view can be built without a lazy load
        playlist = Playlist(
            **fields,
            owner_id=owner_id,
            playlist_songs=[],
            likes=[],
            shares=[],
        )
        db.add(playlist)
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating playlist for %s: %s", owner_id, str(e))
            raise DatabaseError(
                message="Could not create the playlist. Please try again.",
                context={"owner_id": str(owner_id), "error_type": type(e).__name__},
            )

        logger.info("Playlist created: %s ('%s') for user %s", playlist.id, playlist.name, owner_id)
        return self.playlist_data_to_playlist([playlist])[0]

    async def get_by_id(
        self,
        db: AsyncSession,
        playlist_id: uuid.UUID,
        viewer_id: Optional[uuid.UUID] = None,
    ) -> PlaylistView:
        """
        Retrieve one playlist as seen by `viewer_id`.

        populate_existing forces the like collections to be reloaded with this
        viewer's criteria even if the rows are already in the session.

        Raises:
            NotFoundError: Playlist does not exist (→ 404)
            DatabaseError: Query execution failed (→ 500)
        """
        stmt = (
            select(Playlist)
            .where(Playlist.id == playlist_id)
            .options(*self.load_options(viewer_id))
            .execution_options(populate_existing=True)
        )
        try:
            result = await db.execute(stmt)
            playlist = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching playlist %s: %s", playlist_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the playlist. Please try again.",
                context={"playlist_id": str(playlist_id)},
            )

        if playlist is None:
            raise NotFoundError(resource="playlist", resource_id=str(playlist_id))

        return self.playlist_data_to_playlist([playlist])[0]

    async def _require_owner(self, db: AsyncSession, owner_id: uuid.UUID) -> None:
        try:
            owner = await db.get(User, owner_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching owner %s: %s", owner_id, str(e))
            raise DatabaseError(
                message="Could not create the playlist. Please try again.",
                context={"owner_id": str(owner_id)},
            )
        if owner is None:
            raise NotFoundError(resource="user", resource_id=str(owner_id))


# ── Singleton Instance ────────────────────────────────────────────────────
playlist_service = PlaylistService()
