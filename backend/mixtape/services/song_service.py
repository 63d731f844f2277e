"""
Mixtape Backend — Song Service
===============================

What:  Shapes song rows for loading and maps them to flat SongView objects.
Who:   PlaylistService (songs inside playlists) and UserService (liked songs).

A "song row" is a Song ORM object loaded with `load_options(viewer_id)`:
its adder identity is loaded and its `likes` collection holds only the
viewer's own like row, if any.
"""

import uuid
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.orm import selectinload
from sqlalchemy.orm.interfaces import LoaderOption

from mixtape.models.song import Song, SongLike
from mixtape.schemas.song import SongView, UserMini


class SongService:
    """Stateless helper around song rows."""

    def load_options(self, viewer_id: Optional[uuid.UUID]) -> Tuple[LoaderOption, ...]:
        """
        Loader options (relative to Song) for one song row.

        The like collection is filtered to `viewer_id`; with no viewer it
        loads empty and every song comes back un-liked.
        """
        return (
            selectinload(Song.added_by),
            selectinload(Song.likes.and_(SongLike.user_id == viewer_id)),
        )

    def song_data_to_song(self, rows: Iterable[Song]) -> List[SongView]:
        """
        Map loaded song rows to views, preserving order.

        Pure: reads only attributes already loaded by `load_options`.
        """
        return [
            SongView(
                id=row.id,
                name=row.name,
                artist=row.artist,
                img_url=row.img_url,
                duration=row.duration,
                genres=list(row.genres or []),
                youtube_id=row.youtube_id,
                added_at=row.added_at,
                added_by=(
                    UserMini.model_validate(row.added_by)
                    if row.added_by is not None
                    else None
                ),
                is_liked=bool(row.likes),
            )
            for row in rows
        ]


# ── Singleton Instance ────────────────────────────────────────────────────
song_service = SongService()
