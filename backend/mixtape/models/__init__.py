# Models package init
"""
Importing this package registers every model with Base.metadata, which
string-based relationship targets and Alembic autogenerate both rely on.
"""

from mixtape.models.user import Friend, User
from mixtape.models.song import Song, SongLike
from mixtape.models.playlist import Playlist, PlaylistLike, PlaylistShare, PlaylistSong

__all__ = [
    "Friend",
    "Playlist",
    "PlaylistLike",
    "PlaylistShare",
    "PlaylistSong",
    "Song",
    "SongLike",
    "User",
]
