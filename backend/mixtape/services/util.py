"""
Mixtape Backend — Service Utilities
====================================

What:  Shared constants and the default "Liked Songs" playlist descriptor.
"""

import uuid

from mixtape.config import settings
from mixtape.schemas.playlist import PlaylistCreateRequest

# Exact, case-sensitive display name of the managed likes playlist
LIKED_SONGS_PLAYLIST_NAME = "Liked Songs"


def get_default_likes_playlist(user_id: uuid.UUID) -> PlaylistCreateRequest:
    """Descriptor for the managed likes playlist of `user_id` (not persisted)."""
    return PlaylistCreateRequest(
        owner_id=user_id,
        name=LIKED_SONGS_PLAYLIST_NAME,
        is_public=False,
        img_url=settings.liked_songs_img_url,
        description="Songs you liked",
        genres=[],
        types=[LIKED_SONGS_PLAYLIST_NAME],
    )
