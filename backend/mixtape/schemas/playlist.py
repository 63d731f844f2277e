"""
Mixtape Backend — Playlist Schemas
===================================

What:  Playlist view (response) and playlist descriptors (request bodies).
Who:   PlaylistService builds views; routes accept descriptors.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from mixtape.schemas.song import SongView


class PlaylistShareView(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID = Field(description="User the playlist was shared with")
    created_at: datetime

    model_config = {"from_attributes": True}


class PlaylistView(BaseModel):
    """
    What:  Flat representation of a playlist.
    Who:   Returned by GET /api/playlist/{id} and inside DetailedUser.

    `songs` are in membership order. `is_liked` refers only to the user the
    view was built for.
    """
    id: uuid.UUID = Field(description="Unique playlist identifier")
    name: str
    is_public: bool
    img_url: Optional[str] = None
    description: str = ""
    genres: List[str] = Field(default_factory=list)
    types: List[str] = Field(default_factory=list)
    created_at: datetime
    songs: List[SongView] = Field(default_factory=list)
    is_liked: bool = Field(
        default=False,
        description="Whether the requesting user has liked this playlist",
    )
    shares: List[PlaylistShareView] = Field(default_factory=list)


class PlaylistCreate(BaseModel):
    """Descriptor for a new playlist; the owner is supplied separately."""
    name: str = Field(min_length=1, max_length=255)
    is_public: bool = False
    img_url: Optional[str] = Field(default=None, max_length=512)
    description: str = ""
    genres: List[str] = Field(default_factory=list)
    types: List[str] = Field(default_factory=list)


class PlaylistCreateRequest(PlaylistCreate):
    """Request body for POST /api/playlist."""
    owner_id: uuid.UUID = Field(description="User that will own the playlist")
