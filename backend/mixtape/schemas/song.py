"""
Mixtape Backend — Song Schemas
===============================

What:  Flat song view returned inside playlists and the detailed user view.
How:   Built by SongService.song_data_to_song from loaded ORM rows; the
       per-viewer like row collapses to `is_liked`.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class UserMini(BaseModel):
    """Public identity of another user (adder of a song, friend peer)."""
    id: uuid.UUID
    username: str
    img_url: Optional[str] = None

    model_config = {"from_attributes": True}


class SongView(BaseModel):
    id: uuid.UUID = Field(description="Unique song identifier")
    name: str
    artist: str
    img_url: Optional[str] = None
    duration: int = Field(description="Track length in seconds")
    genres: List[str] = Field(default_factory=list)
    youtube_id: str = Field(description="External media identifier")
    added_at: datetime
    added_by: Optional[UserMini] = Field(
        default=None,
        description="User who added the song (null if that account was deleted)",
    )
    is_liked: bool = Field(
        default=False,
        description="Whether the requesting user has liked this song",
    )
