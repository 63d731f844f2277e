"""
Mixtape Backend — User Schemas
===============================

What:  Request bodies, stored-record view, redacted response, and the
       composite detailed-user view.

Two record shapes exist on purpose:
    - UserRecord:   what UserService returns. Mirrors the stored row and
                    therefore carries the password hash.
    - UserResponse: what the HTTP layer sends. Same fields minus `password`.
"""

import re
import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from mixtape.schemas.playlist import PlaylistView
from mixtape.schemas.song import UserMini

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


def normalize_email(v: str) -> str:
    """Canonical stored form of an email: trimmed and lowercased."""
    return v.strip().lower()


def _check_email(v: str) -> str:
    v = v.strip()
    if not EMAIL_PATTERN.match(v):
        raise ValueError(f"'{v}' is not a valid email address")
    return normalize_email(v)


def _check_username(v: str) -> str:
    v = v.strip()
    if not USERNAME_PATTERN.match(v):
        raise ValueError("Username may only contain letters, digits, '_', '.' and '-'")
    return v


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class UserSignup(BaseModel):
    username: str = Field(min_length=3, max_length=50)
    email: str = Field(max_length=255)
    password: str = Field(min_length=8, max_length=128, description="Plaintext; hashed before storage")
    img_url: Optional[str] = Field(default=None, max_length=512)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _check_email(v)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        return _check_username(v)


class UserUpdate(BaseModel):
    """
    Partial update. Only fields the client actually sent are applied
    (`model_dump(exclude_unset=True)`), so an explicit null clears img_url
    while an omitted field is left alone.
    """
    username: Optional[str] = Field(default=None, min_length=3, max_length=50)
    email: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = Field(default=None, min_length=8, max_length=128)
    img_url: Optional[str] = Field(default=None, max_length=512)
    is_admin: Optional[bool] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: Optional[str]) -> Optional[str]:
        return _check_email(v) if v is not None else v

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: Optional[str]) -> Optional[str]:
        return _check_username(v) if v is not None else v


class UserFilters(BaseModel):
    """Independent equality filters, combined with AND. None = not filtered."""
    email: Optional[str] = None
    username: Optional[str] = None

    @field_validator("email")
    @classmethod
    def normalize_email_filter(cls, v: Optional[str]) -> Optional[str]:
        # Compared against the stored (normalized) column
        return normalize_email(v) if v is not None else v


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class UserResponse(BaseModel):
    id: uuid.UUID
    username: str
    email: str
    img_url: Optional[str] = None
    is_admin: bool = False
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class UserRecord(UserResponse):
    """Stored user including the password hash. Never return this over HTTP."""
    password: str


class UserQueryResponse(BaseModel):
    users: List[UserRecord]
    total: int


class UserListResponse(BaseModel):
    """HTTP shape of a user query (hashes stripped)."""
    users: List[UserResponse]
    total: int


class FriendRelation(BaseModel):
    """
    One friend relation as seen from the detailed user.

    `friend` is always the other party: the addressee for outgoing
    requests, the requester for incoming ones.
    """
    id: uuid.UUID
    status: str
    created_at: datetime
    friend: UserMini


class DetailedUser(BaseModel):
    """
    What:  Fully assembled user graph for the profile/library screen.
    Who:   Returned by GET /api/user/{id}/detailed.

    `playlists` holds owned playlists followed by liked playlists and never
    contains a "Liked Songs" playlist; that one is `liked_songs_playlist`.
    """
    id: uuid.UUID
    username: str
    email: str
    img_url: Optional[str] = None
    is_admin: bool
    playlists: List[PlaylistView]
    liked_songs_playlist: PlaylistView
    friends: List[FriendRelation]
    friends_request: List[FriendRelation]
