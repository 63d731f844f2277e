"""
Mixtape Backend — Playlist Route Handlers
==========================================

What:  Playlist detail (per-viewer like flags) and playlist creation.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from mixtape.database import get_db_session
from mixtape.schemas.common import ErrorResponse
from mixtape.schemas.playlist import PlaylistCreateRequest, PlaylistView
from mixtape.services.playlist_service import playlist_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/playlist", tags=["Playlists"])


@router.get(
    "/{playlist_id}",
    response_model=PlaylistView,
    responses={404: {"description": "Playlist not found", "model": ErrorResponse}},
    summary="Get a playlist with its songs",
)
async def get_playlist(
    playlist_id: UUID,
    viewer_id: UUID | None = Query(
        default=None,
        description="User whose like flags should be reported. Omit for anonymous (all false).",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> PlaylistView:
    return await playlist_service.get_by_id(db, playlist_id, viewer_id)


@router.post(
    "",
    status_code=201,
    response_model=PlaylistView,
    responses={404: {"description": "Owner not found", "model": ErrorResponse}},
    summary="Create an empty playlist",
)
async def create_playlist(
    body: PlaylistCreateRequest,
    db: AsyncSession = Depends(get_db_session),
) -> PlaylistView:
    return await playlist_service.create(db, body, body.owner_id)
