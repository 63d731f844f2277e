"""
Mixtape Backend — User Route Handlers
======================================

What:  CRUD endpoints for users plus the detailed profile view.
How:   Thin handlers: parse input, call UserService, shape the response.
       Every user payload leaving the API is a UserResponse (no password hash).
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from mixtape.database import get_db_session
from mixtape.exceptions import NotFoundError
from mixtape.schemas.common import ErrorResponse
from mixtape.schemas.user import (
    DetailedUser,
    UserFilters,
    UserListResponse,
    UserResponse,
    UserSignup,
    UserUpdate,
)
from mixtape.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/user", tags=["Users"])


@router.get(
    "",
    response_model=UserListResponse,
    summary="Query users by exact email and/or username",
)
async def query_users(
    email: str | None = Query(default=None, description="Exact email match"),
    username: str | None = Query(default=None, description="Exact username match"),
    db: AsyncSession = Depends(get_db_session),
) -> UserListResponse:
    """Both filters optional and ANDed; no filters returns every user."""
    result = await user_service.query(db, UserFilters(email=email, username=username))
    return UserListResponse(
        users=[UserResponse.model_validate(user.model_dump()) for user in result.users],
        total=result.total,
    )


@router.post(
    "",
    status_code=201,
    response_model=UserResponse,
    responses={
        201: {"description": "User created", "model": UserResponse},
        400: {"description": "Invalid input", "model": ErrorResponse},
        409: {"description": "Email or username taken", "model": ErrorResponse},
    },
    summary="Sign up a new user",
)
async def signup(
    body: UserSignup,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    record = await user_service.create(db, body)
    return UserResponse.model_validate(record.model_dump())


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    responses={404: {"description": "User not found", "model": ErrorResponse}},
    summary="Get a user by ID",
)
async def get_user(
    user_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    record = await user_service.get_by_id(db, user_id)
    if record is None:
        raise NotFoundError(resource="user", resource_id=str(user_id))
    return UserResponse.model_validate(record.model_dump())


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    responses={
        400: {"description": "Blank password or null required field", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
        409: {"description": "Email or username taken", "model": ErrorResponse},
    },
    summary="Partially update a user",
)
async def update_user(
    user_id: UUID,
    body: UserUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    record = await user_service.update(db, user_id, body)
    return UserResponse.model_validate(record.model_dump())


@router.delete(
    "/{user_id}",
    responses={404: {"description": "User not found", "model": ErrorResponse}},
    summary="Delete a user",
)
async def remove_user(
    user_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> dict:
    success = await user_service.remove(db, user_id)
    return {"success": success}


@router.get(
    "/{user_id}/detailed",
    response_model=DetailedUser,
    responses={404: {"description": "User not found", "model": ErrorResponse}},
    summary="Full profile: playlists, liked songs, liked playlists, friends",
)
async def get_detailed_user(
    user_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> DetailedUser:
    """
    Assemble the detailed view of a user.

    The first call for a user without a "Liked Songs" playlist creates it,
    so this GET can write; the session dependency commits that insert.
    """
    return await user_service.get_detailed_user(db, user_id)
