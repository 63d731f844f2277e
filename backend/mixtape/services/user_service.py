"""
Mixtape Backend — User Service
===============================

What:  CRUD over user accounts plus the "detailed user" composite read.
How:   Plain async methods over an AsyncSession. Playlist and song mapping
       is delegated to PlaylistService / SongService (constructor-injected).
Who:   Called by the user route handlers.

Detailed-user flow (get_detailed_user):
    ┌───────────────┐   ┌──────────────────┐   ┌────────────────────┐
    │ load user     │──▶│ flatten playlists │──▶│ split off          │
    │ graph (1 qry) │   │ and liked songs   │   │ "Liked Songs"      │
    └───────────────┘   └──────────────────┘   └─────────┬──────────┘
                                                         │ missing?
                                                ┌────────▼──────────┐
                                                │ create default    │
                                                │ likes playlist    │
                                                └────────┬──────────┘
                                                         ▼
                                          songs := liked-song views
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from mixtape.exceptions import (
    ConflictError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from mixtape.models.song import SongLike
from mixtape.models.playlist import PlaylistLike
from mixtape.models.user import Friend, User
from mixtape.schemas.song import UserMini
from mixtape.schemas.user import (
    DetailedUser,
    FriendRelation,
    UserFilters,
    UserQueryResponse,
    UserRecord,
    UserSignup,
    UserUpdate,
    normalize_email,
)
from mixtape.security import hash_password
from mixtape.services.playlist_service import PlaylistService, playlist_service
from mixtape.services.song_service import SongService, song_service
from mixtape.services.util import LIKED_SONGS_PLAYLIST_NAME, get_default_likes_playlist

logger = logging.getLogger(__name__)

# Columns that exist NOT NULL on users; an explicit null in an update is rejected
NON_NULLABLE_FIELDS = ("username", "email", "password", "is_admin")


class UserService:
    """
    Business logic layer for user operations.

    Error Handling Strategy:
        IntegrityError on write → ConflictError (email/username taken)
        Other SQLAlchemyError   → DatabaseError (details logged, not returned)
        Application errors propagate unchanged.
    """

    def __init__(
        self,
        playlists: Optional[PlaylistService] = None,
        songs: Optional[SongService] = None,
    ):
        self.playlists = playlists or playlist_service
        self.songs = songs or song_service

    # ── Create ────────────────────────────────────────────────────────────

    async def create(self, db: AsyncSession, signup: UserSignup) -> UserRecord:
        """
        Register a new user.

        The plaintext password is replaced by its argon2 hash before the row
        is built. The returned record still carries that hash; routes respond
        with UserResponse, which omits it.

        Raises:
            ValidationError: Blank password
            ConflictError: Email or username already registered (→ 409)
            DatabaseError: Insert failed for another reason (→ 500)
        """
        self._check_password(signup.password)

        user = User(
            username=signup.username,
            email=signup.email,
            password=hash_password(signup.password),
            img_url=signup.img_url,
        )
        db.add(user)
        await self._flush(db, action="create user")

        logger.info("User created: %s (%s)", user.id, user.username)
        return UserRecord.model_validate(user)

    # ── Lookups ───────────────────────────────────────────────────────────

    async def get_by_id(self, db: AsyncSession, user_id: uuid.UUID) -> Optional[UserRecord]:
        return await self._get_one(db, User.id == user_id)

    async def get_by_username(self, db: AsyncSession, username: str) -> Optional[UserRecord]:
        return await self._get_one(db, User.username == username)

    async def get_by_email(self, db: AsyncSession, email: str) -> Optional[UserRecord]:
        return await self._get_one(db, User.email == normalize_email(email))

    async def _get_one(self, db: AsyncSession, criterion) -> Optional[UserRecord]:
        """Single-row lookup on a unique column. None when nothing matches."""
        try:
            result = await db.execute(select(User).where(criterion))
            user = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error looking up user: %s", str(e))
            raise DatabaseError(message="Could not retrieve the user. Please try again.")

        return UserRecord.model_validate(user) if user is not None else None

    # ── Update / Remove ───────────────────────────────────────────────────

    async def update(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        data: UserUpdate,
    ) -> UserRecord:
        """
        Apply a partial update to an existing user.

        Only fields present in the request are written; an empty update
        returns the record unchanged. A new password is checked and hashed
        like on signup.

        Raises:
            NotFoundError: No user with this id (→ 404)
            ValidationError: Null for a required field, or blank password
            ConflictError: New email/username already taken (→ 409)
        """
        user = await self._get_model(db, user_id)

        fields = data.model_dump(exclude_unset=True)
        if not fields:
            return UserRecord.model_validate(user)
        for name in NON_NULLABLE_FIELDS:
            if name in fields and fields[name] is None:
                raise ValidationError(message=f"'{name}' cannot be null", field=name)

        if "password" in fields:
            self._check_password(fields["password"])
            fields["password"] = hash_password(fields["password"])

        for name, value in fields.items():
            setattr(user, name, value)
        await self._flush(db, action="update user")

        logger.info("User updated: %s (fields: %s)", user_id, ", ".join(sorted(fields)))
        return UserRecord.model_validate(user)

    async def remove(self, db: AsyncSession, user_id: uuid.UUID) -> bool:
        """
        Delete a user. Dependent rows are removed by the database
        (ON DELETE CASCADE).

        Raises:
            NotFoundError: No user with this id (→ 404)
        """
        try:
            result = await db.execute(delete(User).where(User.id == user_id))
        except SQLAlchemyError as e:
            logger.error("Database error deleting user %s: %s", user_id, str(e))
            raise DatabaseError(
                message="Could not delete the user. Please try again.",
                context={"user_id": str(user_id)},
            )

        if result.rowcount == 0:
            raise NotFoundError(resource="user", resource_id=str(user_id))

        logger.info("User removed: %s", user_id)
        return True

    # ── Query ─────────────────────────────────────────────────────────────

    async def query(
        self,
        db: AsyncSession,
        filters: Optional[UserFilters] = None,
    ) -> UserQueryResponse:
        """
        All users matching every filter that is set.

        Filters are exact-match equality and independent (AND). Empty or
        missing filters match everything; there is no pagination.
        """
        filters = filters or UserFilters()
        stmt = select(User)
        if filters.email:
            stmt = stmt.where(User.email == filters.email)
        if filters.username:
            stmt = stmt.where(User.username == filters.username)
        stmt = stmt.order_by(User.created_at)

        try:
            result = await db.execute(stmt)
            users = [UserRecord.model_validate(user) for user in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Database error querying users: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve users. Please try again.",
                context={"error_type": type(e).__name__},
            )

        return UserQueryResponse(users=users, total=len(users))

    # ── Detailed User ─────────────────────────────────────────────────────

    async def get_detailed_user(self, db: AsyncSession, owner_id: uuid.UUID) -> DetailedUser:
        """
        Assemble the full music/social graph of a user.

        Workflow Steps:
            1. Load the user with owned playlists, liked songs, liked
               playlists and both friend collections. Like flags are scoped
               to the owner (the viewer of their own profile).
            2. Flatten owned and liked playlists.
            3. Flatten liked songs (like order).
            4. Pull every owned "Liked Songs" playlist out of the list; the
               first one is kept as the managed likes playlist.
            5. None found → create the default one (only write in this call).
            6. Its songs are replaced by the liked-song views; whatever songs
               are attached to that playlist row are ignored.
            7. Return owned + liked playlists, the likes playlist, scalars
               and friends.

        Args:
            db: Async database session
            owner_id: User whose profile is assembled (also the viewer)

        Returns:
            DetailedUser

        Raises:
            NotFoundError: No user with this id (→ 404)
            DatabaseError: Loading or the likes-playlist insert failed (→ 500).
                No compensation happens if the insert fails.
        """
        # ── Step 1: Load the user graph ───────────────────────────────────
        playlist_options = self.playlists.load_options(owner_id)
        stmt = (
            select(User)
            .where(User.id == owner_id)
            .options(
                selectinload(User.playlists).options(*playlist_options),
                selectinload(User.song_likes)
                .selectinload(SongLike.song)
                .options(*self.songs.load_options(owner_id)),
                selectinload(User.playlist_likes)
                .selectinload(PlaylistLike.playlist)
                .options(*playlist_options),
                selectinload(User.friends).selectinload(Friend.friend),
                selectinload(User.friends_request).selectinload(Friend.user),
            )
            .execution_options(populate_existing=True)
        )
        try:
            result = await db.execute(stmt)
            user = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error loading detailed user %s: %s", owner_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve the user. Please try again.",
                context={"user_id": str(owner_id)},
            )

        if user is None:
            raise NotFoundError(resource="user", resource_id=str(owner_id))

        # ── Steps 2-3: Flatten rows into views ────────────────────────────
        owned = self.playlists.playlist_data_to_playlist(user.playlists)
        liked = self.playlists.playlist_data_to_playlist(
            like.playlist for like in user.playlist_likes
        )
        liked_songs = self.songs.song_data_to_song(like.song for like in user.song_likes)

        # ── Step 4: Split off the managed likes playlist ──────────────────
        liked_songs_playlist = None
        playlists = []
        for playlist in owned:
            if playlist.name == LIKED_SONGS_PLAYLIST_NAME:
                if liked_songs_playlist is None:
                    liked_songs_playlist = playlist
                continue
            playlists.append(playlist)
        playlists.extend(p for p in liked if p.name != LIKED_SONGS_PLAYLIST_NAME)

        # ── Step 5: Backfill if the user never had one ────────────────────
        if liked_songs_playlist is None:
            logger.info("User %s has no '%s' playlist; creating it", user.id, LIKED_SONGS_PLAYLIST_NAME)
            liked_songs_playlist = await self.playlists.create(
                db, get_default_likes_playlist(user.id), user.id
            )

        # ── Step 6: Like associations are the source of truth ─────────────
        liked_songs_playlist.songs = liked_songs

        # ── Step 7: Compose ───────────────────────────────────────────────
        return DetailedUser(
            id=user.id,
            username=user.username,
            email=user.email,
            img_url=user.img_url,
            is_admin=user.is_admin,
            playlists=playlists,
            liked_songs_playlist=liked_songs_playlist,
            friends=[self._friend_relation(row, row.friend) for row in user.friends],
            friends_request=[self._friend_relation(row, row.user) for row in user.friends_request],
        )

    # ── Helpers ───────────────────────────────────────────────────────────

    @staticmethod
    def _check_password(password: str) -> None:
        if not password.strip():
            raise ValidationError(message="Password must not be blank", field="password")

    @staticmethod
    def _friend_relation(row: Friend, peer: User) -> FriendRelation:
        return FriendRelation(
            id=row.id,
            status=row.status,
            created_at=row.created_at,
            friend=UserMini.model_validate(peer),
        )

    async def _get_model(self, db: AsyncSession, user_id: uuid.UUID) -> User:
        """Find-or-throw on the ORM row."""
        try:
            user = await db.get(User, user_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching user %s: %s", user_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the user. Please try again.",
                context={"user_id": str(user_id)},
            )
        if user is None:
            raise NotFoundError(resource="user", resource_id=str(user_id))
        return user

    async def _flush(self, db: AsyncSession, action: str) -> None:
        """Flush pending writes, translating store errors."""
        try:
            await db.flush()
        except IntegrityError as e:
            logger.warning("Unique constraint violated during %s: %s", action, str(e.orig))
            raise ConflictError(
                message="A user with this email or username already exists",
                fields=["email", "username"],
            )
        except SQLAlchemyError as e:
            logger.error("Database error during %s: %s", action, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the user. Please try again.",
                context={"error_type": type(e).__name__},
            )


# ── Singleton Instance ────────────────────────────────────────────────────
user_service = UserService()
