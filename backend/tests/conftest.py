"""
Mixtape Backend — Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: Mock async session (no database)
    ├── db_engine:       Fresh in-memory SQLite engine with all tables
    ├── db_session:      AsyncSession bound to db_engine
    ├── seed:            Row factory writing through db_session
    └── test_client:     HTTPX AsyncClient; the app's session dependency
                         is pointed at db_engine
"""

import os
import tempfile

# Override settings for testing BEFORE any mixtape imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="mixtape_test_"), "health.db"
)
os.environ["ENVIRONMENT"] = "development"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import mixtape.models  # noqa: F401  (registers tables on Base.metadata)
from mixtape.database import Base
from mixtape.models import (
    Friend,
    Playlist,
    PlaylistLike,
    PlaylistShare,
    PlaylistSong,
    Song,
    SongLike,
    User,
)


# ══════════════════════════════════════════════════════════════════════════
# Row factory
# ══════════════════════════════════════════════════════════════════════════

class Seeder:
    """
    Creates rows with an explicit, strictly increasing clock so that
    "like order" and "membership order" are deterministic in assertions.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    async def _save(self, row):
        self.session.add(row)
        await self.session.flush()
        return row

    async def user(self, username: str, **fields) -> User:
        fields.setdefault("email", f"{username}@example.com")
        fields.setdefault("password", "not-a-real-hash")
        fields.setdefault("created_at", self.tick())
        return await self._save(User(username=username, **fields))

    async def song(self, name: str, added_by: User = None, **fields) -> Song:
        fields.setdefault("artist", "Test Artist")
        fields.setdefault("duration", 180)
        fields.setdefault("genres", ["pop"])
        fields.setdefault("youtube_id", f"yt-{name}")
        fields.setdefault("added_at", self.tick())
        return await self._save(
            Song(name=name, added_by_id=added_by.id if added_by else None, **fields)
        )

    async def playlist(self, owner: User, name: str, **fields) -> Playlist:
        fields.setdefault("is_public", True)
        fields.setdefault("description", "")
        fields.setdefault("created_at", self.tick())
        return await self._save(Playlist(name=name, owner_id=owner.id, **fields))

    async def add_song(self, playlist: Playlist, song: Song, added_by: User = None) -> PlaylistSong:
        return await self._save(
            PlaylistSong(
                playlist_id=playlist.id,
                song_id=song.id,
                added_by_id=added_by.id if added_by else None,
                added_at=self.tick(),
            )
        )

    async def like_song(self, user: User, song: Song) -> SongLike:
        return await self._save(SongLike(user_id=user.id, song_id=song.id, created_at=self.tick()))

    async def like_playlist(self, user: User, playlist: Playlist) -> PlaylistLike:
        return await self._save(
            PlaylistLike(user_id=user.id, playlist_id=playlist.id, created_at=self.tick())
        )

    async def friend(self, user: User, friend: User, status: str = "pending") -> Friend:
        return await self._save(
            Friend(user_id=user.id, friend_id=friend.id, status=status, created_at=self.tick())
        )

    async def share(self, playlist: Playlist, user: User) -> PlaylistShare:
        return await self._save(
            PlaylistShare(playlist_id=playlist.id, user_id=user.id, created_at=self.tick())
        )


# ══════════════════════════════════════════════════════════════════════════
# Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    A MagicMock that simulates AsyncSession behavior.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = None
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.get = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def db_engine():
    """
    In-memory SQLite shared through StaticPool so every session in a test
    sees the same database. Foreign keys are enforced, so ON DELETE
    CASCADE / SET NULL behave as on PostgreSQL.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def seed(db_session):
    return Seeder(db_session)


@pytest_asyncio.fixture
async def test_client(db_engine):
    """
    HTTPX AsyncClient routed straight into the ASGI app.

    get_db_session is overridden with the same commit/rollback behaviour,
    bound to the test engine.
    """
    from mixtape.database import get_db_session
    from mixtape.main import app

    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_db_session():
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
