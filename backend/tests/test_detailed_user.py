"""
Mixtape Backend — Detailed User Tests
======================================

What:  Tests for UserService.get_detailed_user.
How:   Seeds a small music/social graph into in-memory SQLite and checks the
       assembled DetailedUser.

What we test:
    ✅ "Liked Songs" is created once, then reused
    ✅ Its songs are the user's liked songs, in like order
    ✅ "Liked Songs" never appears in `playlists`
    ✅ Owned playlists come before liked ones
    ✅ Like flags are scoped to the profile owner
    ✅ Friends and incoming requests expose the other party
    ✅ Unknown user → NotFoundError; failed backfill → DatabaseError
"""

from uuid import uuid4

import pytest
from sqlalchemy import func, select

from mixtape.exceptions import DatabaseError, NotFoundError
from mixtape.models import Playlist
from mixtape.services.playlist_service import PlaylistService
from mixtape.services.user_service import UserService


async def count_liked_songs_playlists(db, owner_id):
    result = await db.execute(
        select(func.count())
        .select_from(Playlist)
        .where(Playlist.owner_id == owner_id, Playlist.name == "Liked Songs")
    )
    return result.scalar_one()


class FailingPlaylistService(PlaylistService):
    """Playlist service whose inserts always fail."""

    async def create(self, db, descriptor, owner_id):
        raise DatabaseError(message="insert failed")


class TestLikedSongsBackfill:
    """The managed "Liked Songs" playlist."""

    def setup_method(self):
        self.service = UserService()

    @pytest.mark.asyncio
    async def test_creates_likes_playlist_with_liked_songs(self, db_session, seed):
        user = await seed.user("alice")
        s1 = await seed.song("one")
        s2 = await seed.song("two")
        await seed.song("never-liked")
        await seed.like_song(user, s1)
        await seed.like_song(user, s2)

        detailed = await self.service.get_detailed_user(db_session, user.id)

        likes = detailed.liked_songs_playlist
        assert likes.name == "Liked Songs"
        assert likes.is_public is False
        assert likes.types == ["Liked Songs"]
        assert [s.id for s in likes.songs] == [s1.id, s2.id]
        assert all(s.is_liked for s in likes.songs)
        assert await count_liked_songs_playlists(db_session, user.id) == 1

    @pytest.mark.asyncio
    async def test_user_without_likes_gets_empty_likes_playlist(self, db_session, seed):
        user = await seed.user("bob")

        detailed = await self.service.get_detailed_user(db_session, user.id)

        assert detailed.liked_songs_playlist.songs == []
        assert detailed.playlists == []

    @pytest.mark.asyncio
    async def test_second_call_reuses_playlist(self, db_session, seed):
        user = await seed.user("carol")

        first = await self.service.get_detailed_user(db_session, user.id)
        second = await self.service.get_detailed_user(db_session, user.id)

        assert first.liked_songs_playlist.id == second.liked_songs_playlist.id
        assert await count_liked_songs_playlists(db_session, user.id) == 1
        assert all(p.name != "Liked Songs" for p in second.playlists)

    @pytest.mark.asyncio
    async def test_existing_playlist_songs_are_replaced_by_likes(self, db_session, seed):
        user = await seed.user("dave")
        stale = await seed.song("stale")
        liked = await seed.song("liked")
        existing = await seed.playlist(user, "Liked Songs", is_public=False)
        await seed.add_song(existing, stale)
        await seed.like_song(user, liked)

        detailed = await self.service.get_detailed_user(db_session, user.id)

        assert detailed.liked_songs_playlist.id == existing.id
        assert [s.id for s in detailed.liked_songs_playlist.songs] == [liked.id]
        assert await count_liked_songs_playlists(db_session, user.id) == 1

    @pytest.mark.asyncio
    async def test_name_match_is_case_sensitive(self, db_session, seed):
        user = await seed.user("erin")
        await seed.playlist(user, "liked songs")

        detailed = await self.service.get_detailed_user(db_session, user.id)

        assert [p.name for p in detailed.playlists] == ["liked songs"]
        assert detailed.liked_songs_playlist.name == "Liked Songs"
        assert await count_liked_songs_playlists(db_session, user.id) == 1

    @pytest.mark.asyncio
    async def test_duplicate_likes_playlists_first_one_wins(self, db_session, seed):
        user = await seed.user("fay")
        first = await seed.playlist(user, "Liked Songs")
        await seed.playlist(user, "Liked Songs")

        detailed = await self.service.get_detailed_user(db_session, user.id)

        assert detailed.liked_songs_playlist.id == first.id
        assert detailed.playlists == []

    @pytest.mark.asyncio
    async def test_failed_backfill_raises_database_error(self, db_session, seed):
        user = await seed.user("gus")
        service = UserService(playlists=FailingPlaylistService())

        with pytest.raises(DatabaseError):
            await service.get_detailed_user(db_session, user.id)


class TestDetailedUserPlaylists:
    """Owned and liked playlists."""

    def setup_method(self):
        self.service = UserService()

    @pytest.mark.asyncio
    async def test_owned_then_liked(self, db_session, seed):
        user = await seed.user("hana")
        other = await seed.user("ivan")
        mine_a = await seed.playlist(user, "Mine A")
        mine_b = await seed.playlist(user, "Mine B")
        theirs = await seed.playlist(other, "Theirs")
        await seed.like_playlist(user, theirs)

        detailed = await self.service.get_detailed_user(db_session, user.id)

        assert [p.id for p in detailed.playlists] == [mine_a.id, mine_b.id, theirs.id]
        assert detailed.playlists[2].is_liked is True
        assert detailed.playlists[0].is_liked is False

    @pytest.mark.asyncio
    async def test_liked_foreign_likes_playlist_is_excluded(self, db_session, seed):
        user = await seed.user("jade")
        other = await seed.user("kurt")
        foreign = await seed.playlist(other, "Liked Songs", is_public=True)
        await seed.like_playlist(user, foreign)

        detailed = await self.service.get_detailed_user(db_session, user.id)

        assert detailed.playlists == []
        assert detailed.liked_songs_playlist.id != foreign.id

    @pytest.mark.asyncio
    async def test_song_flags_are_scoped_to_owner(self, db_session, seed):
        user = await seed.user("liam")
        other = await seed.user("mona")
        mine = await seed.song("mine", added_by=user)
        theirs = await seed.song("theirs", added_by=other)
        playlist = await seed.playlist(user, "Mixed")
        await seed.add_song(playlist, mine, added_by=user)
        await seed.add_song(playlist, theirs, added_by=other)
        await seed.like_song(user, mine)
        await seed.like_song(other, theirs)

        detailed = await self.service.get_detailed_user(db_session, user.id)

        songs = detailed.playlists[0].songs
        assert [s.id for s in songs] == [mine.id, theirs.id]
        assert songs[0].is_liked is True
        assert songs[1].is_liked is False
        assert songs[1].added_by.username == "mona"
        assert songs[0].added_by.username == "liam"

    @pytest.mark.asyncio
    async def test_shares_are_included(self, db_session, seed):
        user = await seed.user("nora")
        friend = await seed.user("otto")
        playlist = await seed.playlist(user, "Shared")
        await seed.share(playlist, friend)

        detailed = await self.service.get_detailed_user(db_session, user.id)

        assert [s.user_id for s in detailed.playlists[0].shares] == [friend.id]


class TestDetailedUserProfile:
    """Scalars and friend relations."""

    def setup_method(self):
        self.service = UserService()

    @pytest.mark.asyncio
    async def test_scalars_copied(self, db_session, seed):
        user = await seed.user("pia", img_url="https://img.example.com/pia.png", is_admin=True)

        detailed = await self.service.get_detailed_user(db_session, user.id)

        assert detailed.id == user.id
        assert detailed.username == "pia"
        assert detailed.email == "pia@example.com"
        assert detailed.img_url == "https://img.example.com/pia.png"
        assert detailed.is_admin is True

    @pytest.mark.asyncio
    async def test_friend_relations_expose_other_party(self, db_session, seed):
        user = await seed.user("quinn")
        addressee = await seed.user("rosa")
        requester = await seed.user("sam")
        await seed.friend(user, addressee, status="accepted")
        await seed.friend(requester, user)

        detailed = await self.service.get_detailed_user(db_session, user.id)

        assert len(detailed.friends) == 1
        assert detailed.friends[0].friend.id == addressee.id
        assert detailed.friends[0].status == "accepted"
        assert len(detailed.friends_request) == 1
        assert detailed.friends_request[0].friend.id == requester.id
        assert detailed.friends_request[0].status == "pending"

    @pytest.mark.asyncio
    async def test_unknown_user_raises_not_found(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.get_detailed_user(db_session, uuid4())
