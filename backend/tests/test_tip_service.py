"""
TipShare Backend: Tip Service Unit Tests
==========================================

What we test:
    ✅ Created tips are listed in insertion order with their author profile
    ✅ Tips whose owner is missing show as "Unknown"
    ✅ Only the owner can update or delete a tip
    ✅ Denied and not-found operations never write
    ✅ Concurrent creates are all persisted under the serialized policy
"""

import asyncio
from unittest.mock import patch

import pytest
import pytest_asyncio

from tipshare.exceptions import ValidationError
from tipshare.models import StoreDocument, Tip, User
from tipshare.services.tip_service import UNKNOWN_AUTHOR, join_authors


@pytest_asyncio.fixture
async def alice(identity_service):
    return await identity_service.register("alice", "pw", "alice.png")


@pytest_asyncio.fixture
async def bob(identity_service):
    return await identity_service.register("bob", "pw")


class TestJoinAuthors:

    def test_joins_owner_profile(self):
        document = StoreDocument(
            users=[User(id="u1", username="alice", password="pw", profile_picture="a.png")],
            tips=[Tip(id="t1", title="hello", user_id="u1")],
        )

        [view] = join_authors(document)

        assert view.model_dump(by_alias=True) == {
            "id": "t1",
            "title": "hello",
            "userId": "u1",
            "username": "alice",
            "profilePicture": "a.png",
        }

    def test_dangling_owner_is_unknown(self):
        document = StoreDocument(tips=[Tip(id="t1", title="orphan", user_id="gone")])

        [view] = join_authors(document)

        assert view.username == UNKNOWN_AUTHOR
        assert view.profile_picture == ""
        assert view.user_id == "gone"


class TestCreateAndList:

    @pytest.mark.asyncio
    async def test_created_tips_are_listed_in_order(self, tip_service, alice):
        first = await tip_service.create_tip("Drink water", alice.id)
        second = await tip_service.create_tip("Sleep", alice.id)

        tips = await tip_service.list_tips()

        assert [(t.id, t.title, t.user_id) for t in tips] == [
            (first, "Drink water", alice.id),
            (second, "Sleep", alice.id),
        ]

    @pytest.mark.asyncio
    async def test_feed_shows_every_users_tips(self, tip_service, alice, bob):
        await tip_service.create_tip("from alice", alice.id)
        await tip_service.create_tip("from bob", bob.id)

        feed = await tip_service.list_feed()

        assert [(v.title, v.username, v.profile_picture) for v in feed] == [
            ("from alice", "alice", "alice.png"),
            ("from bob", "bob", ""),
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("title", [None, ""])
    async def test_empty_title_rejected(self, tip_service, data_file, title):
        with pytest.raises(ValidationError, match="title is required"):
            await tip_service.create_tip(title, "u1")

        assert not data_file.exists()

    @pytest.mark.asyncio
    async def test_concurrent_creates_are_all_kept(self, tip_service, alice):
        ids = await asyncio.gather(
            *(tip_service.create_tip(f"tip {n}", alice.id) for n in range(20))
        )

        stored = {tip.id for tip in await tip_service.list_tips()}
        assert stored == set(ids)


class TestOwnership:

    @pytest.mark.asyncio
    async def test_owner_can_update(self, tip_service, alice):
        tip_id = await tip_service.create_tip("old", alice.id)

        assert await tip_service.update_tip(tip_id, "new", alice.id) is True

        [tip] = await tip_service.list_tips()
        assert tip.title == "new"

    @pytest.mark.asyncio
    async def test_other_user_cannot_update(self, tip_service, store, alice, bob):
        tip_id = await tip_service.create_tip("alice's tip", alice.id)

        with patch.object(store, "save", wraps=store.save) as save:
            assert await tip_service.update_tip(tip_id, "hijacked", bob.id) is False
        save.assert_not_awaited()

        [tip] = await tip_service.list_tips()
        assert tip.title == "alice's tip"

    @pytest.mark.asyncio
    async def test_owner_can_delete(self, tip_service, alice):
        tip_id = await tip_service.create_tip("bye", alice.id)

        assert await tip_service.delete_tip(tip_id, alice.id) is True
        assert await tip_service.list_tips() == []

    @pytest.mark.asyncio
    async def test_other_user_cannot_delete(self, tip_service, alice, bob):
        tip_id = await tip_service.create_tip("stays", alice.id)

        assert await tip_service.delete_tip(tip_id, bob.id) is False
        assert [t.id for t in await tip_service.list_tips()] == [tip_id]

    @pytest.mark.asyncio
    async def test_unknown_id_does_not_write(self, tip_service, store, alice):
        await tip_service.create_tip("only one", alice.id)

        with patch.object(store, "save", wraps=store.save) as save:
            assert await tip_service.update_tip("no-such-id", "x", alice.id) is False
            assert await tip_service.delete_tip("no-such-id", alice.id) is False
        save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_requires_id_and_title(self, tip_service):
        with pytest.raises(ValidationError, match="id and title are required"):
            await tip_service.update_tip("t1", "", "u1")
        with pytest.raises(ValidationError, match="id and title are required"):
            await tip_service.update_tip(None, "title", "u1")

    @pytest.mark.asyncio
    async def test_delete_requires_id(self, tip_service):
        with pytest.raises(ValidationError, match="id is required"):
            await tip_service.delete_tip("", "u1")
