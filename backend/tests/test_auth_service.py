"""
TipShare Backend: Identity Service Unit Tests
===============================================

What we test:
    ✅ Registration persists the user and never returns the password
    ✅ Duplicate usernames are rejected without writing
    ✅ Missing credentials raise ValidationError before touching the store
    ✅ Login returns a token that verifies to the same identity
    ✅ Login failures are indistinguishable and never write
"""

from unittest.mock import patch

import pytest

from tipshare.exceptions import ConflictError, UnauthorizedError, ValidationError


class TestRegister:

    @pytest.mark.asyncio
    async def test_register_returns_public_profile(self, identity_service, store):
        user = await identity_service.register("alice", "pw123", "https://img/alice.png")

        assert user.username == "alice"
        assert user.profile_picture == "https://img/alice.png"
        assert "password" not in user.model_dump(by_alias=True)

        document = await store.load()
        assert [u.id for u in document.users] == [user.id]
        assert document.users[0].password == "pw123"

    @pytest.mark.asyncio
    async def test_profile_picture_defaults_to_empty(self, identity_service):
        user = await identity_service.register("alice", "pw123")

        assert user.model_dump(by_alias=True)["profilePicture"] == ""

    @pytest.mark.asyncio
    async def test_duplicate_username_rejected(self, identity_service, store):
        await identity_service.register("alice", "pw123")

        with pytest.raises(ConflictError) as exc_info:
            await identity_service.register("alice", "another")

        assert exc_info.value.message == "Username already taken"
        assert len((await store.load()).users) == 1

    @pytest.mark.asyncio
    async def test_usernames_are_case_sensitive(self, identity_service, store):
        first = await identity_service.register("alice", "pw")
        second = await identity_service.register("Alice", "pw")

        assert first.id != second.id
        assert len((await store.load()).users) == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("username,password", [
        (None, "pw"),
        ("alice", None),
        ("", "pw"),
        ("alice", ""),
    ])
    async def test_missing_credentials_rejected(self, identity_service, data_file, username, password):
        with pytest.raises(ValidationError):
            await identity_service.register(username, password)

        assert not data_file.exists()


class TestLogin:

    @pytest.mark.asyncio
    async def test_login_token_identifies_user(self, identity_service, signer):
        registered = await identity_service.register("alice", "pw123")

        result = await identity_service.login("alice", "pw123")

        identity = signer.verify(result.token)
        assert identity.user_id == registered.id
        assert identity.username == "alice"
        assert result.user == registered

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_user_look_the_same(self, identity_service):
        await identity_service.register("alice", "pw123")

        with pytest.raises(UnauthorizedError) as wrong_password:
            await identity_service.login("alice", "nope")
        with pytest.raises(UnauthorizedError) as unknown_user:
            await identity_service.login("mallory", "pw123")

        assert wrong_password.value.message == unknown_user.value.message == "Invalid username or password"

    @pytest.mark.asyncio
    async def test_login_never_saves(self, identity_service, store):
        await identity_service.register("alice", "pw123")

        with patch.object(store, "save", wraps=store.save) as save:
            await identity_service.login("alice", "pw123")
            with pytest.raises(UnauthorizedError):
                await identity_service.login("alice", "wrong")

        save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_login_requires_both_fields(self, identity_service):
        with pytest.raises(ValidationError):
            await identity_service.login("alice", None)
