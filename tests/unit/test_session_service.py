"""
Unit tests for the session manager.

Tests token pair issue, the active refresh-token set, rotation and revoke.
"""

import pytest

from sessionauth.auth import User


@pytest.fixture
def user():
    return User(name="A", email="a@x.com", mobile="111", password_hash="x", is_verified=True)


class TestSessionLogin:
    """Tests for SessionManager.login."""

    @pytest.mark.unit
    async def test_login_records_refresh_token(self, session_manager, store, user):
        tokens = await session_manager.login(user)

        assert await store.refresh_tokens.load_all() == [tokens.refresh_token]
        assert await session_manager.is_active(tokens.refresh_token) is True

    @pytest.mark.unit
    async def test_tokens_verify_under_their_secrets(self, session_manager, jwt_handler, user):
        tokens = await session_manager.login(user)

        access = jwt_handler.verify_access_token(tokens.access_token)
        refresh = jwt_handler.verify_refresh_token(tokens.refresh_token)

        assert access.id == user.id
        assert access.email == "a@x.com"
        assert refresh.id == user.id
        assert jwt_handler.verify_access_token(tokens.refresh_token) is None

    @pytest.mark.unit
    async def test_authenticate(self, session_manager, user):
        tokens = await session_manager.login(user)

        claims = session_manager.authenticate(tokens.access_token)

        assert claims.id == user.id
        assert session_manager.authenticate("garbage") is None


class TestSessionRefresh:
    """Tests for SessionManager.refresh."""

    @pytest.mark.unit
    async def test_refresh_returns_new_pair(self, session_manager, store, user):
        """Test that rotation adds the new token and keeps the old one."""
        tokens = await session_manager.login(user)

        rotated = await session_manager.refresh(tokens.refresh_token)

        assert rotated is not None
        assert rotated.refresh_token != tokens.refresh_token
        assert rotated.access_token != tokens.access_token
        assert await store.refresh_tokens.load_all() == [
            tokens.refresh_token,
            rotated.refresh_token,
        ]
        assert session_manager.authenticate(rotated.access_token).id == user.id

    @pytest.mark.unit
    async def test_valid_token_not_in_set_fails(self, session_manager, jwt_handler, store, user):
        """Test that a correctly signed but unknown token is rejected."""
        token = jwt_handler.create_refresh_token(user.id, user.email)

        assert await session_manager.is_active(token) is False
        assert await session_manager.refresh(token) is None
        assert await store.refresh_tokens.load_all() == []

    @pytest.mark.unit
    async def test_tampered_token_removed_from_set(self, session_manager, store, user):
        """Test that an active token failing verification is purged."""
        tokens = await session_manager.login(user)
        other = await session_manager.login(user)
        tampered = tokens.refresh_token[:-5] + "xxxxx"
        await store.refresh_tokens.append(tampered)

        assert await session_manager.refresh(tampered) is None

        assert await store.refresh_tokens.load_all() == [
            tokens.refresh_token,
            other.refresh_token,
        ]

    @pytest.mark.unit
    async def test_expired_token_removed_from_set(self, session_manager, jwt_handler, store, user):
        expired = jwt_handler.create_refresh_token(user.id, user.email, expires_in=-1)
        await store.refresh_tokens.append(expired)

        assert await session_manager.refresh(expired) is None
        assert await store.refresh_tokens.load_all() == []

    @pytest.mark.unit
    async def test_access_token_cannot_refresh(self, session_manager, store, user):
        """Test that an access token placed in the set fails the refresh secret."""
        tokens = await session_manager.login(user)
        await store.refresh_tokens.append(tokens.access_token)

        assert await session_manager.refresh(tokens.access_token) is None
        assert tokens.access_token not in await store.refresh_tokens.load_all()


class TestSessionRevoke:
    """Tests for SessionManager.revoke."""

    @pytest.mark.unit
    async def test_revoke(self, session_manager, user):
        tokens = await session_manager.login(user)

        assert await session_manager.revoke(tokens.refresh_token) is True
        assert await session_manager.is_active(tokens.refresh_token) is False
        assert await session_manager.refresh(tokens.refresh_token) is None

    @pytest.mark.unit
    async def test_revoke_unknown(self, session_manager):
        assert await session_manager.revoke("unknown") is False

    @pytest.mark.unit
    async def test_is_active_empty(self, session_manager):
        assert await session_manager.is_active("") is False
