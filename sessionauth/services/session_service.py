"""
Session manager.

Issues access/refresh token pairs and keeps the active refresh-token set.
Membership in that set is the server-side authority for refresh tokens,
on top of signature and expiry checks.

Rotation mints a new pair but leaves the presented refresh token in the
active set, so a user may hold several valid refresh tokens at once.
Explicit revoke() is the only way an unexpired token leaves the set.
"""

import logging
from typing import Optional
from dataclasses import dataclass

from ..auth import JWTHandler, TokenClaims, User
from ..auth.store import CredentialStore

logger = logging.getLogger(__name__)


@dataclass
class AuthTokens:
    """Token pair handed to the caller."""
    access_token: str
    refresh_token: str


class SessionManager:
    """Access/refresh token lifecycle backed by the credential store."""

    def __init__(self, store: CredentialStore, jwt_handler: Optional[JWTHandler] = None):
        self.store = store
        self.jwt = jwt_handler or JWTHandler()

    def _pair(self, user_id: str, email: str) -> AuthTokens:
        access, refresh = self.jwt.create_token_pair(user_id, email)
        return AuthTokens(access_token=access, refresh_token=refresh)

    async def login(self, user: User) -> AuthTokens:
        """Issue a token pair for a user and record the refresh token."""
        tokens = self._pair(user.id, user.email)
        await self.store.refresh_tokens.append(tokens.refresh_token)
        logger.info(f"Session opened for user {user.id}")
        return tokens

    async def is_active(self, refresh_token: str) -> bool:
        """Check membership in the active refresh-token set."""
        if not refresh_token:
            return False
        return refresh_token in await self.store.refresh_tokens.load_all()

    async def refresh(self, refresh_token: str) -> Optional[AuthTokens]:
        """
        Exchange an active refresh token for a new pair.

        A token that is active but fails signature/expiry checks is removed
        from the active set.

        Returns:
            New AuthTokens, or None when the token is unknown or invalid
        """
        if not await self.is_active(refresh_token):
            logger.info("Refresh token not found in active set")
            return None

        claims = self.jwt.verify_refresh_token(refresh_token)
        if claims is None:
            await self.revoke(refresh_token)
            logger.info("Stale refresh token removed from active set")
            return None

        tokens = self._pair(claims.id, claims.email)
        await self.store.refresh_tokens.append(tokens.refresh_token)
        logger.info(f"Refresh token rotated for user {claims.id}")
        return tokens

    async def revoke(self, refresh_token: str) -> bool:
        """
        Remove a refresh token from the active set.

        Returns:
            True if the token was active
        """
        removed = await self.store.refresh_tokens.remove(lambda token: token == refresh_token)
        return removed > 0

    def authenticate(self, access_token: str) -> Optional[TokenClaims]:
        """Verify an access token. Returns claims or None."""
        return self.jwt.verify_access_token(access_token)
