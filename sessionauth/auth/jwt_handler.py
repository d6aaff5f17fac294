"""
JWT token handler.

Signs and validates the access/refresh token pair. Access and refresh
tokens are signed with two independent secrets, so a token presented
against the wrong secret never verifies.
"""

import time
import uuid
import logging
from typing import Optional, Literal
from dataclasses import dataclass

from jose import jwt, JWTError

from ..config import TokenConfig, DEFAULT_ACCESS_TOKEN_SECRET, DEFAULT_REFRESH_TOKEN_SECRET

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"

TokenType = Literal["access", "refresh"]


@dataclass
class TokenClaims:
    """Decoded token claims."""
    id: str
    email: str
    exp: int  # Expiration timestamp
    iat: int  # Issued at timestamp
    token_type: str = "access"
    jti: Optional[str] = None  # Unique token id

    @classmethod
    def from_dict(cls, data: dict) -> "TokenClaims":
        return cls(
            id=data["id"],
            email=data["email"],
            exp=data["exp"],
            iat=data["iat"],
            token_type=data.get("token_type", "access"),
            jti=data.get("jti")
        )


class TokenCodec:
    """
    Compact signed tokens carrying claims and an absolute expiry.

    verify() never raises: bad signature, malformed payload and expiry all
    collapse to None.
    """

    def __init__(self, algorithm: str = ALGORITHM):
        self.algorithm = algorithm

    def issue(self, claims: dict, secret: str, ttl: int) -> str:
        """
        Sign claims into a token.

        Args:
            claims: Claims to embed
            secret: Signing secret
            ttl: Lifetime in seconds (negative values produce expired tokens)

        Returns:
            Encoded token string
        """
        now = int(time.time())
        payload = dict(claims)
        payload["iat"] = now
        payload["exp"] = now + ttl
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def verify(self, token: str, secret: str) -> Optional[dict]:
        """
        Verify a token and return its claims.

        Returns:
            Claims dict if valid, None if invalid or expired
        """
        if not token or not isinstance(token, str):
            return None

        try:
            data = jwt.decode(token, secret, algorithms=[self.algorithm])
        except JWTError as e:
            logger.debug(f"Token verification failed: {e}")
            return None

        exp = data.get("exp")
        if not isinstance(exp, int) or exp < int(time.time()):
            logger.debug("Token expired")
            return None

        return data


class JWTHandler:
    """
    Handles access and refresh token generation and validation.

    Supports:
    - Access tokens (short-lived, bearer header)
    - Refresh tokens (long-lived, tracked server-side)
    """

    def __init__(self, config: Optional[TokenConfig] = None, codec: Optional[TokenCodec] = None):
        """
        Initialize JWT handler.

        Args:
            config: Secrets and lifetimes (loads from env if not provided)
            codec: Token codec (default HS256)
        """
        self.config = config or TokenConfig()
        self.codec = codec or TokenCodec()

        if self.config.access_secret == self.config.refresh_secret:
            raise ValueError("Access and refresh token secrets must differ")

        if (
            self.config.access_secret == DEFAULT_ACCESS_TOKEN_SECRET
            or self.config.refresh_secret == DEFAULT_REFRESH_TOKEN_SECRET
        ):
            logger.warning(
                "Using default token secrets. "
                "Set ACCESS_TOKEN_SECRET and REFRESH_TOKEN_SECRET in production!"
            )

    def _claims(self, user_id: str, email: str, token_type: TokenType) -> dict:
        return {
            "id": user_id,
            "email": email,
            "token_type": token_type,
            "jti": uuid.uuid4().hex
        }

    def create_access_token(self, user_id: str, email: str, expires_in: Optional[int] = None) -> str:
        """
        Create an access token.

        Args:
            user_id: Unique user identifier
            email: User's email
            expires_in: Custom expiration in seconds (default: 15 minutes)
        """
        ttl = self.config.access_expire_seconds if expires_in is None else expires_in
        token = self.codec.issue(self._claims(user_id, email, "access"), self.config.access_secret, ttl)
        logger.debug(f"Created access token for user {user_id}, expires in {ttl}s")
        return token

    def create_refresh_token(self, user_id: str, email: str, expires_in: Optional[int] = None) -> str:
        """
        Create a refresh token.

        Args:
            user_id: Unique user identifier
            email: User's email
            expires_in: Custom expiration in seconds (default: 7 days)
        """
        ttl = self.config.refresh_expire_seconds if expires_in is None else expires_in
        token = self.codec.issue(self._claims(user_id, email, "refresh"), self.config.refresh_secret, ttl)
        logger.debug(f"Created refresh token for user {user_id}, expires in {ttl}s")
        return token

    def create_token_pair(self, user_id: str, email: str) -> tuple[str, str]:
        """
        Create both access and refresh tokens.

        Returns:
            Tuple of (access_token, refresh_token)
        """
        access = self.create_access_token(user_id, email)
        refresh = self.create_refresh_token(user_id, email)
        return access, refresh

    def _verify(self, token: str, secret: str, token_type: TokenType) -> Optional[TokenClaims]:
        data = self.codec.verify(token, secret)
        if data is None:
            return None

        if data.get("token_type") != token_type:
            logger.warning(f"Rejected token of type {data.get('token_type')!r}, expected {token_type!r}")
            return None

        try:
            return TokenClaims.from_dict(data)
        except (KeyError, TypeError) as e:
            logger.debug(f"Malformed token claims: {e}")
            return None

    def verify_access_token(self, token: str) -> Optional[TokenClaims]:
        """Verify an access token. Returns claims or None."""
        return self._verify(token, self.config.access_secret, "access")

    def verify_refresh_token(self, token: str) -> Optional[TokenClaims]:
        """Verify a refresh token. Returns claims or None."""
        return self._verify(token, self.config.refresh_secret, "refresh")
