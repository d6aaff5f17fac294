"""
User authentication service.

Request-level state machine tying the flows together:

    Unregistered -> Registered (unverified) -> Verified -> login sessions

Each operation reads the store, decides, mutates and persists before it
returns. Business-rule failures raise the matching AuthError subclass.
"""

import asyncio
import logging
from typing import Optional

from ..auth import PasswordHandler, TokenClaims, User
from ..auth.models import find_user, iter_users
from ..auth.store import CredentialStore
from ..errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from .otp_service import OtpEngine, OtpStatus
from .session_service import AuthTokens, SessionManager

logger = logging.getLogger(__name__)


def _require(fields: dict, message: str):
    if not all(fields.values()):
        raise ValidationError(message)


class UserAuthService:
    """
    Service for user authentication.

    Handles:
    - Registration (name, email, mobile, password) with OTP challenges
    - OTP verification
    - Login with email or mobile plus password
    - Token refresh and logout
    - Access-token authentication for protected resources
    """

    def __init__(
        self,
        store: CredentialStore,
        sessions: SessionManager,
        otp: OtpEngine,
        password_handler: Optional[PasswordHandler] = None
    ):
        """
        Initialize auth service.

        Args:
            store: Shared credential store
            sessions: Session manager (token pairs and active set)
            otp: OTP engine
            password_handler: Password hashing (bcrypt defaults if not provided)
        """
        self.store = store
        self.sessions = sessions
        self.otp = otp
        self.passwords = password_handler or PasswordHandler()

    async def signup(self, name: str, email: str, mobile: str, password: str) -> User:
        """
        Register a new, unverified user and send OTPs to both channels.

        Raises:
            ValidationError: a field is missing or empty
            ConflictError: email or mobile already registered
        """
        _require(
            {"name": name, "email": email, "mobile": mobile, "password": password},
            "All fields are required: name, email, mobile, password"
        )

        user = await self.create_user(name, email, mobile, password)

        await self.otp.issue(email, "email", user.id)
        await self.otp.issue(mobile, "mobile", user.id)

        logger.info(f"User registered: {user.id}")
        return user

    async def create_user(
        self,
        name: str,
        email: str,
        mobile: str,
        password: str,
        is_verified: bool = False
    ) -> User:
        """
        Persist a new user without issuing OTP challenges.

        Raises:
            ConflictError: email or mobile already registered
        """
        users = await self.store.users.load_all()
        existing = find_user(users, lambda u: u.email == email or u.mobile == mobile)
        if existing:
            raise ConflictError("User with this email or mobile already exists")

        password_hash = await asyncio.to_thread(self.passwords.hash, password)
        user = User(
            name=name,
            email=email,
            mobile=mobile,
            password_hash=password_hash,
            is_verified=is_verified
        )
        await self.store.users.append(user.to_dict())
        return user

    async def verify_otp(self, recipient: str, code: str) -> str:
        """
        Verify an OTP code.

        Returns:
            Id of the user the challenge belonged to

        Raises:
            ValidationError: missing input, unknown code or expired code
        """
        _require({"recipient": recipient, "otp": code}, "Recipient and OTP are required")

        result = await self.otp.verify(recipient, code)
        if result.status == OtpStatus.NOT_FOUND:
            raise ValidationError("Invalid OTP")
        if result.status == OtpStatus.EXPIRED:
            raise ValidationError("OTP has expired")

        return result.user_id

    async def login(self, identifier: str, password: str) -> AuthTokens:
        """
        Login with email or mobile and password.

        Raises:
            ValidationError: missing input
            NotFoundError: no user with that email or mobile
            ForbiddenError: account not verified yet
            UnauthorizedError: wrong password
        """
        _require(
            {"identifier": identifier, "password": password},
            "Identifier (email/mobile) and password are required"
        )

        users = await self.store.users.load_all()
        user = find_user(users, lambda u: u.matches_identifier(identifier))
        if user is None:
            raise NotFoundError("User not found")

        if not user.is_verified:
            raise ForbiddenError("Account not verified. Please verify your email/mobile with OTP.")

        matches = await asyncio.to_thread(self.passwords.verify, password, user.password_hash)
        if not matches:
            raise UnauthorizedError("Invalid credentials")

        if self.passwords.needs_rehash(user.password_hash):
            await self._rehash(user, password)

        tokens = await self.sessions.login(user)
        logger.info(f"User logged in: {user.id}")
        return tokens

    async def _rehash(self, user: User, password: str):
        """Store a fresh hash when the bcrypt work factor changed."""
        password_hash = await asyncio.to_thread(self.passwords.hash, password)

        def replace_hash(record: dict) -> dict:
            record["password_hash"] = password_hash
            return record

        await self.store.users.update(lambda record: record.get("id") == user.id, replace_hash)
        logger.info(f"Password rehashed for user {user.id}")

    async def refresh(self, refresh_token: str) -> AuthTokens:
        """
        Rotate a refresh token into a new token pair.

        Raises:
            UnauthorizedError: no token supplied
            ForbiddenError: token unknown, tampered or expired
        """
        if not refresh_token:
            raise UnauthorizedError("Refresh token required")

        tokens = await self.sessions.refresh(refresh_token)
        if tokens is None:
            raise ForbiddenError("Invalid or expired refresh token")
        return tokens

    async def logout(self, refresh_token: Optional[str]) -> bool:
        """Revoke a refresh token. Unknown or missing tokens are a no-op."""
        if not refresh_token:
            return False
        revoked = await self.sessions.revoke(refresh_token)
        if revoked:
            logger.info("Refresh token revoked on logout")
        return revoked

    def access(self, access_token: Optional[str]) -> TokenClaims:
        """
        Authenticate a protected-resource request.

        Raises:
            UnauthorizedError: no token supplied
            ForbiddenError: token invalid or expired
        """
        if not access_token:
            raise UnauthorizedError("Access token required")

        claims = self.sessions.authenticate(access_token)
        if claims is None:
            raise ForbiddenError("Invalid or expired access token")
        return claims

    async def list_users(self) -> list[User]:
        """All stored users, in store order."""
        return list(iter_users(await self.store.users.load_all()))
