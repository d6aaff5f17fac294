"""
Credential records.

Users and OTP challenges are persisted as plain JSON objects; these
dataclasses handle the conversion in both directions.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Iterator, Literal, Optional
from dataclasses import dataclass, asdict, field

logger = logging.getLogger(__name__)

OtpType = Literal["email", "mobile"]


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class User:
    """User data model."""
    name: str
    email: str
    mobile: str
    password_hash: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    is_verified: bool = False
    created_at: str = field(default_factory=_utcnow)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            email=data["email"],
            mobile=data["mobile"],
            password_hash=data.get("password_hash", ""),
            is_verified=bool(data.get("is_verified", False)),
            created_at=data.get("created_at") or _utcnow()
        )

    def matches_identifier(self, identifier: str) -> bool:
        """Exact match on email or mobile."""
        return identifier == self.email or identifier == self.mobile


@dataclass
class OtpChallenge:
    """A pending one-time passcode for one channel of a user."""
    recipient: str
    code: str
    expires_at: float  # Epoch seconds
    type: OtpType
    user_id: str

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "OtpChallenge":
        return cls(
            recipient=data["recipient"],
            code=str(data["code"]),
            expires_at=float(data["expires_at"]),
            type=data["type"],
            user_id=data["user_id"]
        )

    def is_expired(self, now: float) -> bool:
        return now > self.expires_at


def iter_users(records: list) -> Iterator[User]:
    """Yield stored users, skipping records that lack required keys."""
    for data in records:
        try:
            yield User.from_dict(data)
        except (KeyError, TypeError, AttributeError):
            keys = sorted(data) if isinstance(data, dict) else type(data).__name__
            logger.warning(f"Skipping malformed user record (keys: {keys})")


def find_user(records: list, predicate) -> Optional[User]:
    """Return the first stored user matching predicate, if any."""
    for user in iter_users(records):
        if predicate(user):
            return user
    return None
