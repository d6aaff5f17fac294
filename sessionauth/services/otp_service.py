"""
OTP engine.

Issues 6-digit challenges per channel and verifies them. A challenge is
consumed on successful verification, or when a verify attempt finds it
expired.

When several challenges match the same (recipient, code), the first one in
store order decides the outcome. Reissuing does not prune older challenges
for the same recipient.
"""

import logging
import secrets
import time
from enum import Enum
from typing import Callable, Optional
from dataclasses import dataclass

from ..auth.models import OtpChallenge, OtpType
from ..auth.store import CredentialStore
from .notification_service import NotificationService

logger = logging.getLogger(__name__)

OTP_EXPIRE_SECONDS = 300  # 5 minutes


def generate_code() -> str:
    """Uniform 6-digit code in 100000-999999."""
    return str(100000 + secrets.randbelow(900000))


class OtpStatus(str, Enum):
    VERIFIED = "verified"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"


@dataclass
class OtpResult:
    """Outcome of a verify attempt."""
    status: OtpStatus
    user_id: Optional[str] = None

    @property
    def verified(self) -> bool:
        return self.status == OtpStatus.VERIFIED


class OtpEngine:
    """Issues and verifies one-time passcodes against the credential store."""

    def __init__(
        self,
        store: CredentialStore,
        notifier: Optional[NotificationService] = None,
        ttl_seconds: int = OTP_EXPIRE_SECONDS,
        clock: Callable[[], float] = time.time
    ):
        """
        Args:
            store: Shared credential store
            notifier: Delivery collaborator (mock logger by default)
            ttl_seconds: Challenge lifetime
            clock: Returns current epoch seconds
        """
        self.store = store
        self.notifier = notifier or NotificationService()
        self.ttl_seconds = ttl_seconds
        self.clock = clock

    async def issue(self, recipient: str, otp_type: OtpType, user_id: str) -> OtpChallenge:
        """Create, persist and dispatch a new challenge."""
        challenge = OtpChallenge(
            recipient=recipient,
            code=generate_code(),
            expires_at=self.clock() + self.ttl_seconds,
            type=otp_type,
            user_id=user_id
        )

        await self.store.otps.append(challenge.to_dict())
        self.notifier.send_otp(recipient, challenge.code, otp_type)

        logger.info(f"Issued {otp_type} OTP for user {user_id}")
        return challenge

    async def verify(self, recipient: str, code: str) -> OtpResult:
        """
        Verify a code for a recipient.

        Returns:
            OtpResult with VERIFIED (and the owning user id), NOT_FOUND or
            EXPIRED. NOT_FOUND mutates nothing.
        """
        def matches(record: dict) -> bool:
            return record.get("recipient") == recipient and str(record.get("code")) == code

        record = await self.store.otps.find_first(matches)
        if record is None:
            return OtpResult(OtpStatus.NOT_FOUND)

        challenge = OtpChallenge.from_dict(record)

        if challenge.is_expired(self.clock()):
            await self.store.otps.remove(matches, first_only=True)
            logger.info(f"Expired {challenge.type} OTP consumed for user {challenge.user_id}")
            return OtpResult(OtpStatus.EXPIRED)

        def mark_verified(user: dict) -> dict:
            user["is_verified"] = True
            return user

        updated = await self.store.users.update(
            lambda user: user.get("id") == challenge.user_id,
            mark_verified
        )
        if not updated:
            logger.warning(f"User with ID {challenge.user_id} not found for OTP verification.")

        await self.store.otps.remove(matches, first_only=True)

        logger.info(f"Verified {challenge.type} OTP for user {challenge.user_id}")
        return OtpResult(OtpStatus.VERIFIED, user_id=challenge.user_id)
