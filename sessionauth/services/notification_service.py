"""
OTP notification service.

Delivery is mocked: codes are written to the application log instead of
being sent by email or SMS.
"""

import logging
from collections import deque

logger = logging.getLogger(__name__)


class NotificationService:
    """Dispatches OTP codes to a recipient over a channel."""

    def __init__(self):
        # Recent dispatches, newest last
        self.sent: deque = deque(maxlen=100)

    def send_otp(self, recipient: str, code: str, channel: str) -> dict:
        """
        Send an OTP code.

        Args:
            recipient: Email address or mobile number
            code: The one-time passcode
            channel: "email" or "mobile"

        Returns:
            Dict with success status
        """
        logger.info(f"--- MOCK OTP SENT --- To: {recipient} | Type: {channel} | OTP: {code}")
        self.sent.append({"recipient": recipient, "code": code, "channel": channel})
        return {"success": True}
