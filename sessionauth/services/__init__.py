"""
Services layer for the session auth service.

Business logic shared by the HTTP API and the command line.
"""

from typing import Optional

from ..auth import CredentialStore, JWTHandler, PasswordHandler
from ..config import Config, load_config
from .notification_service import NotificationService
from .otp_service import OtpEngine, OtpResult, OtpStatus
from .session_service import AuthTokens, SessionManager
from .user_auth_service import UserAuthService

__all__ = [
    # Services
    "NotificationService",
    "OtpEngine",
    "SessionManager",
    "UserAuthService",
    # Data classes
    "AuthTokens",
    "OtpResult",
    "OtpStatus",
    "create_auth_service",
]


def create_auth_service(
    config: Optional[Config] = None,
    store: Optional[CredentialStore] = None,
    notifier: Optional[NotificationService] = None
) -> UserAuthService:
    """
    Factory function to wire the auth service with its collaborators.

    Args:
        config: Optional config (loads from env if not provided)
        store: Optional credential store (opens DATA_DIR if not provided)
        notifier: Optional OTP notification service

    Returns:
        Configured UserAuthService
    """
    cfg = config or load_config()
    if store is None:
        store = CredentialStore.open(cfg.store.data_dir, cfg.store.timeout_seconds)

    sessions = SessionManager(store, JWTHandler(cfg.tokens))
    otp = OtpEngine(store, notifier or NotificationService(), ttl_seconds=cfg.otp.expire_seconds)

    return UserAuthService(
        store=store,
        sessions=sessions,
        otp=otp,
        password_handler=PasswordHandler(rounds=cfg.bcrypt_rounds)
    )
