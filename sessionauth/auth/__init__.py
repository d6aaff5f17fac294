"""
Credential primitives for the session auth service.

Password hashing, access/refresh token signing and the durable credential
store shared by every service.
"""

from .jwt_handler import JWTHandler, TokenCodec, TokenClaims
from .password import PasswordHandler
from .models import User, OtpChallenge
from .store import CredentialStore, RecordCollection, JsonFileCollection, MemoryCollection

__all__ = [
    "JWTHandler",
    "TokenCodec",
    "TokenClaims",
    "PasswordHandler",
    "User",
    "OtpChallenge",
    "CredentialStore",
    "RecordCollection",
    "JsonFileCollection",
    "MemoryCollection",
]
