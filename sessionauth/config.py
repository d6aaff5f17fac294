"""Configuration module for the session auth service."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

DEFAULT_ACCESS_TOKEN_SECRET = "your_access_token_secret_key"
DEFAULT_REFRESH_TOKEN_SECRET = "your_refresh_token_secret_key"


@dataclass
class TokenConfig:
    """Token signing secrets and lifetimes."""
    access_secret: str = field(default_factory=lambda: os.getenv("ACCESS_TOKEN_SECRET", DEFAULT_ACCESS_TOKEN_SECRET))
    refresh_secret: str = field(default_factory=lambda: os.getenv("REFRESH_TOKEN_SECRET", DEFAULT_REFRESH_TOKEN_SECRET))
    access_expire_seconds: int = field(default_factory=lambda: int(os.getenv("ACCESS_TOKEN_EXPIRE_SECONDS", "900")))  # 15 minutes
    refresh_expire_seconds: int = field(default_factory=lambda: int(os.getenv("REFRESH_TOKEN_EXPIRE_SECONDS", str(7 * 24 * 3600))))


@dataclass
class OtpConfig:
    """One-time passcode settings."""
    expire_seconds: int = field(default_factory=lambda: int(os.getenv("OTP_EXPIRE_SECONDS", "300")))


@dataclass
class StoreConfig:
    """Credential store location and I/O limits."""
    data_dir: Path = field(default_factory=lambda: Path(os.getenv("DATA_DIR", "data")))
    timeout_seconds: float = field(default_factory=lambda: float(os.getenv("STORE_TIMEOUT_SECONDS", "5")))


@dataclass
class Config:
    """Main configuration container."""
    tokens: TokenConfig = field(default_factory=TokenConfig)
    otp: OtpConfig = field(default_factory=OtpConfig)
    store: StoreConfig = field(default_factory=StoreConfig)

    bcrypt_rounds: int = field(default_factory=lambda: int(os.getenv("BCRYPT_ROUNDS", "10")))
    environment: str = field(default_factory=lambda: os.getenv("APP_ENV", "development"))
    api_prefix: str = field(default_factory=lambda: os.getenv("API_PREFIX", "/api"))
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "3000")))

    @property
    def secure_cookies(self) -> bool:
        """Refresh cookies are only sent over plain HTTP in local development."""
        return self.environment.lower() != "development"


def load_config() -> Config:
    """Load configuration from environment variables."""
    return Config()
