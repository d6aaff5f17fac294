"""
Pytest configuration and shared fixtures.

This module provides common fixtures for testing:
- Token signing
- Password hashing
- Credential stores (in-memory and JSON files)
- Wired services and API clients
"""

import os
import sys
from pathlib import Path
from typing import Generator
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment variables before imports
os.environ["ACCESS_TOKEN_SECRET"] = "test_access_secret_for_testing_only_32bytes!"
os.environ["REFRESH_TOKEN_SECRET"] = "test_refresh_secret_for_testing_only_32bytes"
os.environ["APP_ENV"] = "development"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["API_PREFIX"] = "/api"

from sessionauth.auth import CredentialStore, JWTHandler, PasswordHandler
from sessionauth.config import Config, TokenConfig
from sessionauth.services import NotificationService, OtpEngine, SessionManager, UserAuthService


# =============================================================================
# Configuration
# =============================================================================

@pytest.fixture(scope="session")
def test_config():
    """Test configuration values."""
    return {
        "access_secret": "test_access_secret_for_testing_only_32bytes!",
        "refresh_secret": "test_refresh_secret_for_testing_only_32bytes",
        "name": "Test User",
        "email": "test@example.com",
        "mobile": "5511999999999",
        "password": "TestPassword123!",
    }


class FakeClock:
    """Controllable epoch-seconds clock."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# =============================================================================
# Token / Password Fixtures
# =============================================================================

@pytest.fixture
def token_config(test_config) -> TokenConfig:
    return TokenConfig(
        access_secret=test_config["access_secret"],
        refresh_secret=test_config["refresh_secret"],
        access_expire_seconds=900,
        refresh_expire_seconds=7 * 24 * 3600
    )


@pytest.fixture
def jwt_handler(token_config) -> JWTHandler:
    """Create a JWTHandler with test secrets."""
    return JWTHandler(token_config)


@pytest.fixture
def password_handler() -> PasswordHandler:
    """Create a PasswordHandler with the cheapest bcrypt work factor."""
    return PasswordHandler(rounds=4)


# =============================================================================
# Store / Service Fixtures
# =============================================================================

@pytest.fixture
def store() -> CredentialStore:
    return CredentialStore.in_memory()


@pytest.fixture
def file_store(tmp_path) -> CredentialStore:
    return CredentialStore.open(tmp_path)


@pytest.fixture
def notifier() -> NotificationService:
    return NotificationService()


@pytest.fixture
def otp_engine(store, notifier, clock) -> OtpEngine:
    return OtpEngine(store, notifier, ttl_seconds=300, clock=clock)


@pytest.fixture
def session_manager(store, jwt_handler) -> SessionManager:
    return SessionManager(store, jwt_handler)


@pytest.fixture
def auth_service(store, session_manager, otp_engine, password_handler) -> UserAuthService:
    return UserAuthService(store, session_manager, otp_engine, password_handler)


@pytest.fixture
async def verified_user(auth_service, test_config):
    """A verified user in the in-memory store."""
    return await auth_service.create_user(
        name=test_config["name"],
        email=test_config["email"],
        mobile=test_config["mobile"],
        password=test_config["password"],
        is_verified=True
    )


# =============================================================================
# API Client Fixtures
# =============================================================================

@pytest.fixture
def services(tmp_path, file_store):
    """Services container over a temporary data directory."""
    from api.deps import build_services

    config = Config()
    config.store.data_dir = tmp_path
    return build_services(config=config, store=file_store)


@pytest.fixture
def api_app():
    """Create FastAPI app for testing."""
    from api.main import app
    return app


@pytest.fixture
def api_client(api_app, services) -> Generator[TestClient, None, None]:
    """Test client whose requests use the temporary services container."""
    with patch("api.deps.get_services", return_value=services):
        yield TestClient(api_app)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as integration test"
    )
    config.addinivalue_line(
        "markers", "api: mark test as API endpoint test"
    )
