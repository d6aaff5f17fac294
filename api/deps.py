"""
API dependencies.

Provides dependency injection for services and the access/refresh token
gates used by protected endpoints.
"""

import logging
from typing import Optional, Annotated
from dataclasses import dataclass

from fastapi import Cookie, Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from sessionauth.auth import TokenClaims
from sessionauth.config import Config, load_config
from sessionauth.errors import ForbiddenError, UnauthorizedError
from sessionauth.services import NotificationService, UserAuthService, create_auth_service

logger = logging.getLogger(__name__)

REFRESH_COOKIE_NAME = "refreshToken"

# Security scheme
security = HTTPBearer(auto_error=False)


@dataclass
class Services:
    """Container for all services."""
    config: Config
    auth: UserAuthService
    notifier: NotificationService


# Global services instance (singleton)
_services: Optional[Services] = None


def build_services(config: Optional[Config] = None, store=None) -> Services:
    """Wire a services container. One container is shared for the process lifetime."""
    config = config or load_config()
    notifier = NotificationService()
    auth = create_auth_service(config=config, store=store, notifier=notifier)
    return Services(config=config, auth=auth, notifier=notifier)


def get_services() -> Services:
    """
    Get or create the services singleton.

    This initializes all services on first call.
    """
    global _services

    if _services is None:
        logger.info("Initializing services...")
        _services = build_services()
        logger.info(f"Services initialized (data dir: {_services.config.store.data_dir})")

    return _services


def close_services():
    """Drop the services singleton."""
    global _services
    if _services:
        _services = None
        logger.info("Services closed")


def services_dep() -> Services:
    """FastAPI dependency for services."""
    return get_services()


ServicesDep = Annotated[Services, Depends(services_dep)]


# Authentication dependencies

async def get_current_identity(
    request: Request,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    services: ServicesDep
) -> TokenClaims:
    """
    Get the caller's identity from the bearer access token.

    Raises 401 if no token is provided, 403 if it is invalid or expired.
    A token sent under a scheme other than Bearer counts as invalid.
    """
    token = credentials.credentials if credentials else None
    if token is None:
        scheme, _, param = request.headers.get("Authorization", "").partition(" ")
        if param.strip():
            logger.info(f"Rejected access token with {scheme!r} authorization scheme")
            raise ForbiddenError("Invalid or expired access token")
    return services.auth.access(token)


async def get_active_refresh_token(
    services: ServicesDep,
    refresh_token: Annotated[Optional[str], Cookie(alias=REFRESH_COOKIE_NAME)] = None
) -> str:
    """
    Gate for the refresh endpoint.

    Raises 401 if the cookie is missing, 403 if the token is not in the
    active set.
    """
    if not refresh_token:
        raise UnauthorizedError("Refresh token required")

    if not await services.auth.sessions.is_active(refresh_token):
        logger.info("Refresh token not found in server-side list.")
        raise ForbiddenError("Invalid refresh token")

    return refresh_token


# Type aliases for dependencies
CurrentIdentity = Annotated[TokenClaims, Depends(get_current_identity)]
ActiveRefreshToken = Annotated[str, Depends(get_active_refresh_token)]
