"""
FastAPI application entry point.

Configures the API with all routes and error handling.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from sessionauth import __version__
from sessionauth.config import load_config
from sessionauth.errors import AuthError
from .routes.router import router as auth_router
from .routes import system
from .deps import get_services, close_services

logger = logging.getLogger(__name__)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)

ENDPOINTS = [
    ("POST", "/signup", "Register a new user"),
    ("POST", "/login", "Authenticate user and get tokens"),
    ("POST", "/verify-otp", "Verify OTP for account activation"),
    ("POST", "/refresh-token", "Get a new access token using refresh token"),
    ("POST", "/logout", "Revoke the refresh token cookie"),
    ("GET", "/protected-route", "Example protected route (requires access token)"),
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan manager."""
    logger.info("Starting Session Auth API...")

    services = get_services()
    prefix = services.config.api_prefix
    for method, path, description in ENDPOINTS:
        logger.info(f"{method:<5} {prefix}{path:<17} - {description}")

    yield

    logger.info("Shutting down...")
    close_services()


def create_app() -> FastAPI:
    """Build the application. The path prefix comes from API_PREFIX."""
    config = load_config()

    app = FastAPI(
        title="Session Auth API",
        description="User signup, OTP verification, login and access/refresh token sessions",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json"
    )

    @app.exception_handler(AuthError)
    async def auth_error_handler(request: Request, exc: AuthError):
        if exc.status_code >= 500:
            logger.error(f"Request failed: {exc}", exc_info=exc)
            return JSONResponse(status_code=exc.status_code, content={"message": "Internal server error"})
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        fields = []
        for error in exc.errors():
            loc = [str(part) for part in error.get("loc", ()) if part != "body"]
            if loc and loc[-1] not in fields:
                fields.append(loc[-1])
        message = f"Missing or invalid fields: {', '.join(fields)}" if fields else "Invalid request body"
        return JSONResponse(status_code=400, content={"message": message})

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(status_code=500, content={"message": "Internal server error"})

    app.include_router(system.router, tags=["System"])
    app.include_router(auth_router, prefix=config.api_prefix)

    return app


app = create_app()
