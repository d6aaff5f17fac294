"""
System endpoints.

Health checks and service info.
"""

from fastapi import APIRouter

from sessionauth import __version__

router = APIRouter()


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "session-auth-api"}


@router.get("/")
async def root():
    """API root endpoint."""
    return {
        "name": "Session Auth API",
        "version": __version__,
        "docs": "/docs"
    }
