"""
API router.

Aggregates all auth endpoints under the configured prefix.
"""

from fastapi import APIRouter

from . import auth

router = APIRouter()

router.include_router(auth.router, tags=["Authentication"])
