"""
Authentication endpoints.

Handles signup, OTP verification, login, refresh-token rotation, logout
and the protected-resource probe.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Cookie, Response, status
from pydantic import BaseModel, Field

from ..deps import ServicesDep, CurrentIdentity, ActiveRefreshToken, REFRESH_COOKIE_NAME

logger = logging.getLogger(__name__)

router = APIRouter()


# Request/Response models

class SignupRequest(BaseModel):
    """User registration request."""
    name: str = Field(..., min_length=1, description="Display name")
    email: str = Field(..., min_length=1, description="Email address")
    mobile: str = Field(..., min_length=1, description="Mobile number")
    password: str = Field(..., min_length=1, description="Password")


class LoginRequest(BaseModel):
    """Login request."""
    identifier: str = Field(..., min_length=1, description="Email or mobile number")
    password: str = Field(..., min_length=1, description="Password")


class VerifyOtpRequest(BaseModel):
    """OTP verification request."""
    recipient: str = Field(..., min_length=1, description="Email or mobile the code was sent to")
    otp: str = Field(..., min_length=1, description="6-digit code")


class MessageResponse(BaseModel):
    message: str


class TokenResponse(BaseModel):
    """Access token response. The refresh token travels in a cookie."""
    message: str
    accessToken: str


class IdentityResponse(BaseModel):
    message: str
    userId: str


def _set_refresh_cookie(response: Response, services, refresh_token: str):
    response.set_cookie(
        key=REFRESH_COOKIE_NAME,
        value=refresh_token,
        httponly=True,
        secure=services.config.secure_cookies,
        samesite="strict",
        max_age=services.config.tokens.refresh_expire_seconds
    )


# Endpoints

@router.post("/signup", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def signup(request: SignupRequest, services: ServicesDep):
    """
    Register a new user.

    Sends OTP codes to both email and mobile. No tokens are issued until
    the account is verified and the user logs in.
    """
    await services.auth.signup(
        name=request.name,
        email=request.email,
        mobile=request.mobile,
        password=request.password
    )
    return MessageResponse(
        message="User registered successfully. Please verify your email/mobile with OTP."
    )


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest, response: Response, services: ServicesDep):
    """
    Login with email or mobile and password.

    Returns the access token and sets the refresh token as an HTTP-only cookie.
    """
    tokens = await services.auth.login(request.identifier, request.password)
    _set_refresh_cookie(response, services, tokens.refresh_token)
    return TokenResponse(message="Login successful", accessToken=tokens.access_token)


@router.post("/verify-otp", response_model=MessageResponse)
async def verify_otp(request: VerifyOtpRequest, services: ServicesDep):
    """Verify an email or mobile OTP and activate the account."""
    await services.auth.verify_otp(request.recipient, request.otp)
    return MessageResponse(message="OTP verified successfully. Your account is now active.")


@router.post("/refresh-token", response_model=TokenResponse)
async def rotate_refresh_token(refresh_token: ActiveRefreshToken, response: Response, services: ServicesDep):
    """
    Refresh the access token.

    Requires an active refresh token cookie; the cookie is rotated.
    """
    tokens = await services.auth.refresh(refresh_token)
    _set_refresh_cookie(response, services, tokens.refresh_token)
    return TokenResponse(
        message="Access token refreshed successfully",
        accessToken=tokens.access_token
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    services: ServicesDep,
    refresh_token: Optional[str] = Cookie(None, alias=REFRESH_COOKIE_NAME)
):
    """Revoke the refresh token cookie, if any, and clear it."""
    await services.auth.logout(refresh_token)
    response.delete_cookie(
        key=REFRESH_COOKIE_NAME,
        httponly=True,
        secure=services.config.secure_cookies,
        samesite="strict"
    )
    return MessageResponse(message="Logged out successfully")


@router.get("/protected-route", response_model=IdentityResponse)
async def protected_route(identity: CurrentIdentity):
    """
    Example protected route.

    Requires a valid access token.
    """
    return IdentityResponse(
        message=f"Welcome, {identity.email}! You have accessed a protected route.",
        userId=identity.id
    )
