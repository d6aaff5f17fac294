"""Credential and session-lifecycle service: signup, OTP verification, login and token rotation."""

__version__ = "1.0.0"
