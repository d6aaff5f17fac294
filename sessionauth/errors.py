"""
Error taxonomy for the auth service.

Every error carries the HTTP status it maps to and a message that is safe
to return to the caller. Internal details stay in the server log.
"""


class AuthError(Exception):
    """Base class for errors surfaced to API callers."""
    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AuthError):
    """Missing or malformed input."""
    status_code = 400
    default_message = "Invalid request"


class UnauthorizedError(AuthError):
    """Bad credential or missing token."""
    status_code = 401
    default_message = "Unauthorized"


class ForbiddenError(AuthError):
    """Unverified account or invalid/expired credential material."""
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(AuthError):
    status_code = 404
    default_message = "Not found"


class ConflictError(AuthError):
    status_code = 409
    default_message = "Conflict"


class InternalError(AuthError):
    """Unexpected failure. The message never includes internal detail."""
    status_code = 500


class StoreError(InternalError):
    """Credential store I/O failed or timed out."""
