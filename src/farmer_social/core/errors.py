"""Typed domain errors raised by services and mapped to HTTP responses.

Services fail fast with one of these exceptions; ``farmer_social.api.errors``
turns them into the ``{"success": false, ...}`` envelope with the status code
carried by the class.
"""

from __future__ import annotations


class AppError(Exception):
    """Base class for every error the API reports to clients.

    Subclasses set ``status_code``, ``error`` (the kind reported in the
    response body) and ``default_message``.
    """

    status_code: int = 500
    error: str = "UnexpectedError"
    default_message: str = "Something went wrong"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Missing or malformed input."""

    status_code = 400
    error = "ValidationError"
    default_message = "Validation failed"


class MissingModerationNoteError(ValidationError):
    """A rejection was attempted without a moderation note."""

    default_message = "Moderation note is required when rejecting a post"


class InvalidTransitionError(AppError):
    """The moderation state does not allow the requested change."""

    status_code = 400
    error = "InvalidTransitionError"
    default_message = "Invalid post state transition"


class AuthenticationError(AppError):
    """Missing, invalid or expired credentials."""

    status_code = 401
    error = "AuthenticationError"
    default_message = "Not authorized"


class InvalidTokenError(AuthenticationError):
    default_message = "Not authorized, token failed"


class TokenExpiredError(AuthenticationError):
    default_message = "Token expired"


class RefreshTokenNotFoundError(AuthenticationError):
    default_message = "Invalid refresh token"


class RefreshTokenExpiredError(AuthenticationError):
    default_message = "Refresh token expired"


class AuthorizationError(AppError):
    """Authenticated, but not allowed to perform the action."""

    status_code = 403
    error = "AuthorizationError"
    default_message = "Access denied"


class NotFoundError(AppError):
    status_code = 404
    error = "NotFoundError"
    default_message = "Resource not found"


class PostNotApprovedError(NotFoundError):
    default_message = "Post not found or not approved"


class UnexpectedError(AppError):
    default_message = "Something went wrong"
