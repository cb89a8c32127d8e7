"""Shared API dependencies for authentication and service wiring."""

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from farmer_social.core.errors import AuthenticationError
from farmer_social.core.security import Identity, require_role
from farmer_social.core.settings import Settings
from farmer_social.db.session import get_db
from farmer_social.models import User, UserRole
from farmer_social.services import (
    CommentService,
    ModerationService,
    NotificationService,
    TokenService,
    UserService,
)

# Missing credentials are reported through AuthenticationError, not FastAPI's own 403.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]
CredentialsDep = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]


def get_settings(request: Request) -> Settings:
    """Return the settings the running application was built with."""
    return request.app.state.settings


SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_token_service(db: SessionDep, app_settings: SettingsDep) -> TokenService:
    return TokenService(db, app_settings)


def get_notification_service(db: SessionDep) -> NotificationService:
    return NotificationService(db)


NotificationServiceDep = Annotated[NotificationService, Depends(get_notification_service)]


def get_moderation_service(db: SessionDep, notifier: NotificationServiceDep) -> ModerationService:
    return ModerationService(db, notifier)


def get_comment_service(db: SessionDep, notifier: NotificationServiceDep) -> CommentService:
    return CommentService(db, notifier)


def get_user_service(db: SessionDep) -> UserService:
    return UserService(db)


TokenServiceDep = Annotated[TokenService, Depends(get_token_service)]
ModerationServiceDep = Annotated[ModerationService, Depends(get_moderation_service)]
CommentServiceDep = Annotated[CommentService, Depends(get_comment_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]


def authenticate(
    credentials: CredentialsDep,
    db: SessionDep,
    tokens: TokenServiceDep,
) -> Identity:
    """Resolve the bearer token to the calling user.

    Args:
        credentials: HTTP Bearer token credentials, if any were sent
        db: Database session
        tokens: Token service used to verify the access token

    Returns:
        Identity of the authenticated user

    Raises:
        AuthenticationError: If no token was sent, the token is invalid or
            expired, or the user no longer exists or was deactivated
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Not authorized, no token provided")

    user_id = tokens.validate_access_token(credentials.credentials)
    user = db.get(User, user_id)
    if user is None or not user.is_active:
        raise AuthenticationError("User not found or inactive")
    return Identity.from_user(user)


def authenticate_optional(
    credentials: CredentialsDep,
    db: SessionDep,
    tokens: TokenServiceDep,
) -> Identity | None:
    """Like ``authenticate`` but treats any credential failure as an anonymous caller."""
    if credentials is None:
        return None
    try:
        return authenticate(credentials, db, tokens)
    except AuthenticationError:
        return None


CurrentUserDep = Annotated[Identity, Depends(authenticate)]
OptionalUserDep = Annotated[Identity | None, Depends(authenticate_optional)]


def restrict_to(*roles: str) -> Callable[[Identity], Identity]:
    """Build a dependency that authenticates the caller and checks their role."""

    def dependency(identity: CurrentUserDep) -> Identity:
        require_role(identity, roles)
        return identity

    return dependency


AdminDep = Annotated[Identity, Depends(restrict_to(UserRole.ADMIN.value))]
