"""Access and refresh token issuance, validation and revocation."""
from __future__ import annotations

import logging
import secrets
from datetime import timedelta

from sqlalchemy.orm import Session

from farmer_social.core import security
from farmer_social.core.errors import RefreshTokenExpiredError, RefreshTokenNotFoundError
from farmer_social.core.settings import Settings, settings
from farmer_social.db.time import as_utc, utcnow
from farmer_social.repositories import RefreshTokenRepository

logger = logging.getLogger(__name__)

REFRESH_TOKEN_BYTES = 40


class TokenService:
    """Dual-token scheme: stateless JWT access tokens, stored refresh tokens.

    Access tokens live ``ACCESS_TOKEN_EXPIRE_MINUTES`` and are never stored.
    Refresh tokens are random strings whose SHA-256 digest is persisted with
    the owning user id; redeeming one mints a new access token without
    rotating the refresh token.
    """

    def __init__(self, db: Session, config: Settings = settings) -> None:
        self.db = db
        self.config = config
        self.refresh_tokens = RefreshTokenRepository(db)

    def issue_access_token(self, user_id: int) -> str:
        return security.create_access_token(
            user_id,
            expires_delta=timedelta(minutes=self.config.access_token_expire_minutes),
            secret_key=self.config.secret_key,
            algorithm=self.config.jwt_algorithm,
        )

    def validate_access_token(self, token: str) -> int:
        """Return the user id bound to ``token``.

        Raises:
            TokenExpiredError: If the token has lapsed.
            InvalidTokenError: If the token is malformed or badly signed.
        """
        return security.decode_access_token(
            token,
            secret_key=self.config.secret_key,
            algorithm=self.config.jwt_algorithm,
        )

    def issue_refresh_token(self, user_id: int) -> str:
        """Create and store a refresh token for ``user_id``; returns the raw token."""
        token = secrets.token_hex(REFRESH_TOKEN_BYTES)
        self.refresh_tokens.add(
            token_hash=security.hash_token(token),
            user_id=user_id,
            expires_at=utcnow() + timedelta(days=self.config.refresh_token_expire_days),
        )
        self.db.commit()
        return token

    def redeem_refresh_token(self, token: str) -> str:
        """Exchange a stored refresh token for a new access token.

        Raises:
            RefreshTokenNotFoundError: If no row matches ``token``.
            RefreshTokenExpiredError: If the row has expired; the row is deleted.
        """
        token_hash = security.hash_token(token)
        row = self.refresh_tokens.get_by_hash(token_hash)
        if row is None:
            raise RefreshTokenNotFoundError()

        if as_utc(row.expires_at) <= utcnow():
            user_id = row.user_id
            self.refresh_tokens.delete_by_hash(token_hash)
            self.db.commit()
            logger.info("Expired refresh token removed for user %s", user_id)
            raise RefreshTokenExpiredError()

        return self.issue_access_token(row.user_id)

    def revoke_refresh_token(self, token: str) -> None:
        """Delete the stored refresh token. Unknown tokens are ignored."""
        self.refresh_tokens.delete_by_hash(security.hash_token(token))
        self.db.commit()

    def revoke_all_for_user(self, user_id: int) -> int:
        removed = self.refresh_tokens.delete_for_user(user_id)
        self.db.commit()
        return removed
