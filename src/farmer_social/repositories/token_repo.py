"""Data access helpers for stored refresh tokens."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from farmer_social.models import RefreshToken

__all__ = ["RefreshTokenRepository"]


class RefreshTokenRepository:
    """Thin wrapper around database access for refresh-token rows."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, *, token_hash: str, user_id: int, expires_at: datetime) -> RefreshToken:
        row = RefreshToken(token_hash=token_hash, user_id=user_id, expires_at=expires_at)
        self.session.add(row)
        self.session.flush()
        return row

    def get_by_hash(self, token_hash: str) -> RefreshToken | None:
        return self.session.scalars(
            select(RefreshToken).where(RefreshToken.token_hash == token_hash)
        ).first()

    def delete_by_hash(self, token_hash: str) -> int:
        """Delete the row for ``token_hash``; returns the number of rows removed."""
        result = self.session.execute(
            delete(RefreshToken).where(RefreshToken.token_hash == token_hash)
        )
        return result.rowcount

    def delete_for_user(self, user_id: int) -> int:
        result = self.session.execute(
            delete(RefreshToken).where(RefreshToken.user_id == user_id)
        )
        return result.rowcount
