"""Password hashing, access-token signing and role checks."""
from __future__ import annotations

import hashlib
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

from farmer_social.core.errors import AuthorizationError, InvalidTokenError, TokenExpiredError
from farmer_social.core.settings import settings
from farmer_social.db.time import utcnow

if TYPE_CHECKING:
    from farmer_social.models.user import User

ACCESS_TOKEN_TYPE = "access"

# Roles allowed to see posts that are not approved yet.
STAFF_ROLES = frozenset({"admin", "moderator"})


def hash_password(password: str, rounds: int | None = None) -> str:
    """Return a salted bcrypt hash of ``password``."""
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check ``password`` against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash or an over-long candidate.
        return False


def hash_token(token: str) -> str:
    """Return the SHA-256 hex digest used to store opaque refresh tokens."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def create_access_token(
    user_id: int,
    *,
    expires_delta: timedelta | None = None,
    secret_key: str | None = None,
    algorithm: str | None = None,
) -> str:
    """Create a signed JWT access token for ``user_id``."""
    now = utcnow()
    expire = now + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    to_encode: dict[str, Any] = {
        "sub": str(user_id),
        "type": ACCESS_TOKEN_TYPE,
        "iat": now,
        "exp": expire,
    }
    encoded_jwt: str = jwt.encode(
        to_encode,
        secret_key or settings.secret_key,
        algorithm=algorithm or settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_access_token(
    token: str,
    *,
    secret_key: str | None = None,
    algorithm: str | None = None,
) -> int:
    """Verify an access token and return the user id it was issued for.

    Raises:
        TokenExpiredError: If the token's ``exp`` claim has passed.
        InvalidTokenError: On a bad signature, unexpected algorithm, or a
            missing/garbled subject.
    """
    try:
        payload = jwt.decode(
            token,
            secret_key or settings.secret_key,
            algorithms=[algorithm or settings.jwt_algorithm],
        )
    except ExpiredSignatureError as err:
        raise TokenExpiredError() from err
    except JWTError as err:
        raise InvalidTokenError() from err

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise InvalidTokenError()

    subject = payload.get("sub")
    try:
        return int(subject)
    except (TypeError, ValueError) as err:
        raise InvalidTokenError() from err


@dataclass(frozen=True)
class Identity:
    """Password-free view of the authenticated caller."""

    id: int
    username: str
    email: str
    role: str
    is_active: bool = True

    @classmethod
    def from_user(cls, user: User) -> Identity:
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            role=user.role,
            is_active=user.is_active,
        )

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES


def require_role(identity: Identity | None, allowed_roles: Iterable[str]) -> None:
    """Raise ``AuthorizationError`` unless the identity holds one of ``allowed_roles``."""
    roles = list(allowed_roles)
    if identity is None or identity.role not in roles:
        raise AuthorizationError(f"Access denied. Required role: {' or '.join(roles)}")
