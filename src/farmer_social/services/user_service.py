"""Account registration, credential checks and admin-side user management."""
from __future__ import annotations

import logging

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from farmer_social.core import security
from farmer_social.core.errors import AuthenticationError, NotFoundError, ValidationError
from farmer_social.core.security import Identity
from farmer_social.db.time import utcnow
from farmer_social.models import User, UserRole
from farmer_social.repositories import RefreshTokenRepository
from farmer_social.schemas.user import RegisterRequest

logger = logging.getLogger(__name__)

__all__ = ["UserService"]

DUPLICATE_USER_MESSAGE = "User with this email or username already exists"


class UserService:
    """CRUD-style helpers for managing users."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get_user(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def register(
        self,
        payload: RegisterRequest,
        *,
        role: UserRole = UserRole.REGISTERED,
        is_email_verified: bool = False,
    ) -> User:
        """Persist a new user with a bcrypt-hashed password.

        Raises:
            ValidationError: If the username or email is already taken.
        """
        email = payload.email.lower()
        existing = self.db.scalars(
            select(User).where(or_(User.email == email, User.username == payload.username))
        ).first()
        if existing is not None:
            raise ValidationError(DUPLICATE_USER_MESSAGE)

        user = User(
            username=payload.username,
            email=email,
            password_hash=security.hash_password(payload.password),
            role=role.value,
            is_email_verified=is_email_verified,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as err:
            # Lost a race with a concurrent registration for the same name/email.
            self.db.rollback()
            raise ValidationError(DUPLICATE_USER_MESSAGE) from err
        self.db.refresh(user)
        logger.info("Registered user %s (id=%s, role=%s)", user.username, user.id, user.role)
        return user

    def create_admin(self, username: str, email: str, password: str) -> User:
        """Bootstrap an admin account with a verified email."""
        payload = RegisterRequest(username=username, email=email, password=password)
        return self.register(payload, role=UserRole.ADMIN, is_email_verified=True)

    def authenticate_credentials(self, email: str, password: str) -> User:
        """Check an email/password pair and stamp the login time.

        Raises:
            AuthenticationError: On unknown email, wrong password, or a deactivated account.
        """
        user = self.db.scalars(select(User).where(User.email == email.lower())).first()
        if user is None or not security.verify_password(password, user.password_hash):
            raise AuthenticationError("Invalid credentials")
        if not user.is_active:
            raise AuthenticationError("Account is deactivated")

        user.last_login_at = utcnow()
        self.db.commit()
        return user

    def list_users(
        self,
        *,
        page: int = 1,
        limit: int = 20,
        role: str | None = None,
    ) -> tuple[list[User], int]:
        """Return a page of active users, newest first, and the total count."""
        criteria = [User.is_active.is_(True)]
        if role:
            criteria.append(User.role == role)

        users = list(
            self.db.scalars(
                select(User)
                .where(*criteria)
                .order_by(User.created_at.desc(), User.id.desc())
                .offset((page - 1) * limit)
                .limit(limit)
            )
        )
        total = self.db.scalar(select(func.count()).select_from(User).where(*criteria)) or 0
        return users, total

    def update_role(self, actor: Identity, user_id: int, role: str) -> User:
        """Change a user's role. Admins cannot demote themselves."""
        if role not in {r.value for r in UserRole}:
            raise ValidationError("Invalid role. Must be admin or registered")

        user = self.get_user(user_id)
        if user.id == actor.id and role != UserRole.ADMIN:
            raise ValidationError("Cannot change your own admin role")

        user.role = role
        self.db.commit()
        logger.info("User %s changed role of user %s to %s", actor.id, user.id, role)
        return user

    def set_active(self, actor: Identity, user_id: int, is_active: bool) -> User:
        """Activate or deactivate an account. Admins cannot deactivate themselves.

        Deactivation also drops every stored refresh token of the user.
        """
        user = self.get_user(user_id)
        if user.id == actor.id and not is_active:
            raise ValidationError("Cannot deactivate your own account")

        user.is_active = is_active
        if not is_active:
            RefreshTokenRepository(self.db).delete_for_user(user.id)
        self.db.commit()
        logger.info(
            "User %s %s user %s",
            actor.id,
            "activated" if is_active else "deactivated",
            user.id,
        )
        return user
