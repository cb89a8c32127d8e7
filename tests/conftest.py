# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-farmer-social")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from farmer_social.core.security import Identity, create_access_token  # noqa: E402
from farmer_social.core.settings import Settings  # noqa: E402
from farmer_social.db.session import Database  # noqa: E402
from farmer_social.db.session import get_db as app_get_session  # noqa: E402
from farmer_social.main import create_app  # noqa: E402
from farmer_social.models import Post, PostStatus, User, UserRole  # noqa: E402
from farmer_social.schemas.user import RegisterRequest  # noqa: E402
from farmer_social.services import NotificationService, UserService  # noqa: E402

TEST_DB_URL = "sqlite://"
TEST_PASSWORD = "harvest-2024"

_USER_COUNTER = count(1)


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Settings for the app under test; tables come from the ``database`` fixture."""
    return Settings(AUTO_CREATE_TABLES=False, DEBUG=False)  # type: ignore[call-arg]


@pytest.fixture(scope="session")
def database() -> Generator[Database, None, None]:
    database = Database(TEST_DB_URL, poolclass=StaticPool)
    database.create_tables()
    try:
        yield database
    finally:
        database.drop_tables()
        database.dispose()


@pytest.fixture()
def db_session(database: Database) -> Iterator[Session]:
    """Session whose commits become savepoints of an outer transaction rolled back afterwards."""
    connection = database.engine.connect()
    transaction = connection.begin()
    session = Session(
        bind=connection,
        autoflush=False,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )
    try:
        yield session
    finally:
        session.close()
        if transaction.is_active:
            transaction.rollback()
        connection.close()


@pytest.fixture(scope="session")
def app(test_settings: Settings, database: Database) -> FastAPI:
    return create_app(test_settings, database)


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    # Lifespan events are skipped so the shared in-memory engine is never disposed.
    return TestClient(app, base_url="http://test")


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory creating persisted users with ``TEST_PASSWORD``."""

    def _make_user(username: str | None = None, *, role: UserRole = UserRole.REGISTERED) -> User:
        username = username or f"farmer{next(_USER_COUNTER)}"
        payload = RegisterRequest(
            username=username,
            email=f"{username}@example.com",
            password=TEST_PASSWORD,
        )
        return UserService(db_session).register(payload, role=role)

    return _make_user


@pytest.fixture()
def test_user(make_user: Callable[..., User]) -> User:
    """Primary registered user."""
    return make_user("alice")


@pytest.fixture()
def other_user(make_user: Callable[..., User]) -> User:
    """Second registered user."""
    return make_user("bob")


@pytest.fixture()
def admin_user(make_user: Callable[..., User]) -> User:
    return make_user("admin", role=UserRole.ADMIN)


def bearer(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return bearer(test_user)


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return bearer(other_user)


@pytest.fixture()
def admin_auth_token(admin_user: User) -> dict[str, str]:
    return bearer(admin_user)


@pytest.fixture()
def identity() -> Callable[[User], Identity]:
    return Identity.from_user


@pytest.fixture()
def notifier(db_session: Session) -> NotificationService:
    return NotificationService(db_session)


@pytest.fixture()
def make_post(db_session: Session) -> Callable[..., Post]:
    """Return a factory inserting posts directly in a given moderation state."""

    def _make_post(
        author: User,
        *,
        status: PostStatus = PostStatus.PENDING,
        title: str = "Tomato blight in July",
        content: str = "Seeing brown spots on the lower leaves, any advice?",
        category: str = "general",
        is_active: bool = True,
    ) -> Post:
        post = Post(
            title=title,
            content=content,
            category=category,
            images=[],
            author_id=author.id,
            status=status.value,
            is_active=is_active,
        )
        db_session.add(post)
        db_session.commit()
        db_session.refresh(post)
        return post

    return _make_post


@pytest.fixture()
def test_post(make_post: Callable[..., Post], test_user: User) -> Post:
    """A pending post by the primary test user."""
    return make_post(test_user)


@pytest.fixture()
def approved_post(make_post: Callable[..., Post], test_user: User) -> Post:
    """An approved post by the primary test user."""
    return make_post(test_user, status=PostStatus.APPROVED)
