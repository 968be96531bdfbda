"""Test fixtures — a fresh in-memory database per test.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Each test gets its own SQLite engine (aiosqlite, StaticPool so every
   connection sees the same in-memory database) with the schema created.
2. get_db is overridden to hand that session to the app.
3. The email sender is swapped for a recorder, so no SMTP is needed and
   tests can assert on what would have been sent.

Environment overrides must be set before pressroom is imported, because
settings are read once at import time.
"""

import os

os.environ["PRESSROOM_ENVIRONMENT"] = "development"
os.environ["PRESSROOM_DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["PRESSROOM_BCRYPT_ROUNDS"] = "4"
os.environ["PRESSROOM_AUTO_CREATE_SCHEMA"] = "false"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from pressroom.auth.dependencies import get_email_sender  # noqa: E402
from pressroom.auth.jwt import TokenIssuer  # noqa: E402
from pressroom.config import get_settings  # noqa: E402
from pressroom.db.engine import get_db  # noqa: E402
from pressroom.db.models import Base, Role  # noqa: E402
from pressroom.main import app  # noqa: E402
from pressroom.services.email_service import EmailSender  # noqa: E402
from pressroom.services.user_service import UserService  # noqa: E402

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


class RecordingEmailSender(EmailSender):
    """EmailSender that records messages instead of talking SMTP."""

    def __init__(self):
        super().__init__(get_settings())
        self.sent: list[tuple[str, str, str]] = []

    async def send(self, to: str, subject: str, html_body: str) -> bool:
        self.sent.append((to, subject, html_body))
        return True


@pytest_asyncio.fixture()
async def db_session():
    """Per-test session on a private in-memory database."""
    engine = create_async_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as session:
        try:
            yield session
        finally:
            await session.close()
    await engine.dispose()


@pytest.fixture()
def mailer():
    return RecordingEmailSender()


@pytest_asyncio.fixture()
async def client(db_session, mailer):
    """HTTP client with the app's get_db and email sender overridden.

    Auth is NOT overridden: tests exercise the real token and cookie flow.
    """
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_email_sender] = lambda: mailer

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture()
def issuer():
    return TokenIssuer(get_settings())


async def _make_user(db_session, issuer, email: str, role: Role) -> dict:
    svc = UserService(db_session, bcrypt_rounds=4)
    user = await svc.create(
        firstname="Test",
        lastname=role.value.title(),
        email=email,
        password="password_123",
        role=role,
    )
    token = issuer.issue_access_token(user)
    return {"user": user, "headers": {"Authorization": f"Bearer {token}"}}


@pytest_asyncio.fixture()
async def admin(db_session, issuer):
    """An admin account plus Bearer headers for it."""
    return await _make_user(db_session, issuer, "admin@example.com", Role.ADMIN)


@pytest_asyncio.fixture()
async def member(db_session, issuer):
    """A regular account plus Bearer headers for it."""
    return await _make_user(db_session, issuer, "member@example.com", Role.USER)
