"""
Shared fixtures: in-memory SQLite database, cheap bcrypt, fixed-clock tokens,
and an httpx client bound to the FastAPI app.
"""

import os

# Must be set before any project module instantiates ``config``.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret-do-not-use-in-production")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("CREATE_TABLES_ON_STARTUP", "false")

import uuid
from datetime import date

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from auth.dependencies import get_password_hasher, get_token_service
from auth.jwt import CallerIdentity, TokenService
from auth.password import PasswordHasher
from database.session import create_tables, get_db_session
from database.tasks import TaskStore
from database.users import UserDirectory
from main import create_app

SECRET = "test-secret-do-not-use-in-production"
ADMIN_EMAIL = "admin@example.com"


class FakeClock:
    """Callable clock the tests can move forward by hand."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def caller_for(user) -> CallerIdentity:
    return CallerIdentity(user_id=user.user_id, email=user.email)


@pytest_asyncio.fixture
async def engine():
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_tables(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as s:
        yield s


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def tokens(clock) -> TokenService:
    return TokenService(SECRET, lifetime_seconds=3600, clock=clock)


@pytest.fixture
def users(session, hasher) -> UserDirectory:
    return UserDirectory(session, hasher=hasher, admin_emails=[ADMIN_EMAIL])


@pytest.fixture
def tasks(session, users) -> TaskStore:
    return TaskStore(session, users)


@pytest.fixture
def register(users):
    """Register a user with sensible defaults and return the ``User`` row."""

    async def _register(
        email: str = "john@example.com",
        password: str = "pw123",
        first_name: str = "John",
        last_name: str = "Doe",
    ):
        result = await users.register(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password=password,
            date_of_birth=date(1990, 1, 15),
        )
        assert result.ok, result.message
        return result.value

    return _register


@pytest_asyncio.fixture
async def client(session_factory, hasher):
    app = create_app()

    async def _session():
        async with session_factory() as s:
            try:
                yield s
                await s.commit()
            except Exception:
                await s.rollback()
                raise

    # Real clock here: tokens are issued and validated over HTTP.
    http_tokens = TokenService(SECRET, lifetime_seconds=3600)
    app.dependency_overrides[get_db_session] = _session
    app.dependency_overrides[get_token_service] = lambda: http_tokens
    app.dependency_overrides[get_password_hasher] = lambda: hasher

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


def random_id() -> uuid.UUID:
    return uuid.uuid4()
