import os
import uuid

# Test settings must be in place before the app modules read them
os.environ["COOKIE_SECURE"] = "false"
os.environ["TIMEZONE"] = "UTC"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from app.core import db as db_module
from app.core.security import create_access_token, hash_password
from app.main import app
from app.models.user import User


TEST_DB_URL = "sqlite://:memory:"
os.environ["DATABASE_URL"] = TEST_DB_URL
db_module.DB_URL = TEST_DB_URL
db_module.TORTOISE_ORM["connections"]["default"] = TEST_DB_URL

DEFAULT_PASSWORD = "UserPass123"


async def _init_test_db() -> None:
    """
    Initialize a clean in-memory SQLite database for every test.
    Ensures tables are recreated from scratch.
    """
    if Tortoise._inited:
        await Tortoise.close_connections()
    await Tortoise.init(config=db_module.TORTOISE_ORM)
    await Tortoise.generate_schemas()


@pytest_asyncio.fixture
async def db():
    """
    Fresh database without an HTTP client, for service-level tests.
    """
    await _init_test_db()
    yield
    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def client():
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh DB.
    """
    await _init_test_db()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client
    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def create_user():
    """
    Factory fixture to create users directly via ORM.
    """

    async def _create_user(username: str | None = None, password: str = DEFAULT_PASSWORD) -> User:
        username = username or f"user_{uuid.uuid4().hex[:6]}"
        return await User.create(
            username=username,
            email=f"{username.lower()}@example.com",
            password_hash=hash_password(password),
        )

    return _create_user


@pytest.fixture
def auth_headers():
    """
    Build Authorization headers for a user without going through login.
    """

    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(str(user.id))}"}

    return _headers
