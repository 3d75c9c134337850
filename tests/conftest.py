"""Test fixtures — a fresh in-memory database per test.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Each test gets its own SQLite in-memory engine (aiosqlite + StaticPool,
   so every session shares the one connection that holds the schema).
2. The app's get_db is overridden to hand out sessions from that engine,
   one per request — just like production.
3. Tests inspect rows through their own fresh session, so they see what
   was committed rather than a cached identity map.

Environment is set before tenantauth is imported so Settings picks it up.
"""

import os

os.environ.setdefault("TENANTAUTH_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("TENANTAUTH_BCRYPT_ROUNDS", "4")
os.environ.setdefault("TENANTAUTH_ENVIRONMENT", "development")

from datetime import timedelta  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from tenantauth.auth.jwt import TokenConfig, TokenIssuer  # noqa: E402
from tenantauth.db.engine import get_db  # noqa: E402
from tenantauth.db.models import Base  # noqa: E402
from tenantauth.main import create_app  # noqa: E402


@pytest.fixture()
def token_config() -> TokenConfig:
    return TokenConfig(
        access_secret="test-access-secret",
        refresh_secret="test-refresh-secret",
        access_ttl=timedelta(minutes=15),
        refresh_ttl=timedelta(days=10),
    )


@pytest.fixture()
def token_issuer(token_config) -> TokenIssuer:
    return TokenIssuer(token_config)


@pytest_asyncio.fixture()
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture()
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture()
def app(session_factory, token_config):
    app = create_app(token_config)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ─── Helpers ─────────────────────────────────────────────


def company_body(**overrides) -> dict:
    body = {
        "companyName": "Acme",
        "ownerName": "Jo",
        "rollNo": "R1",
        "ownerEmail": "jo@acme.com",
        "accessCode": "1234",
    }
    body.update(overrides)
    return body


@pytest_asyncio.fixture()
async def registered(client) -> dict:
    """A registered company: the register body plus clientID/clientSecret."""
    body = company_body()
    r = await client.post("/api/v1/register", json=body)
    assert r.status_code == 201
    data = r.json()["data"]
    return {**body, "clientID": data["clientID"], "clientSecret": data["clientSecret"]}


@pytest_asyncio.fixture()
async def access_token(client, registered) -> str:
    r = await client.post("/api/v1/login", json=registered)
    assert r.status_code == 200
    return r.json()["data"]["accessToken"]
