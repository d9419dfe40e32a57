"""
Test infrastructure for the Postit API.

Strategy
--------
- SQLite in-memory via aiosqlite replaces PostgreSQL, keeping the suite
  self-contained.  SQLite supports the partial unique indexes the models
  declare, so active-only uniqueness is exercised for real.
- StaticPool forces every session onto the same in-memory connection;
  a second connection would see an empty database.
- The app's get_db dependency is overridden so every request uses the test
  session factory.
- Tables are created before each test and dropped after it.
- The Redis cache is disabled by setting cache._redis = None; CacheManager
  treats that as a permanent miss, so the real database path is exercised.
"""
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from postit.cache import cache
from postit.database import Base, get_db
from postit.main import app
from postit.middleware import install_query_counter

# ---------------------------------------------------------------------------
# Test database engine: SQLite in-memory with aiosqlite
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine_test = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

install_query_counter(engine_test)

async_session_test = async_sessionmaker(
    engine_test,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def override_get_db():
    async with async_session_test() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_db] = override_get_db


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after to guarantee isolation."""
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    """Live session for tests that call the service layer directly."""
    cache._redis = None
    async with async_session_test() as session:
        yield session


@pytest_asyncio.fixture
async def async_client() -> AsyncClient:
    """httpx client wired to the FastAPI app through ASGITransport, cache off."""
    cache._redis = None
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# ---------------------------------------------------------------------------
# Request helpers shared by the endpoint tests
# ---------------------------------------------------------------------------

async def create_user(client: AsyncClient, name: str) -> dict:
    resp = await client.post("/users", json={"email": f"{name}@example.com", "username": name})
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


async def create_post(client: AsyncClient, user_id: int, content: str = "hello") -> dict:
    resp = await client.post("/posts", json={"content": content, "userId": user_id})
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


async def create_comment(client: AsyncClient, post_id: int, user_id: int, content: str = "nice") -> dict:
    resp = await client.post(
        f"/posts/{post_id}/comments", json={"content": content, "userId": user_id}
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]
