"""
Projexia - Test Configuration and Fixtures
"""
import os
from typing import AsyncGenerator, Dict, Any
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker, AsyncEngine
from sqlalchemy.pool import NullPool
from faker import Faker

# Set testing environment before the app reads its settings
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test.db'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['BYPASS_AUTH'] = 'false'

from projexia.main import app
from projexia.core.database import Base, get_db
from projexia.client.api_client import ProjexiaAPIClient
import projexia.models  # noqa: F401

fake = Faker()


@pytest.fixture
async def db_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Fresh SQLite database file per test"""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session for seeding and inspecting the database directly"""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override (one session per request, like get_db)"""
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                if session.new or session.dirty or session.deleted:
                    await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def api(client: AsyncClient) -> AsyncGenerator[ProjexiaAPIClient, None]:
    """Python API client wired to the app in-process (depends on `client` for the DB override)"""
    async with ProjexiaAPIClient(base_url="http://test/api", transport=ASGITransport(app=app)) as api_client:
        yield api_client


@pytest.fixture
def test_user_data() -> Dict[str, str]:
    return {
        "name": fake.name(),
        "email": fake.unique.email(),
        "password": "testpassword123",
    }


@pytest.fixture
async def test_user(client: AsyncClient, test_user_data) -> Dict[str, Any]:
    """A registered user (public projection)"""
    response = await client.post("/api/auth/signup", json=test_user_data)
    assert response.status_code == 201
    return response.json()


def make_project_payload(**overrides) -> Dict[str, Any]:
    """Valid project body; keyword overrides replace or add fields"""
    payload = {
        "name": fake.catch_phrase(),
        "description": fake.sentence(),
        "color": fake.hex_color(),
    }
    payload.update(overrides)
    return payload


def make_task_payload(project_id: str, creator_id: str, **overrides) -> Dict[str, Any]:
    payload = {
        "title": fake.sentence(nb_words=4),
        "description": fake.paragraph(),
        "dueDate": "2030-01-15T00:00:00Z",
        "creatorId": creator_id,
        "projectId": project_id,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
async def test_project(client: AsyncClient, test_user) -> Dict[str, Any]:
    """A project created by test_user"""
    response = await client.post(
        "/api/projects",
        params={"userId": test_user["id"]},
        json=make_project_payload(),
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
async def test_task(client: AsyncClient, test_user, test_project) -> Dict[str, Any]:
    response = await client.post(
        "/api/tasks",
        json=make_task_payload(test_project["id"], test_user["id"]),
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def project_payload():
    return make_project_payload


@pytest.fixture
def task_payload():
    return make_task_payload
