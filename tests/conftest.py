import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from video_manager import database
from video_manager.main import app
from video_manager.migrations import run_migrations
from video_manager.services.api_client import ManagerClient


@pytest_asyncio.fixture
async def db(tmp_path):
    """Fresh migrated SQLite database per test"""
    await database.init_db(f"sqlite:///{tmp_path / 'videos.db'}")
    await run_migrations()

    yield database

    await database.dispose_db()


@pytest_asyncio.fixture
async def client(db):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def manager(db):
    async with ManagerClient(base_url="http://test", transport=ASGITransport(app=app)) as manager:
        yield manager


@pytest.fixture
def call(client):
    """POST an action to the dispatcher"""
    async def _call(action, payload=None):
        return await client.post("/api/videos", params={"action": action}, json=payload or {})
    return _call
