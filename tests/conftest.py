# tests/conftest.py
import os
import tempfile

# Configure the environment before anything under app/ is imported: settings
# are cached and app.db builds its engine at import time.
_DB_DIR = tempfile.mkdtemp(prefix="workshop-ops-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["TESTING"] = "1"
os.environ["NOTIFICATIONS_ENABLED"] = "0"
os.environ["SUPER_ADMIN_EMAIL"] = "admin@example.com"
os.environ.setdefault("APP_ENV", "test")
os.environ.pop("SMTP_HOST", None)
os.environ.pop("EXERCISE_CATALOG_PATH", None)

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from app import db  # noqa: E402
from app.infra.unit_of_work import SqlAlchemyUnitOfWork  # noqa: E402
from app.main import create_app  # noqa: E402
from app.models.base import Base  # noqa: E402
from tests.helpers import ADMIN_EMAIL, login  # noqa: E402


@pytest_asyncio.fixture
async def db_schema():
    """Fresh schema per test on the shared SQLite file."""
    async with db.engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with db.engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def uow_factory(db_schema):
    return lambda: SqlAlchemyUnitOfWork(db.SessionLocal)


@pytest_asyncio.fixture
async def app_client(db_schema):
    application = create_app()
    async with AsyncClient(transport=ASGITransport(app=application), base_url="http://test") as ac:
        yield ac
    await application.state.events.drain()


@pytest_asyncio.fixture
async def admin(app_client) -> dict:
    return await login(app_client, ADMIN_EMAIL)


@pytest_asyncio.fixture
async def instructor(app_client) -> dict:
    return await login(app_client, "dana@example.com")
