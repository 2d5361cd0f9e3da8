"""
Root conftest.py for dataset-hub tests.

Every app fixture runs against its own in-memory SQLite database with the
default five teammates (atu, saha, mich, hars, pree) seeded in that order.
"""

from __future__ import annotations

from typing import Any, Dict

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from dataset_hub.app.env import get_env
from dataset_hub.app.settings import AppSettings
from dataset_hub.db.engine import DBEngine
from dataset_hub.db.settings import DBSettings
from dataset_hub.main import create_app

MEMORY_URL = "sqlite+aiosqlite:///:memory:"


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_collection_modifyitems(config, items):
    """Tag tests by folder so `-m security` / `-m export` select them."""
    for item in items:
        norm = str(item.fspath).replace("\\", "/")
        if "/tests/security/" in norm or "passcode" in norm:
            item.add_marker(pytest.mark.security)
        if "/tests/export/" in norm:
            item.add_marker(pytest.mark.export)


# =============================================================================
# ENVIRONMENT
# =============================================================================


@pytest.fixture(autouse=True)
def _test_env(monkeypatch):
    """Pin APP_ENV=test and keep stray DB urls out of the tests."""
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("DB_DATABASE_URL", raising=False)
    monkeypatch.delenv("APP_TEAMMATES", raising=False)
    get_env.cache_clear()
    yield
    get_env.cache_clear()


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture
def db_settings() -> DBSettings:
    return DBSettings(database_url=MEMORY_URL)


@pytest_asyncio.fixture
async def engine(db_settings: DBSettings):
    """Bare engine with the schema created and nothing seeded."""
    eng = DBEngine(db_settings)
    await eng.create_schema()
    try:
        yield eng
    finally:
        await eng.dispose()


# =============================================================================
# FASTAPI APP FIXTURES
# =============================================================================


@pytest.fixture
def app_settings() -> AppSettings:
    return AppSettings()


@pytest_asyncio.fixture
async def app(app_settings: AppSettings, db_settings: DBSettings) -> FastAPI:
    """The real application with its lifespan running (schema + seed)."""
    application = create_app(app_settings, db_settings, configure_logging=False)
    # ASGITransport does not drive lifespan events
    async with application.router.lifespan_context(application):
        yield application


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncClient:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c


@pytest_asyncio.fixture
async def teammate_ids(client: AsyncClient) -> Dict[str, int]:
    res = await client.get("/api/teammates")
    assert res.status_code == 200
    return {t["name"]: t["id"] for t in res.json()}


# =============================================================================
# SAMPLE DATA
# =============================================================================


def make_record(n: int = 1, **overrides: Any) -> Dict[str, str]:
    record = {
        "instruction": f"I am investor #{n}. How should I plan my savings?",
        "input": f"User persona: [Age: {20 + n}, Income: ₹{n} LPA, City: Pune]",
        "output": f"## Plan {n}\n\nStart with an **emergency fund**.",
    }
    record.update(overrides)
    return record


@pytest.fixture
def sample_record() -> Dict[str, str]:
    return make_record()


@pytest.fixture
def record_factory():
    return make_record
