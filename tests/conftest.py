"""
Shared pytest fixtures.

Each test gets its own SQLite file database (aiosqlite) wired in through
``app.dependency_overrides``, and an assistant service backed by a fake model.
"""
import asyncio
import os
from datetime import timezone

# Must be set before barakaflow.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test-unused.db")
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["ERROR_LOG_FILE"] = ""
os.environ["OPENAI_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from barakaflow import database
from barakaflow.config import Settings
from barakaflow.dependencies import get_assistant_service
from barakaflow.main import app
from barakaflow.services.assistant import AssistantService
from barakaflow.services.cache import CacheStore

from fakes import FakeLLM, register


@pytest.fixture
def test_engine(tmp_path):
    engine = database.make_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    asyncio.run(database.init_models(engine))
    yield engine
    asyncio.run(engine.dispose())


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def assistant(fake_llm):
    return AssistantService(llm=fake_llm, cache=CacheStore())


@pytest.fixture
def app_client(test_engine, assistant, monkeypatch):
    # Calendar days and clock times resolve in UTC whatever the host zone
    monkeypatch.setattr(Settings, "tzinfo", property(lambda self: timezone.utc))
    session_factory = async_sessionmaker(bind=test_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with session_factory() as db:
            yield db

    app.dependency_overrides[database.get_db] = override_get_db
    app.dependency_overrides[get_assistant_service] = lambda: assistant
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(app_client):
    """Bearer headers for a freshly registered user."""
    token = register(app_client)["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_headers(app_client):
    token = register(app_client, email="baraka@example.com", name="Baraka")["token"]
    return {"Authorization": f"Bearer {token}"}
