"""Pytest configuration and shared fixtures."""

import asyncio
import base64
import os
import tempfile
from pathlib import Path

# Settings are read at import time, so the test database must be set first
_DB_DIR = Path(tempfile.mkdtemp(prefix="lightwave-tests-"))
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR / 'test.db'}"
os.environ["ADMIN_USERNAME"] = "admin"
os.environ["ADMIN_PASSWORD"] = "123"
os.environ["BUNDLE_RESPECTS_STOCK"] = "false"

import pytest
from fastapi.testclient import TestClient

from core.hub import SnapshotHub
from db.database import Base, async_session_maker, engine
from db.store import DocumentStore
from schemas.inventory import InventoryItemRead


async def _reset_database() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()


def _basic(username: str, password: str) -> dict:
    token = base64.b64encode(f"{username}:{password}".encode()).decode()
    return {"Authorization": f"Basic {token}"}


@pytest.fixture
def basic_auth():
    return _basic


@pytest.fixture
def client() -> TestClient:
    asyncio.run(_reset_database())
    from main import app

    with TestClient(app) as c:
        c.headers.update(_basic("admin", "123"))
        yield c


@pytest.fixture
def hub() -> SnapshotHub:
    return SnapshotHub()


@pytest.fixture
async def store(hub):
    await _reset_database()
    async with async_session_maker() as session:
        yield DocumentStore(session, hub)
    await engine.dispose()


@pytest.fixture
def speaker() -> InventoryItemRead:
    return InventoryItemRead(id="inv-speaker", name="PA-Speaker", rent_price=50, stock=3)


@pytest.fixture
def mixer() -> InventoryItemRead:
    return InventoryItemRead(id="inv-mixer", name="Mixer", rent_price=80, stock=2)
