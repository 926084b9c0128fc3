"""Shared pytest fixtures for Pathos tests."""

import pytest
from httpx import ASGITransport, AsyncClient

from pathos.db.connection import Database
from pathos.main import app, install_services
from pathos.milestones.service import MilestoneService

# Cheapest bcrypt cost; hashing speed is not under test
TEST_BCRYPT_ROUNDS = 4


@pytest.fixture
async def db():
    """In-memory database for tests."""
    database = await Database.connect(":memory:")
    yield database
    await database.close()


@pytest.fixture
async def milestone_service(db):
    return MilestoneService(db)


@pytest.fixture
async def client(db):
    """Async test client with in-memory DB wired into the app."""
    install_services(app, db, bcrypt_rounds=TEST_BCRYPT_ROUNDS)
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
    app.dependency_overrides.clear()
