"""Service test fixtures — file-backed SQLite databases with the full schema.

Invariants:
    - Every test gets fresh database files under tmp_path
    - Foreign keys enforced so cascades behave like PostgreSQL
    - Engines are disposed after the test

Design Decisions:
    - File databases over :memory: so concurrent sessions get separate connections
"""

import pytest

from writepath.infrastructure.database import DatabaseSessionManager
from writepath.services.create_post import create_post_with_relations
from writepath.services.create_users import create_users_in_batch

from tests.services.db_helpers import create_test_db


@pytest.fixture
async def make_db(tmp_path):
    """Factory for extra isolated databases within one test."""
    managers = []

    async def _make(name: str = "test") -> DatabaseSessionManager:
        manager = await create_test_db(tmp_path / f"{name}.db")
        managers.append(manager)
        return manager

    yield _make
    for manager in managers:
        await manager.engine.dispose()


@pytest.fixture
async def db(make_db):
    return await make_db()


@pytest.fixture
async def seeded_users(db):
    """alice, bob and charlie."""
    await create_users_in_batch(db)
    return db


@pytest.fixture
async def guide_post(seeded_users):
    """The published guide post authored by alice."""
    return await create_post_with_relations(seeded_users)
