"""Batch User Creation — multi-row INSERT that skips rows colliding on a unique key.

Invariants:
    - One statement, one round trip
    - Colliding rows (email or username) are skipped silently and left unchanged
    - Returned count is the number of rows actually inserted
"""

import logging
from typing import Sequence

from writepath.infrastructure.database import (
    DatabaseSessionManager, dialect_insert,
)
from writepath.models.user import User
from writepath.schemas.inputs import UserCreate
from writepath.services.demo_data import BATCH_USERS

logger = logging.getLogger(__name__)


async def create_users_in_batch(
    db: DatabaseSessionManager,
    users: Sequence[UserCreate] = BATCH_USERS,
) -> int:
    """Insert users, skipping duplicates. Returns inserted count."""
    logger.info("Creating users in batch", extra={"step": "create_users_in_batch"})
    if not users:
        return 0

    stmt = (
        dialect_insert(db, User.__table__)
        .values([u.model_dump() for u in users])
        .on_conflict_do_nothing()
    )
    async with db.transaction() as session:
        result = await session.execute(stmt)
        inserted = result.rowcount

    logger.info(
        f"Created {inserted} of {len(users)} users",
        extra={"step": "create_users_in_batch", "affected": inserted},
    )
    return inserted
