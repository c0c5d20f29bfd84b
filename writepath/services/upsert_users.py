"""User Upsert — INSERT ... ON CONFLICT (email) DO UPDATE, one record at a time.

Invariants:
    - Records are processed in input order, one statement each
    - Update path changes username, first_name, last_name and updated_at only;
      id, created_at and is_active keep their stored values
    - Returned rows reflect what is stored after each statement
"""

import logging
from typing import Sequence

from writepath.infrastructure.database import (
    DatabaseSessionManager, dialect_insert,
)
from writepath.models._time import utcnow
from writepath.models.user import User
from writepath.schemas.inputs import UserCreate
from writepath.schemas.results import UserSummary
from writepath.services.demo_data import UPSERT_USERS

logger = logging.getLogger(__name__)


async def upsert_user(db: DatabaseSessionManager, data: UserCreate) -> UserSummary:
    stmt = dialect_insert(db, User).values(**data.model_dump())
    stmt = stmt.on_conflict_do_update(
        index_elements=["email"],
        set_={
            "username": stmt.excluded.username,
            "first_name": stmt.excluded.first_name,
            "last_name": stmt.excluded.last_name,
            "updated_at": utcnow(),
        },
    ).returning(User)

    async with db.transaction() as session:
        user = (
            await session.scalars(
                stmt, execution_options={"populate_existing": True},
            )
        ).one()
        return UserSummary.model_validate(user)


async def upsert_users(
    db: DatabaseSessionManager,
    users: Sequence[UserCreate] = UPSERT_USERS,
) -> list[UserSummary]:
    """Upsert each user by email, in order."""
    logger.info("Upserting users", extra={"step": "upsert_users"})
    results = [await upsert_user(db, data) for data in users]
    logger.info(
        f"Upserted {len(results)} users",
        extra={
            "step": "upsert_users",
            "affected": len(results),
            "result": [r.model_dump(mode="json") for r in results],
        },
    )
    return results
