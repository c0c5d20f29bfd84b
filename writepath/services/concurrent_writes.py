"""Concurrent Writes — three independent writes fanned out at once.

Invariants:
    - Each operation has its own session and its own transaction
    - Operations touch disjoint rows; any completion order gives the same state
    - Comments connect to post and author by unique key inside the INSERT itself;
      a missing key violates NOT NULL and surfaces as StorageError
    - Not transactional as a group: see core/fan_out.py
"""

import logging

from sqlalchemy import insert, select, update

from writepath.core.errors import ErrorContext, PreconditionNotMetError
from writepath.core.fan_out import fan_out
from writepath.infrastructure.database import (
    DatabaseSessionManager, dialect_insert,
)
from writepath.models._time import utcnow
from writepath.models.comment import Comment
from writepath.models.post import Post
from writepath.models.profile import Profile
from writepath.models.user import User
from writepath.schemas.inputs import ProfileUpsert
from writepath.schemas.results import (
    CommentSummary, ProfileSummary, ProfileUpdateResult,
)
from writepath.services.demo_data import (
    CHARLIE_EMAIL, CHARLIE_PROFILE, CONCURRENT_COMMENTS,
    CONCURRENT_FIRST_NAME, GUIDE_SLUG,
)

logger = logging.getLogger(__name__)


async def add_comment(
    db: DatabaseSessionManager, content: str, post_slug: str, author_email: str,
) -> CommentSummary:
    """Insert a comment, resolving post and author ids in the same statement."""
    stmt = insert(Comment).values(
        content=content,
        post_id=select(Post.id).where(Post.slug == post_slug).scalar_subquery(),
        author_id=(
            select(User.id).where(User.email == author_email).scalar_subquery()
        ),
    ).returning(Comment)
    async with db.transaction() as session:
        comment = (await session.scalars(stmt)).one()
        return CommentSummary.model_validate(comment)


async def update_user_with_profile(
    db: DatabaseSessionManager,
    email: str,
    first_name: str,
    profile: ProfileUpsert,
) -> ProfileUpdateResult:
    """Rename a user and upsert its profile in one transaction."""
    async with db.transaction() as session:
        user_id = await session.scalar(
            update(User)
            .where(User.email == email)
            .values(first_name=first_name)
            .returning(User.id)
            .execution_options(synchronize_session=False),
        )
        if user_id is None:
            raise PreconditionNotMetError(
                "User", {"email": email},
                ErrorContext(operation="update_user_with_profile"),
            )

        stmt = dialect_insert(db, Profile).values(
            user_id=user_id, **profile.create.model_dump(),
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id"],
            set_={**profile.update.model_dump(), "updated_at": utcnow()},
        ).returning(Profile)
        stored = (
            await session.scalars(
                stmt, execution_options={"populate_existing": True},
            )
        ).one()
        return ProfileUpdateResult(
            user_id=user_id,
            first_name=first_name,
            profile=ProfileSummary.model_validate(stored),
        )


async def concurrent_write_operations(db: DatabaseSessionManager) -> dict:
    """Two comments on the guide post and charlie's profile update, concurrently."""
    logger.info(
        "Running concurrent writes",
        extra={"step": "concurrent_write_operations"},
    )
    operations = {
        f"comment_{i}": add_comment(db, content, GUIDE_SLUG, email)
        for i, (content, email) in enumerate(CONCURRENT_COMMENTS, start=1)
    }
    operations["update_profile"] = update_user_with_profile(
        db, CHARLIE_EMAIL, CONCURRENT_FIRST_NAME, CHARLIE_PROFILE,
    )
    results = await fan_out(operations)
    logger.info(
        f"Completed {len(results)} concurrent operations",
        extra={"step": "concurrent_write_operations", "affected": len(results)},
    )
    return results
