"""Batch Update — bulk conditional UPDATEs on users and posts.

Invariants:
    - Only rows matching the filter change; the returned counts are matched rows
    - Each UPDATE is its own statement and its own transaction
"""

import logging
from datetime import timedelta

from sqlalchemy import update

from writepath.infrastructure.database import DatabaseSessionManager
from writepath.models._time import utcnow
from writepath.models.post import Post
from writepath.models.user import User
from writepath.schemas.results import BatchUpdateResult

logger = logging.getLogger(__name__)


async def activate_recent_users(
    db: DatabaseSessionManager, window_hours: int = 24,
) -> int:
    """Mark active every user created within the last window_hours."""
    cutoff = utcnow() - timedelta(hours=window_hours)
    async with db.transaction() as session:
        result = await session.execute(
            update(User)
            .where(User.created_at >= cutoff)
            .values(is_active=True)
            .execution_options(synchronize_session=False),
        )
        return result.rowcount


async def publish_drafts_with_content(db: DatabaseSessionManager) -> int:
    """Publish every unpublished post that has content."""
    async with db.transaction() as session:
        result = await session.execute(
            update(Post)
            .where(Post.published.is_(False), Post.content.is_not(None))
            .values(published=True, published_at=utcnow())
            .execution_options(synchronize_session=False),
        )
        return result.rowcount


async def batch_update_operations(
    db: DatabaseSessionManager, window_hours: int = 24,
) -> BatchUpdateResult:
    logger.info("Running batch updates", extra={"step": "batch_update_operations"})
    result = BatchUpdateResult(
        users_activated=await activate_recent_users(db, window_hours),
        posts_published=await publish_drafts_with_content(db),
    )
    logger.info(
        f"Activated {result.users_activated} users, "
        f"published {result.posts_published} posts",
        extra={
            "step": "batch_update_operations",
            "affected": result.users_activated + result.posts_published,
        },
    )
    return result
