"""Conditional Delete — bulk DELETE of stale, unpublished, never-viewed posts.

Invariants:
    - A post is deleted only if ALL hold: unpublished, older than max_age_days, zero views
    - Opt-in: the runner calls this only when RUN_CONDITIONAL_DELETE is set
"""

import logging
from datetime import timedelta

from sqlalchemy import and_, delete

from writepath.infrastructure.database import DatabaseSessionManager
from writepath.models._time import utcnow
from writepath.models.post import Post

logger = logging.getLogger(__name__)


async def conditional_delete(
    db: DatabaseSessionManager, max_age_days: int = 30,
) -> int:
    """Delete stale drafts. Returns deleted count."""
    logger.info("Deleting stale drafts", extra={"step": "conditional_delete"})
    cutoff = utcnow() - timedelta(days=max_age_days)
    async with db.transaction() as session:
        result = await session.execute(
            delete(Post)
            .where(and_(
                Post.published.is_(False),
                Post.created_at < cutoff,
                Post.view_count == 0,
            ))
            .execution_options(synchronize_session=False),
        )
        deleted = result.rowcount
    logger.info(
        f"Deleted {deleted} posts",
        extra={"step": "conditional_delete", "affected": deleted},
    )
    return deleted
