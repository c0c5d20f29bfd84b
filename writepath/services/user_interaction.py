"""User Interaction Transaction — comment + like + view-count bump as one atomic unit.

Invariants:
    - All five steps run inside one transaction: either every write is
      committed or none is visible
    - Missing published post or missing actor raises PreconditionNotMetError
      and rolls back
    - view_count is incremented in the database (view_count + 1), never
      read-modify-written in Python
    - Storage failures (e.g. duplicate like) surface as StorageError and roll back

Design Decisions:
    - The target post row is locked (SELECT ... FOR UPDATE) for the rest of the unit
    - The earliest published post is the target, so reruns pick the same row
"""

import logging

from sqlalchemy import select, update

from writepath.core.errors import ErrorContext, PreconditionNotMetError
from writepath.infrastructure.database import DatabaseSessionManager
from writepath.models.comment import Comment
from writepath.models.like import Like
from writepath.models.post import Post
from writepath.models.user import User
from writepath.schemas.results import InteractionResult
from writepath.services.demo_data import (
    INTERACTION_ACTOR_EMAIL, INTERACTION_COMMENT,
)

logger = logging.getLogger(__name__)

_OPERATION = "user_interaction_transaction"


async def user_interaction_transaction(
    db: DatabaseSessionManager,
    actor_email: str = INTERACTION_ACTOR_EMAIL,
    comment_text: str = INTERACTION_COMMENT,
) -> InteractionResult:
    """Comment on and like the first published post, bumping its view count."""
    logger.info("Running user interaction transaction", extra={"step": _OPERATION})

    async with db.transaction() as session:
        post = await session.scalar(
            select(Post)
            .where(Post.published.is_(True))
            .order_by(Post.created_at)
            .limit(1)
            .with_for_update(),
        )
        if post is None:
            raise PreconditionNotMetError(
                "Post", {"published": True}, ErrorContext(operation=_OPERATION),
            )

        user = await session.scalar(
            select(User).where(User.email == actor_email),
        )
        if user is None:
            raise PreconditionNotMetError(
                "User", {"email": actor_email}, ErrorContext(operation=_OPERATION),
            )

        comment = Comment(
            content=comment_text, post_id=post.id, author_id=user.id,
        )
        like = Like(user_id=user.id, post_id=post.id)
        session.add_all([comment, like])
        await session.flush()

        view_count = await session.scalar(
            update(Post)
            .where(Post.id == post.id)
            .values(view_count=Post.view_count + 1)
            .returning(Post.view_count)
            .execution_options(synchronize_session=False),
        )
        result = InteractionResult(
            comment_id=comment.id,
            like_id=like.id,
            post_id=post.id,
            view_count=view_count,
        )

    logger.info(
        "User interaction transaction committed",
        extra={"step": _OPERATION, "result": result.model_dump(mode="json")},
    )
    return result
