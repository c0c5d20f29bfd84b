"""Nested Post Creation — post connected to an existing author, with new tags and categories.

Invariants:
    - Author is looked up by email; a missing author aborts before any insert
    - Post, tags, categories and link rows are committed together
    - The returned summary has author, tags and categories loaded
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from writepath.core.errors import ErrorContext, PreconditionNotMetError
from writepath.infrastructure.database import DatabaseSessionManager
from writepath.models._time import utcnow
from writepath.models.category import Category, PostCategory
from writepath.models.post import Post
from writepath.models.tag import Tag, PostTag
from writepath.models.user import User
from writepath.schemas.inputs import PostCreate
from writepath.schemas.results import (
    CategorySummary, PostSummary, TagSummary, UserSummary,
)
from writepath.services.demo_data import GUIDE_POST

logger = logging.getLogger(__name__)


async def create_post_with_relations(
    db: DatabaseSessionManager, data: PostCreate = GUIDE_POST,
) -> PostSummary:
    """Create a post with nested tags and categories."""
    logger.info(
        "Creating post with relations",
        extra={"step": "create_post_with_relations"},
    )
    async with db.transaction() as session:
        author = await session.scalar(
            select(User).where(User.email == data.author_email),
        )
        if author is None:
            raise PreconditionNotMetError(
                "User", {"email": data.author_email},
                ErrorContext(operation="create_post_with_relations"),
            )

        post = Post(
            title=data.title,
            slug=data.slug,
            content=data.content,
            excerpt=data.excerpt,
            published=data.published,
            published_at=utcnow() if data.published else None,
            author_id=author.id,
        )
        for tag in data.tags:
            post.tags.append(PostTag(tag=Tag(**tag.model_dump())))
        for category in data.categories:
            post.categories.append(
                PostCategory(category=Category(**category.model_dump())),
            )
        session.add(post)
        await session.flush()

        loaded = await session.scalar(
            select(Post)
            .where(Post.id == post.id)
            .options(
                selectinload(Post.author),
                selectinload(Post.tags).selectinload(PostTag.tag),
                selectinload(Post.categories).selectinload(PostCategory.category),
            )
            .execution_options(populate_existing=True),
        )
        summary = PostSummary(
            id=loaded.id,
            title=loaded.title,
            slug=loaded.slug,
            published=loaded.published,
            published_at=loaded.published_at,
            view_count=loaded.view_count,
            author=UserSummary.model_validate(loaded.author),
            tags=[TagSummary.model_validate(link.tag) for link in loaded.tags],
            categories=[
                CategorySummary.model_validate(link.category)
                for link in loaded.categories
            ],
        )

    logger.info(
        f"Created post '{summary.slug}' with {len(summary.tags)} tags "
        f"and {len(summary.categories)} categories",
        extra={
            "step": "create_post_with_relations",
            "result": summary.model_dump(mode="json"),
        },
    )
    return summary
