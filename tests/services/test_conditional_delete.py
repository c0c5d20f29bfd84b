"""Conditional delete — every condition must hold for a post to go."""

from datetime import timedelta

from sqlalchemy import select

from writepath.models._time import utcnow
from writepath.models.comment import Comment
from writepath.models.post import Post
from writepath.models.user import User
from writepath.services.conditional_delete import conditional_delete

from tests.services.db_helpers import count_rows


async def _seed_posts(db):
    old = utcnow() - timedelta(days=40)
    async with db.transaction() as session:
        author = User(email="author@example.com", username="author")
        session.add(author)
        await session.flush()
        stale = Post(
            title="stale", slug="stale-draft", author_id=author.id,
            created_at=old,
        )
        session.add_all([
            stale,
            Post(title="viewed", slug="viewed-draft", author_id=author.id,
                 created_at=old, view_count=3),
            Post(title="fresh", slug="fresh-draft", author_id=author.id),
            Post(title="live", slug="old-live", author_id=author.id,
                 created_at=old, published=True, published_at=old),
        ])
        await session.flush()
        session.add(Comment(content="hi", post_id=stale.id, author_id=author.id))


async def test_deletes_only_stale_unviewed_drafts(db):
    await _seed_posts(db)

    deleted = await conditional_delete(db, max_age_days=30)

    assert deleted == 1
    async with db.session() as session:
        slugs = set((await session.scalars(select(Post.slug))).all())
    assert slugs == {"viewed-draft", "fresh-draft", "old-live"}


async def test_cascade_removes_comments_of_deleted_posts(db):
    await _seed_posts(db)

    await conditional_delete(db)

    assert await count_rows(db, Comment) == 0


async def test_nothing_matches_on_longer_window(db):
    await _seed_posts(db)

    assert await conditional_delete(db, max_age_days=60) == 0
    assert await count_rows(db, Post) == 4
