"""Bulk conditional updates — only matching rows change."""

from datetime import timedelta

from sqlalchemy import select

from writepath.models._time import utcnow
from writepath.models.post import Post
from writepath.models.user import User
from writepath.services.batch_update import (
    activate_recent_users, batch_update_operations, publish_drafts_with_content,
)


async def _add_user(db, email, created_at=None):
    async with db.transaction() as session:
        user = User(email=email, username=email.split("@")[0])
        if created_at is not None:
            user.created_at = created_at
        session.add(user)
    return user


async def _add_post(db, author, slug, content, published=False, published_at=None):
    async with db.transaction() as session:
        session.add(Post(
            title=slug, slug=slug, content=content, author_id=author.id,
            published=published, published_at=published_at,
        ))


async def _users_by_email(db) -> dict:
    async with db.session() as session:
        users = (await session.scalars(select(User))).all()
    return {u.email: u for u in users}


async def _posts_by_slug(db) -> dict:
    async with db.session() as session:
        posts = (await session.scalars(select(Post))).all()
    return {p.slug: p for p in posts}


async def test_activates_only_recent_users(db):
    await _add_user(db, "new@example.com")
    await _add_user(db, "old@example.com", utcnow() - timedelta(days=3))

    assert await activate_recent_users(db, window_hours=24) == 1

    users = await _users_by_email(db)
    assert users["new@example.com"].is_active is True
    assert users["old@example.com"].is_active is False


async def test_publishes_only_drafts_with_content(db):
    author = await _add_user(db, "author@example.com")
    published_at = utcnow() - timedelta(days=10)
    await _add_post(db, author, "draft-with-content", "body")
    await _add_post(db, author, "draft-without-content", None)
    await _add_post(db, author, "already-live", "body", True, published_at)
    before = await _posts_by_slug(db)

    assert await publish_drafts_with_content(db) == 1

    after = await _posts_by_slug(db)
    assert after["draft-with-content"].published is True
    assert after["draft-with-content"].published_at is not None
    assert after["draft-without-content"].published is False
    assert after["draft-without-content"].published_at is None
    assert after["already-live"].published_at == before["already-live"].published_at


async def test_batch_update_reports_both_counts(seeded_users):
    result = await batch_update_operations(seeded_users)

    assert result.users_activated == 3
    assert result.posts_published == 0
