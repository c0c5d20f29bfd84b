"""User interaction transaction — all-or-nothing comment + like + view bump.

Invariants under test:
    - Precondition failures leave comments, likes and view_count untouched
    - A storage failure on the final UPDATE discards the two earlier inserts
    - Success writes exactly one comment, one like and bumps view_count by one
"""

import pytest
from sqlalchemy import select, text

from writepath.core.errors import PreconditionNotMetError, StorageError
from writepath.models.comment import Comment
from writepath.models.like import Like
from writepath.models.post import Post
from writepath.schemas.inputs import UserCreate
from writepath.services.create_post import create_post_with_relations
from writepath.services.create_users import create_users_in_batch
from writepath.services.demo_data import (
    ALICE_EMAIL, BOB_EMAIL, GUIDE_POST, GUIDE_SLUG,
)
from writepath.services.user_interaction import user_interaction_transaction

from tests.services.db_helpers import break_reconnects, count_rows


async def _view_count(db) -> int:
    async with db.session() as session:
        return await session.scalar(
            select(Post.view_count).where(Post.slug == GUIDE_SLUG),
        )


async def test_commits_comment_like_and_view_bump(guide_post, seeded_users):
    db = seeded_users

    result = await user_interaction_transaction(db)

    assert result.post_id == guide_post.id
    assert result.view_count == 1
    assert await count_rows(db, Comment) == 1
    assert await count_rows(db, Like) == 1
    assert await _view_count(db) == 1


async def test_missing_actor_leaves_no_trace(db):
    await create_users_in_batch(db, [
        UserCreate(email=ALICE_EMAIL, username="alice_dev"),
    ])
    await create_post_with_relations(db)

    with pytest.raises(PreconditionNotMetError) as exc_info:
        await user_interaction_transaction(db)

    assert exc_info.value.context.entity == "User"
    assert exc_info.value.context.lookup == {"email": BOB_EMAIL}
    assert await count_rows(db, Comment) == 0
    assert await count_rows(db, Like) == 0
    assert await _view_count(db) == 0


async def test_missing_published_post_raises_precondition(seeded_users):
    draft = GUIDE_POST.model_copy(update={"published": False})
    await create_post_with_relations(seeded_users, draft)

    with pytest.raises(PreconditionNotMetError) as exc_info:
        await user_interaction_transaction(seeded_users)

    assert exc_info.value.context.entity == "Post"
    assert await count_rows(seeded_users, Comment) == 0


async def test_storage_error_on_counter_update_discards_inserts(
    guide_post, seeded_users,
):
    db = seeded_users
    async with db.engine.begin() as conn:
        await conn.execute(text(
            "CREATE TRIGGER fail_post_update BEFORE UPDATE ON posts "
            "BEGIN SELECT RAISE(ABORT, 'simulated storage failure'); END",
        ))

    with pytest.raises(StorageError):
        await user_interaction_transaction(db)

    assert await count_rows(db, Comment) == 0
    assert await count_rows(db, Like) == 0
    assert await _view_count(db) == 0


async def test_duplicate_like_rolls_back_second_interaction(
    guide_post, seeded_users,
):
    db = seeded_users
    await user_interaction_transaction(db)

    with pytest.raises(StorageError):
        await user_interaction_transaction(db)

    assert await count_rows(db, Comment) == 1
    assert await count_rows(db, Like) == 1
    assert await _view_count(db) == 1


async def test_other_actors_increment_the_same_counter(guide_post, seeded_users):
    db = seeded_users
    await user_interaction_transaction(db)

    result = await user_interaction_transaction(db, actor_email=ALICE_EMAIL)

    assert result.view_count == 2
    assert await count_rows(db, Comment) == 2


async def test_connection_loss_surfaces_as_storage_error(guide_post, seeded_users):
    await break_reconnects(seeded_users)

    with pytest.raises(StorageError) as exc_info:
        await user_interaction_transaction(seeded_users)

    assert exc_info.value.operation == "connect"
