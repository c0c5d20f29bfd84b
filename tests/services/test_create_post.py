"""Nested post creation — author connection, tags, categories, atomicity."""

import pytest

from writepath.core.errors import PreconditionNotMetError, StorageError
from writepath.models.category import Category, PostCategory
from writepath.models.post import Post
from writepath.models.tag import Tag, PostTag
from writepath.services.create_post import create_post_with_relations
from writepath.services.demo_data import ALICE_EMAIL, GUIDE_POST, GUIDE_SLUG

from tests.services.db_helpers import count_rows


async def test_creates_post_with_author_tags_and_categories(seeded_users):
    summary = await create_post_with_relations(seeded_users)

    assert summary.slug == GUIDE_SLUG
    assert summary.published is True
    assert summary.published_at is not None
    assert summary.view_count == 0
    assert summary.author.email == ALICE_EMAIL
    assert {t.slug for t in summary.tags} == {"postgresql", "aws", "performance"}
    assert {c.slug for c in summary.categories} == {"database", "cloud"}


async def test_link_rows_are_persisted(seeded_users):
    await create_post_with_relations(seeded_users)

    assert await count_rows(seeded_users, Tag) == 3
    assert await count_rows(seeded_users, PostTag) == 3
    assert await count_rows(seeded_users, Category) == 2
    assert await count_rows(seeded_users, PostCategory) == 2


async def test_missing_author_aborts_without_writes(db):
    with pytest.raises(PreconditionNotMetError) as exc_info:
        await create_post_with_relations(db)

    assert exc_info.value.context.lookup == {"email": ALICE_EMAIL}
    assert await count_rows(db, Post) == 0
    assert await count_rows(db, Tag) == 0


async def test_duplicate_slug_rolls_back_everything(seeded_users):
    await create_post_with_relations(seeded_users)
    retry = GUIDE_POST.model_copy(update={"tags": [], "categories": []})

    with pytest.raises(StorageError):
        await create_post_with_relations(seeded_users, retry)

    assert await count_rows(seeded_users, Post) == 1


async def test_unpublished_post_has_no_published_at(seeded_users):
    draft = GUIDE_POST.model_copy(
        update={"slug": "draft", "published": False, "tags": [], "categories": []},
    )

    summary = await create_post_with_relations(seeded_users, draft)

    assert summary.published is False
    assert summary.published_at is None
