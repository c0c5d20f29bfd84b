"""Demo Data — the fixed records the runner writes.

Design Decisions:
    - Steps share state only through these keys (emails, the guide slug)
"""

from writepath.schemas.inputs import (
    CategoryCreate, PostCreate, ProfileFields, ProfileUpsert, TagCreate,
    UserCreate,
)

ALICE_EMAIL = "alice@example.com"
BOB_EMAIL = "bob@example.com"
CHARLIE_EMAIL = "charlie@example.com"
GUIDE_SLUG = "aurora-postgresql-performance-guide"

BATCH_USERS = [
    UserCreate(
        email=ALICE_EMAIL, username="alice_dev",
        first_name="Alice", last_name="Johnson",
    ),
    UserCreate(
        email=BOB_EMAIL, username="bob_writer",
        first_name="Bob", last_name="Smith",
    ),
    UserCreate(
        email=CHARLIE_EMAIL, username="charlie_tech",
        first_name="Charlie", last_name="Brown",
    ),
]

GUIDE_POST = PostCreate(
    title="Aurora PostgreSQL Performance Tuning Guide",
    slug=GUIDE_SLUG,
    content="A detailed guide to tuning Aurora PostgreSQL performance...",
    excerpt="Learn how to optimize Aurora PostgreSQL for better performance",
    published=True,
    author_email=ALICE_EMAIL,
    tags=[
        TagCreate(name="PostgreSQL", slug="postgresql", color="#336791"),
        TagCreate(name="AWS", slug="aws", color="#ff9900"),
        TagCreate(name="Performance", slug="performance", color="#28a745"),
    ],
    categories=[
        CategoryCreate(
            name="Databases", slug="database",
            description="Articles about databases",
        ),
        CategoryCreate(
            name="Cloud", slug="cloud",
            description="Cloud computing",
        ),
    ],
)

INTERACTION_ACTOR_EMAIL = BOB_EMAIL
INTERACTION_COMMENT = "Great article, learned a lot!"

UPSERT_USERS = [
    UserCreate(
        email="admin@example.com", username="admin",
        first_name="Admin", last_name="User",
    ),
    UserCreate(
        email=ALICE_EMAIL, username="alice_updated",
        first_name="Alice", last_name="Johnson Updated",
    ),
]

CONCURRENT_COMMENTS = [
    ("Concurrent comment 1", ALICE_EMAIL),
    ("Concurrent comment 2", BOB_EMAIL),
]
CONCURRENT_FIRST_NAME = "Charlie Updated"
CHARLIE_PROFILE = ProfileUpsert(
    create=ProfileFields(
        bio="Full-stack developer", website="https://charlie.dev",
    ),
    update=ProfileFields(
        bio="Senior full-stack developer", website="https://charlie.dev",
    ),
)
