"""Raw SQL — literal PostgreSQL statements executed through text() with bound parameters.

Invariants:
    - Every variable value is a bound parameter; nothing is concatenated into SQL
    - Batch insert skips slugs that already exist (ON CONFLICT (slug) DO NOTHING)
    - Returned counts are the driver-reported affected rows

Design Decisions:
    - PostgreSQL only (generate_series, gen_random_uuid, random())
    - The earliest user authors the generated posts; with no users the INSERT
      violates author_id NOT NULL and surfaces as StorageError
"""

import logging

from sqlalchemy import text

from writepath.infrastructure.database import DatabaseSessionManager
from writepath.schemas.results import RawSqlResult

logger = logging.getLogger(__name__)

BATCH_INSERT_SQL = text("""
    INSERT INTO posts (
        id, title, slug, content, published, view_count,
        author_id, created_at, updated_at
    )
    SELECT
        gen_random_uuid(),
        CAST(:title_prefix AS text) || n,
        CAST(:slug_prefix AS text) || n,
        CAST(:content_prefix AS text) || n,
        true,
        0,
        (SELECT id FROM users ORDER BY created_at LIMIT 1),
        NOW(),
        NOW()
    FROM generate_series(1, CAST(:batch_size AS integer)) AS n
    ON CONFLICT (slug) DO NOTHING
""")

BUMP_VIEWS_SQL = text("""
    UPDATE posts
    SET view_count = view_count
        + CAST(floor(random() * CAST(:max_bump AS integer) + 1) AS integer),
        updated_at = NOW()
    WHERE published = true
""")


async def insert_batch_posts(
    db: DatabaseSessionManager, batch_size: int = 5,
) -> int:
    async with db.transaction() as session:
        result = await session.execute(
            BATCH_INSERT_SQL,
            {
                "title_prefix": "Batch Post ",
                "slug_prefix": "batch-post-",
                "content_prefix": "This is batch content for post ",
                "batch_size": batch_size,
            },
        )
        return result.rowcount


async def bump_published_views(
    db: DatabaseSessionManager, max_bump: int = 100,
) -> int:
    async with db.transaction() as session:
        result = await session.execute(BUMP_VIEWS_SQL, {"max_bump": max_bump})
        return result.rowcount


async def raw_sql_operations(
    db: DatabaseSessionManager, batch_size: int = 5, max_bump: int = 100,
) -> RawSqlResult:
    logger.info("Running raw SQL writes", extra={"step": "raw_sql_operations"})
    result = RawSqlResult(
        inserted=await insert_batch_posts(db, batch_size),
        updated=await bump_published_views(db, max_bump),
    )
    logger.info(
        f"Raw insert affected {result.inserted} rows, "
        f"raw update affected {result.updated} rows",
        extra={
            "step": "raw_sql_operations",
            "affected": result.inserted + result.updated,
        },
    )
    return result
