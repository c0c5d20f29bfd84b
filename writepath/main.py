"""writepath runner — connects, runs the write-pattern steps in order, always disconnects.

Invariants:
    - Logging configured before the database is touched
    - Connection verified before the first step (fail fast, exit 1)
    - Steps run sequentially; the first WritePathError stops the sequence (exit 1)
    - The database client is disposed on every exit path
    - conditional_delete runs only when settings.run_conditional_delete is True

Design Decisions:
    - Steps receive the client explicitly; there is no module-level client
    - Unexpected (non-WritePathError) exceptions propagate with their traceback
"""

import asyncio
import logging
import sys
from functools import partial
from typing import Awaitable, Callable

from writepath.config import Settings, get_settings
from writepath.core.errors import DatabaseConnectionError, WritePathError
from writepath.infrastructure.database import (
    DatabaseSessionManager, open_database,
)
from writepath.infrastructure.observability import setup_logging
from writepath.services.batch_update import batch_update_operations
from writepath.services.concurrent_writes import concurrent_write_operations
from writepath.services.conditional_delete import conditional_delete
from writepath.services.create_post import create_post_with_relations
from writepath.services.create_users import create_users_in_batch
from writepath.services.raw_sql import raw_sql_operations
from writepath.services.upsert_users import upsert_users
from writepath.services.user_interaction import user_interaction_transaction

logger = logging.getLogger(__name__)

Step = tuple[str, Callable[[DatabaseSessionManager], Awaitable[object]]]


def build_steps(settings: Settings) -> list[Step]:
    """Ordered steps for one run."""
    steps: list[Step] = [
        ("create_users_in_batch", create_users_in_batch),
        ("create_post_with_relations", create_post_with_relations),
        ("user_interaction_transaction", user_interaction_transaction),
        (
            "batch_update_operations",
            partial(
                batch_update_operations,
                window_hours=settings.recent_user_window_hours,
            ),
        ),
        ("upsert_users", upsert_users),
        (
            "raw_sql_operations",
            partial(
                raw_sql_operations,
                batch_size=settings.raw_batch_size,
                max_bump=settings.raw_max_view_bump,
            ),
        ),
        ("concurrent_write_operations", concurrent_write_operations),
    ]
    if settings.run_conditional_delete:
        steps.append((
            "conditional_delete",
            partial(conditional_delete, max_age_days=settings.stale_post_age_days),
        ))
    return steps


async def run_steps(db: DatabaseSessionManager, steps: list[Step]) -> None:
    for name, step in steps:
        await step(db)
        logger.info(f"Step '{name}' completed", extra={"step": name})


async def run(settings: Settings, steps: list[Step] | None = None) -> int:
    """Run every step against settings.database_url. Returns the exit status."""
    steps = build_steps(settings) if steps is None else steps
    logger.info(f"Starting write-pattern run ({len(steps)} steps)")
    try:
        async with open_database(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            echo=settings.database_echo,
        ) as db:
            await run_steps(db, steps)
    except DatabaseConnectionError as e:
        logger.critical(
            f"Database connection failed: {e.message}",
            extra={"error": e},
        )
        return 1
    except WritePathError as e:
        logger.error(
            f"Write operation failed: {e.message}",
            extra={"error": e},
        )
        return 1

    logger.info("All write operations completed")
    return 0


def cli() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    sys.exit(asyncio.run(run(settings)))
