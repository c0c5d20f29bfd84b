"""Fan-out — run independent coroutines concurrently and join on all of them.

Invariants:
    - Every launched task runs to completion; a failure never cancels siblings
    - Results come back keyed by task name, in launch order
    - If any task failed, the first failure (launch order) is re-raised after
      all tasks finished and every failure was logged

Design Decisions:
    - Not transactional: writes of tasks that succeeded stay applied
    - gather(return_exceptions=True) over TaskGroup: TaskGroup cancels siblings
"""

import asyncio
import logging
from typing import Any, Awaitable, Mapping

logger = logging.getLogger(__name__)


async def fan_out(operations: Mapping[str, Awaitable[Any]]) -> dict[str, Any]:
    """Run every awaitable concurrently, fail if any failed."""
    tasks = {
        name: asyncio.ensure_future(op) for name, op in operations.items()
    }
    outcomes = await asyncio.gather(*tasks.values(), return_exceptions=True)

    results: dict[str, Any] = {}
    failures: list[BaseException] = []
    for name, outcome in zip(tasks, outcomes):
        if isinstance(outcome, BaseException):
            logger.error(
                f"Concurrent operation '{name}' failed: {outcome}",
                extra={"operation": name},
            )
            failures.append(outcome)
        else:
            results[name] = outcome

    if failures:
        logger.error(
            f"{len(failures)}/{len(tasks)} concurrent operations failed; "
            f"{len(results)} remain applied",
        )
        raise failures[0]
    return results
