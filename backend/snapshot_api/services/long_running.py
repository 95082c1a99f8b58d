"""Long-Running Operation Waiter — awaits an Azure LROPoller without blocking the loop.

Invariants:
    - Returns only after poller.done() is True (never early while pending)
    - Each wait happens in the thread pool for at most poll_interval seconds
    - Between waits, is_disconnected() is checked; a gone client stops the wait
      with RequestCancelledError. The Azure operation itself keeps running.

Design Decisions:
    - Bounded waits instead of one blocking poller.result(): a disconnected
      client frees its handler within one poll interval
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi.concurrency import run_in_threadpool

from snapshot_api.core.errors import ErrorContext, RequestCancelledError

logger = logging.getLogger(__name__)

DisconnectCheck = Callable[[], Awaitable[bool]]


async def _never_disconnected() -> bool:
    return False


async def wait_until_done(
    poller: Any,
    operation: str,
    is_disconnected: DisconnectCheck | None = None,
    poll_interval: float = 1.0,
    context: ErrorContext | None = None,
) -> None:
    """Wait for a poller to reach a terminal state."""
    check = is_disconnected or _never_disconnected
    while not poller.done():
        if await check():
            logger.warning(
                f"Client disconnected, abandoning wait for {operation}",
                extra={
                    "resource_group": context.resource_group if context else None,
                    "snapshot_name": context.snapshot_name if context else None,
                },
            )
            raise RequestCancelledError(operation, context=context)
        await run_in_threadpool(poller.wait, poll_interval)
