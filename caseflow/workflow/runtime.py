"""Deadlines, cancellation shielding and side-effect error reporting."""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from caseflow.workflow.errors import DependencyError, StoreTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")

ErrorReporter = Callable[[DependencyError], None]


def log_dependency_error(error: DependencyError) -> None:
    """Default error reporter: log and move on."""
    logger.error(
        "Side effect failed (%s): %s",
        error.dependency,
        error.message,
        exc_info=error.__cause__ or error,
    )


async def run_with_deadline(
    operation: Awaitable[T], timeout: float | None, name: str
) -> T:
    """Await ``operation``, failing with StoreTimeoutError once ``timeout`` passes."""
    if timeout is None:
        return await operation
    try:
        return await asyncio.wait_for(operation, timeout)
    except asyncio.TimeoutError as exc:
        logger.warning("%s exceeded its %.3fs deadline", name, timeout)
        raise StoreTimeoutError(name, timeout) from exc


async def run_uncancellable(write: Awaitable[T]) -> T:
    """Run a write that must finish once started.

    Cancelling the caller (directly or through a deadline) stops the caller
    waiting, but the write itself keeps running to completion.
    """
    task = asyncio.ensure_future(write)
    task.add_done_callback(_log_orphaned_failure)
    return await asyncio.shield(task)


def _log_orphaned_failure(task: asyncio.Future) -> None:
    # Retrieving the exception marks it handled; if the caller was cancelled
    # nobody else will, and asyncio would warn at garbage collection.
    if task.cancelled() or task.exception() is None:
        return
    logger.debug("Shielded write finished with %r", task.exception())
