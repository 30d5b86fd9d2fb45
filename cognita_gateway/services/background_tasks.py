"""
Background task management for non-blocking operations
Handles usage logging after the chat response payload is computed
"""

import asyncio
import logging

from cognita_gateway.config.config import GatewaySettings
from cognita_gateway.db.ai_logs import UsageLogEntry, log_usage_event

logger = logging.getLogger(__name__)

# Strong references to in-flight tasks so they are not garbage collected mid-write
_background_tasks: set[asyncio.Task] = set()


def _create_background_task(coro, name: str | None = None) -> asyncio.Task:
    task = asyncio.get_running_loop().create_task(coro, name=name)
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)
    return task


def schedule_usage_log(
    entry: UsageLogEntry,
    token: str | None,
    settings: GatewaySettings,
) -> asyncio.Task:
    """
    Queue a usage row insert as a tracked background task.

    Must be called from inside the running event loop (i.e. a request handler).
    """
    task = _create_background_task(
        log_usage_event(entry, token, settings),
        name=f"usage-log:{entry.provider}:{entry.status}",
    )
    logger.debug(f"Queued usage log task for provider {entry.provider} ({entry.status})")
    return task


async def drain_background_tasks(timeout: float) -> int:
    """
    Wait for in-flight background tasks during shutdown.

    Args:
        timeout: Maximum seconds to wait

    Returns:
        Number of tasks still pending (and cancelled) after the timeout
    """
    pending = {task for task in _background_tasks if not task.done()}
    if not pending:
        return 0

    logger.info(f"Waiting up to {timeout}s for {len(pending)} background task(s)")
    _, still_pending = await asyncio.wait(pending, timeout=timeout)

    for task in still_pending:
        task.cancel()
    if still_pending:
        logger.warning(f"Cancelled {len(still_pending)} background task(s) still running at shutdown")

    return len(still_pending)


def get_pending_tasks_count() -> int:
    """Get count of pending background tasks (for monitoring)"""
    return sum(1 for task in _background_tasks if not task.done())
