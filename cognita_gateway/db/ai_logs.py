"""
AI Usage Log Database Operations

One row per externally visible chat outcome is written to ``ai_logs``.
Writes are best-effort: a failed insert is logged and never reaches the
caller.
"""

import asyncio
import logging
from dataclasses import asdict, dataclass
from typing import Any, Literal

from supabase import Client

from cognita_gateway.config.config import GatewaySettings
from cognita_gateway.config.supabase_config import (
    close_supabase_client,
    get_supabase_client_for_token,
)
from cognita_gateway.constants import AI_LOGS_TABLE
from cognita_gateway.services.prometheus_metrics import record_usage_log_write

logger = logging.getLogger(__name__)

UsageStatus = Literal["success", "error"]


@dataclass(frozen=True)
class UsageLogEntry:
    user_id: str | None
    provider: str
    model: str
    prompt_chars: int
    completion_chars: int
    latency_ms: int
    status: UsageStatus
    error_text: str | None = None

    def to_row(self) -> dict[str, Any]:
        return asdict(self)


def insert_ai_log(client: Client, entry: UsageLogEntry) -> Any:
    """Insert a single usage row. Raises on database errors."""
    return client.table(AI_LOGS_TABLE).insert(entry.to_row()).execute()


def _write_usage_row(entry: UsageLogEntry, token: str | None, settings: GatewaySettings) -> bool:
    client = get_supabase_client_for_token(settings, token)
    if client is None:
        logger.debug("Supabase not configured; skipping usage log")
        return False
    try:
        insert_ai_log(client, entry)
    finally:
        close_supabase_client(client)
    return True


async def log_usage_event(
    entry: UsageLogEntry,
    token: str | None,
    settings: GatewaySettings,
) -> None:
    """
    Record a usage row on behalf of the caller.

    The insert runs with the caller's token so row-level security sees the
    caller. Missing Supabase configuration makes this a no-op. Never raises.
    """
    try:
        # supabase-py is synchronous; keep it off the event loop
        loop = asyncio.get_event_loop()
        written = await loop.run_in_executor(None, _write_usage_row, entry, token, settings)
    except Exception as e:
        record_usage_log_write("error")
        logger.warning(
            f"Failed to write usage log for provider {entry.provider} ({entry.status}): {e}"
        )
        return

    if written:
        record_usage_log_write("success")
        logger.debug(f"Usage log written: provider={entry.provider} status={entry.status}")
