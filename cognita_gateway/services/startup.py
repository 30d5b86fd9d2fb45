"""
Startup service for settings validation, usage log draining and connection pool cleanup.
"""

import logging
from contextlib import asynccontextmanager

from cognita_gateway.config.supabase_config import log_configuration_status
from cognita_gateway.services.background_tasks import drain_background_tasks
from cognita_gateway.services.chat_dispatcher import ChatDispatcher
from cognita_gateway.services.connection_pool import close_connection_pools, get_pool_stats
from cognita_gateway.services.provider_registry import build_provider_registry

logger = logging.getLogger(__name__)


def init_app_state(app, settings) -> None:
    """Attach settings and the dispatcher to ``app.state``."""
    app.state.settings = settings
    app.state.dispatcher = ChatDispatcher(
        build_provider_registry(settings), settings.fallback_order
    )


@asynccontextmanager
async def lifespan(app):
    """
    Application lifespan manager for startup and shutdown events
    """
    # Startup
    settings = app.state.settings
    logger.info(f"Starting Cognita gateway (env: {settings.app_env})")

    # Missing Supabase degrades identity and usage logging, it does not block startup
    log_configuration_status(settings)
    logger.info(f"Fallback order: {', '.join(settings.fallback_order)}")

    yield

    # Shutdown
    logger.info("Shutting down Cognita gateway...")

    try:
        pending = await drain_background_tasks(settings.usage_log_drain_timeout)
        if pending:
            logger.warning(f"{pending} usage log write(s) did not finish before shutdown")
    except Exception as e:
        logger.warning(f"Background task drain warning: {e}")

    try:
        stats = get_pool_stats()
        await close_connection_pools()
        logger.info(f"Connection pools closed ({stats['total_clients']} clients)")
    except Exception as e:
        logger.warning(f"Connection pool shutdown warning: {e}")
