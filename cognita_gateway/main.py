import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from prometheus_client import REGISTRY, generate_latest

from cognita_gateway import __version__
from cognita_gateway.config import Config, GatewaySettings
from cognita_gateway.config.logging_config import configure_logging
from cognita_gateway.routes import ai_chat, health
from cognita_gateway.services.startup import init_app_state, lifespan
from cognita_gateway.utils.error_handlers import register_exception_handlers

configure_logging()
logger = logging.getLogger(__name__)

# Initialize Sentry for error monitoring
if Config.SENTRY_ENABLED and Config.SENTRY_DSN:
    import sentry_sdk

    def sentry_traces_sampler(sampling_context):
        """Skip monitoring endpoints, sample everything else at the configured rate."""
        if sampling_context.get("parent_sampled") is not None:
            return 1.0

        endpoint = ""
        if "asgi_scope" in sampling_context:
            endpoint = sampling_context["asgi_scope"].get("path", "")

        if endpoint in ["/metrics", "/api/health"]:
            return 0.0

        return Config.SENTRY_TRACES_SAMPLE_RATE

    sentry_sdk.init(
        dsn=Config.SENTRY_DSN,
        environment=Config.SENTRY_ENVIRONMENT,
        release=Config.APP_VERSION,
        traces_sampler=sentry_traces_sampler,
    )
    logger.info(f"Sentry initialized (environment: {Config.SENTRY_ENVIRONMENT})")
else:
    logger.info("Sentry disabled (SENTRY_ENABLED=false or SENTRY_DSN not set)")


def create_app(settings: GatewaySettings | None = None) -> FastAPI:
    """
    Build the ASGI application.

    Args:
        settings: Explicit settings (tests); defaults to the environment
    """
    settings = settings or Config.to_settings()

    app = FastAPI(
        title="Cognita AI Gateway",
        description="Chat gateway dispatching to Cerebras, Meta Llama API and Replicate",
        version=__version__,
        lifespan=lifespan,
    )
    init_app_state(app, settings)

    # The SPA calls the gateway from its own origin during development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(ai_chat.router)

    # ==================== Prometheus Metrics ====================
    if Config.PROMETHEUS_ENABLED:
        # Import metrics module to register all collectors
        from cognita_gateway.services import prometheus_metrics
        from cognita_gateway.services.background_tasks import get_pending_tasks_count

        @app.get("/metrics", tags=["monitoring"], include_in_schema=False)
        async def metrics():
            """Prometheus metrics endpoint (provider calls, chat requests, usage log writes)."""
            prometheus_metrics.set_pending_background_tasks(get_pending_tasks_count())
            return Response(generate_latest(REGISTRY), media_type="text/plain; charset=utf-8")

        logger.info("Prometheus metrics endpoint at /metrics")

    # ==================== Exception Handlers ====================
    register_exception_handlers(app)

    return app


# Export a default app instance for environments that import `app`
app = create_app()
