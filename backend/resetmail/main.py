"""
Application bootstrap.

The lifespan configures the mail transport exactly once, awaiting its
connectivity check, and hands the resulting state to the dispatcher that
route handlers receive through ``get_dispatcher``.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from prometheus_client import make_asgi_app

from resetmail import __version__
from resetmail.api.health import router as health_router
from resetmail.config.logging import configure_logging, get_logger
from resetmail.config.settings import Settings, get_settings
from resetmail.mail.configurator import TransportFactory, configure
from resetmail.mail.dispatcher import PasswordResetDispatcher
from resetmail.mail.transport import SMTPTransport
from resetmail.observability.metrics import MailMetrics, metrics as default_metrics

logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    transport_factory: TransportFactory = SMTPTransport,
    metrics: Optional[MailMetrics] = None,
) -> FastAPI:
    """Create the FastAPI application."""
    settings = settings or get_settings()
    metrics = metrics or default_metrics

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.LOG_LEVEL, settings.LOG_FORMAT.value)
        logger.info("Starting application", app=settings.APP_NAME, environment=settings.ENVIRONMENT.value)

        state = await configure(settings, transport_factory=transport_factory, metrics=metrics)
        app.state.mail_state = state
        app.state.dispatcher = PasswordResetDispatcher(state, settings, metrics=metrics)
        logger.info("Mail delivery mode", mode="live" if state.is_ready else "simulated")

        yield

        logger.info("Shutting down application", app=settings.APP_NAME)

    app = FastAPI(
        title=settings.APP_NAME,
        version=__version__,
        description="Password reset email delivery",
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )
    app.include_router(health_router)

    if settings.ENABLE_METRICS:
        app.mount("/metrics", make_asgi_app(registry=metrics.registry))

    return app
