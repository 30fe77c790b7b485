"""
LLM Relay - Main Application Entry Point

This module provides the FastAPI application for the LLM Relay service.
The relay forwards chat requests to a hosted model, rotating across several
credentials when one is rate limited or failing.

Startup is fatal without at least one credential: the service never serves
requests credential-less.
"""

import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app

from src.api.middleware.logging import RequestLoggingMiddleware
from src.api.routes.ai import router as ai_router
from src.api.routes.health import router as health_router
from src.core.config import Settings, get_settings
from src.core.exceptions import ConfigurationError
from src.observability.logging import configure_logging, get_logger, register_secrets
from src.services.failover import FailoverController

APP_NAME = "LLM Relay"
APP_VERSION = "1.0.0"
APP_DESCRIPTION = "Chat relay with credential failover for hosted models"

logger = get_logger(__name__)


def build_controller(settings: Settings) -> FailoverController:
    """
    Create the process-wide failover controller.

    Raises:
        ConfigurationError: If no credentials are configured.
    """
    credentials = settings.credentials()
    if not credentials:
        raise ConfigurationError(
            "No upstream credentials found; set GITHUB_TOKEN1 and/or GITHUB_TOKEN2"
        )
    register_secrets(token.get_secret_value() for token in credentials)
    return FailoverController.from_settings(settings)


# =============================================================================
# Application Factory
# =============================================================================


def create_app(
    settings: Optional[Settings] = None,
    controller: Optional[FailoverController] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Settings to use (default: cached environment settings).
        controller: Pre-built controller, mainly for tests. When omitted the
            controller is built from settings during startup.

    Returns:
        Configured FastAPI application.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        configure_logging(level=settings.log_level, force=True)

        try:
            app.state.failover = controller or build_controller(settings)
        except ConfigurationError as e:
            logger.critical("startup aborted", error=e.message)
            raise

        logger.info(
            "service starting",
            service=settings.service_name,
            environment=settings.environment,
            credentials=len(app.state.failover.pool),
            model=settings.model,
        )

        yield

        logger.info("service shutting down", service=settings.service_name)
        await app.state.failover.aclose()

    app = FastAPI(
        title=APP_NAME,
        description=APP_DESCRIPTION,
        version=APP_VERSION,
        docs_url="/docs" if settings.environment != "production" else None,
        redoc_url="/redoc" if settings.environment != "production" else None,
        lifespan=lifespan,
    )

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(ai_router)
    app.mount("/metrics", make_asgi_app())

    @app.get("/", tags=["Info"])
    async def root() -> dict[str, Any]:
        """Root endpoint returning basic service information."""
        return {
            "service": APP_NAME,
            "version": APP_VERSION,
            "docs": "/docs" if settings.environment != "production" else "disabled",
        }

    return app


def main() -> None:
    """Run the service with uvicorn on the configured port."""
    settings = get_settings()
    configure_logging(level=settings.log_level, force=True)

    if not settings.credentials():
        logger.critical("no upstream credentials found; set GITHUB_TOKEN1 and/or GITHUB_TOKEN2")
        sys.exit(1)

    uvicorn.run(
        create_app(settings),
        host="0.0.0.0",
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
