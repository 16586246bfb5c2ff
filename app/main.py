# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Aethel API.
#
# Startup runs in a fixed order, each step failing fast:
#   1. Read the environment (.env + process variables)
#   2. Validate it (print every error and exit on failure)
#   3. Configure logging
#   4. Connect to MongoDB (log and exit on failure)
#   5. Build the app and serve it
#
# Usage:
#   aethel-api            (console script)
#   python -m app
# =============================================================================

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError

from app import __version__
from app.config import EnvironmentSettings, load_settings_or_exit, read_environment
from app.exceptions import (
    ApiError,
    api_error_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from app.routers import health
from lib.logging_config import RequestLoggingMiddleware, configure_logging
from lib.mongo_client import MongoConnection, connect_database_or_exit

logger = logging.getLogger(__name__)


def create_app(
    settings: EnvironmentSettings,
    database: MongoConnection | None = None,
) -> FastAPI:
    """
    Build the FastAPI application around already-validated settings.

    Args:
        settings: Validated settings, stored on app.state.settings
        database: Open connection, stored on app.state.database and closed
            on shutdown (None leaves readiness checks "not configured")

    Returns:
        FastAPI: The configured application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting Aethel API in {settings.ENVIRONMENT} mode")
        yield
        logger.info("Shutting down Aethel API")
        if database is not None:
            database.close()

    app = FastAPI(
        title="Aethel API",
        version=__version__,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database

    # -------------------------------------------------------------------------
    # Middleware
    # -------------------------------------------------------------------------

    app.add_middleware(RequestLoggingMiddleware)

    # -------------------------------------------------------------------------
    # Exception Handlers
    # -------------------------------------------------------------------------

    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # -------------------------------------------------------------------------
    # Routers
    # -------------------------------------------------------------------------

    app.include_router(health.router, prefix="/api/v1", tags=["Health"])

    @app.get("/", tags=["Root"])
    async def root(request: Request):
        """Root endpoint - returns API info."""
        return {
            "name": "Aethel API",
            "version": __version__,
            "environment": request.app.state.settings.ENVIRONMENT,
            "health": "/api/v1/health",
        }

    return app


def main() -> None:
    """Run the startup sequence and serve the API."""
    settings = load_settings_or_exit(read_environment())
    configure_logging(settings)
    logger.info(f"Environment configuration loaded: {settings.redacted()}")

    database = connect_database_or_exit(settings)
    app = create_app(settings, database)

    # log_config=None keeps uvicorn on the handlers configured above
    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT, log_config=None)


if __name__ == "__main__":
    main()
