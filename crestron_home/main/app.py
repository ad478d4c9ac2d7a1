"""
Main Application - Main Layer

This module serves as the entry point for the FastAPI application.
It initializes the container, creates the FastAPI app, and includes
the API routers.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI

from crestron_home.main.config import AppSettings, get_settings
from crestron_home.main.container import app_lifespan, init_container
from crestron_home.presentation.controllers import devices_router, system_router
from crestron_home.shared import configure_logging, get_logger, update_logging_from_settings

# Configure logging with basic settings first - before configuration is loaded
# This ensures we have logging during the configuration loading process
configure_logging()

# Get structured logger
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan management.

    This context manager is called when the application starts up,
    and when it shuts down. It uses the container's app_lifespan
    to open and close the controller link.
    """
    # Set application startup time
    app.state.started_at = datetime.now(timezone.utc)
    logger.info("Application starting up")

    # Use container's lifecycle management
    async with app_lifespan() as container:
        app.state.container = container
        yield

    logger.info("Application shutting down")


def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to use; loaded from the environment when omitted

    Returns:
        FastAPI: The configured FastAPI application
    """
    settings = settings or get_settings()

    # Update logging with complete settings
    update_logging_from_settings(settings)

    # Initialize dependency injection container
    init_container(settings)

    # Create FastAPI app
    app = FastAPI(
        title=settings.api.title,
        description=settings.api.description,
        version=settings.api.version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Include routers
    app.include_router(devices_router)
    app.include_router(system_router)

    return app
