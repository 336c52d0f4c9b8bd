"""
Main Application - Main Layer

This module serves as the entry point for the FastAPI application.
It initializes the container, creates the FastAPI app, and includes
the API routers.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from homegraph.main.config import get_settings
from homegraph.main.container import app_lifespan, init_container
from homegraph.presentation.controllers import devices_router, smart_home_router
from homegraph.shared import configure_logging, get_logger, update_logging_from_settings

# Logging is needed while settings load, before their log level is known
configure_logging()

settings = get_settings()

update_logging_from_settings(settings)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan management.

    Runs the container's resource lifecycle: the device registry is
    loaded before the first request is served.
    """
    app.state.started_at = datetime.now(timezone.utc)
    logger.info("app.starting")

    async with app_lifespan() as container:
        app.state.container = container
        yield

    logger.info("app.shutdown")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: The configured FastAPI application
    """
    settings = get_settings()

    init_container(settings)

    app = FastAPI(
        title=settings.service.title,
        description=settings.service.description,
        version=settings.service.version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(smart_home_router)
    app.include_router(devices_router)

    return app


app = create_app()
