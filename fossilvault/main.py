"""FastAPI application entry point for FossilVault."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from fossilvault import __version__
from fossilvault.config import settings
from fossilvault.database import close_db, init_db
from fossilvault.routers import import_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Connect to MongoDB on startup and disconnect on shutdown."""
    logger.info("Starting %s v%s", settings.app_name, __version__)
    await init_db()
    yield
    await close_db()
    logger.info("Shut down %s", settings.app_name)


def create_app() -> FastAPI:
    """Build the FastAPI application with all routers mounted."""
    app = FastAPI(
        title="FossilVault",
        description="Spreadsheet import for fossil collections",
        version=__version__,
        lifespan=lifespan,
    )

    app.include_router(import_router.router, prefix="/api/import", tags=["Import"])

    @app.get("/health", tags=["Health"])
    async def health_check() -> dict:
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__, "app_name": settings.app_name}

    return app


app = create_app()
