# src/farmer_social/main.py
"""Main entry point for the Farmer Social application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from farmer_social import __version__
from farmer_social.api.errors import register_exception_handlers
from farmer_social.api.v1 import (
    admin_router,
    auth_router,
    comments_router,
    notifications_router,
    posts_router,
)
from farmer_social.core.settings import Settings, settings
from farmer_social.db.session import Database

logger = logging.getLogger(__name__)

DESCRIPTION = "Farming community API with moderated posts, comments and notifications"


def create_app(app_settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    """Build the application and the storage handle it owns.

    Args:
        app_settings: Configuration to use; the environment-backed settings by default
        database: Pre-built storage handle, mainly for tests

    Returns:
        Configured FastAPI application
    """
    config = app_settings or settings
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(
        title=config.app_name,
        description=DESCRIPTION,
        version=config.app_version,
    )
    app.state.settings = config
    app.state.database = database or Database(
        config.effective_database_url,
        echo=config.sql_debug,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=config.cors_allow_credentials,
        allow_methods=config.cors_allow_methods,
        allow_headers=config.cors_allow_headers,
    )

    # Add GZip middleware for compression
    app.add_middleware(GZipMiddleware)

    register_exception_handlers(app)

    # Include API routers
    app.include_router(auth_router, prefix="/api/v1")
    app.include_router(posts_router, prefix="/api/v1")
    app.include_router(comments_router, prefix="/api/v1")
    app.include_router(notifications_router, prefix="/api/v1")
    app.include_router(admin_router, prefix="/api/v1")

    @app.on_event("startup")
    async def on_startup() -> None:
        if config.auto_create_tables:
            app.state.database.create_tables()
        logger.info("%s %s started", config.app_name, config.app_version)

    @app.on_event("shutdown")
    async def on_shutdown() -> None:
        app.state.database.dispose()

    @app.get("/health")
    async def health_check() -> dict[str, bool | str]:
        """Health check endpoint to verify the service is running."""
        return {"success": True, "status": "ok"}

    @app.get("/")
    async def root() -> dict[str, bool | str]:
        """Root endpoint with basic information about the API."""
        return {
            "success": True,
            "name": config.app_name,
            "version": __version__,
            "description": DESCRIPTION,
            "docs": "/docs",
            "redoc": "/redoc",
        }

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("farmer_social.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
