"""Snapshot API — FastAPI application factory.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map SnapshotApiError → {"error": ...} JSON responses
    - CORS configured from settings: credentials allowed, fixed method/header lists
    - Settings are read when the app is built, not at import time
    - The Settings the app was built with are the ones its dependencies see

Design Decisions:
    - Factory over module-level app: missing Azure ids surface as a startup
      error in server.py instead of an import failure
      (run ad hoc with `uvicorn --factory snapshot_api.main:create_app`)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from snapshot_api.api.error_handlers import register_error_handlers
from snapshot_api.api.routes import auth, health, snapshots
from snapshot_api.config import Settings, get_settings
from snapshot_api.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)

CORS_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
CORS_HEADERS = ["Origin", "Authorization", "Content-Type"]


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        setup_logging(settings.log_level, settings.log_format)
        logger.info("Snapshot API started")
        yield
        logger.info("Snapshot API shutting down")

    app = FastAPI(
        title="Azure Snapshot API", version="1.0.0", lifespan=lifespan,
    )
    app.dependency_overrides[get_settings] = lambda: settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
        allow_credentials=True,
    )

    app.include_router(auth.router)
    app.include_router(snapshots.router)
    app.include_router(health.router)

    register_error_handlers(app)
    return app
