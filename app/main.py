"""
Main FastAPI application.

This is the entry point for the API server and the staff dashboard.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles

from app.core.config import Settings, get_settings
from app.core.logging import configure_logging
from app.db.session import Database
from app.errors import AppError, app_error_handler
from app.routers import apply, auth, health, imports, members, referrals, stages, uploads, views
from app.services.file_storage import FileStorage, LocalFileStorage, build_file_storage
from app.services.view_invalidation import ViewInvalidator
from app.ui.session import SessionManager

# UI routes
from app.ui.routes import (
    apply as ui_apply,
    auth as ui_auth,
    imports as ui_imports,
    members as ui_members,
    pipeline as ui_pipeline,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for the FastAPI app.

    - On startup: configure logging
    - On shutdown: close the storage client and dispose the connection pool
    """
    settings: Settings = app.state.settings
    configure_logging(settings.LOG_LEVEL)
    logger.info("Starting %s (storage: %s)", settings.APP_NAME, app.state.storage.backend)

    yield  # The server runs while we're "yielded" here

    logger.info("Shutting down %s", settings.APP_NAME)
    await app.state.storage.aclose()
    await app.state.database.dispose()


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    storage: Optional[FileStorage] = None,
) -> FastAPI:
    """
    Build the application.

    The database pool, storage backend, view versions and session signer are
    created once here and shared through app.state; tests pass their own.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        description="Recruiting pipeline CRM: members, stages, referrals",
        version="0.1.0",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = database or Database(settings.DATABASE_URL, echo=settings.DEBUG, pool_pre_ping=True)
    app.state.storage = storage or build_file_storage(settings)
    app.state.views = ViewInvalidator()
    app.state.session_manager = SessionManager.from_settings(settings)

    app.add_exception_handler(AppError, app_error_handler)

    # Include routers (API endpoints)
    app.include_router(health.router, tags=["Health"])
    app.include_router(auth.router)
    app.include_router(apply.router)
    app.include_router(imports.router)
    app.include_router(members.router)
    app.include_router(referrals.router)
    app.include_router(stages.router)
    app.include_router(uploads.router)
    app.include_router(views.router)

    # UI routes (session-based authentication)
    app.include_router(ui_auth.router)
    app.include_router(ui_apply.router)
    app.include_router(ui_imports.router)
    app.include_router(ui_members.router)
    app.include_router(ui_pipeline.router)

    # Local résumés are served by the app itself unless a separate host serves them
    if isinstance(app.state.storage, LocalFileStorage) and app.state.storage.public_base_url.startswith("/"):
        root = Path(app.state.storage.root)
        root.mkdir(parents=True, exist_ok=True)
        app.mount(
            app.state.storage.public_base_url,
            StaticFiles(directory=str(root)),
            name="files",
        )

    @app.get("/", include_in_schema=False)
    async def root():
        """
        Root endpoint - redirects to the members list (or login).
        """
        return RedirectResponse(url="/members", status_code=303)

    return app


app = create_app()
