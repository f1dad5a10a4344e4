from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from launchpad.api import dashboard, feature_requests, health, stats, waitlist
from launchpad.config import Settings
from launchpad.core.database import build_database
from launchpad.services.convertkit import ConvertKitClient

logger = logging.getLogger(__name__)


def _first_error_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    err = errors[0]
    loc = ".".join(str(x) for x in err.get("loc", ()) if x not in ("body", "query"))
    msg = err.get("msg", "Invalid value")
    return f"{loc}: {msg}" if loc else msg


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))

    database = build_database(settings)
    mailer = ConvertKitClient.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting Launchpad API...")
        try:
            database.create_all()
        except Exception as e:
            logger.error(f"Failed to create tables: {e}")
        if not mailer.enabled:
            logger.info("ConvertKit not configured - mailing list sync disabled")
        yield
        logger.info("Shutting down Launchpad API...")
        database.dispose()

    app = FastAPI(title="Launchpad API", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database
    app.state.mailer = mailer

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    # Routers
    app.include_router(health.router, prefix="/api")
    app.include_router(waitlist.router, prefix="/api")
    app.include_router(feature_requests.router, prefix="/api")
    app.include_router(stats.router, prefix="/api")
    app.include_router(dashboard.router, prefix="/api")

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"detail": _first_error_message(exc)})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    return app


app = create_app()
