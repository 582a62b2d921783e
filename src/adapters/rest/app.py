"""
FastAPI application - REST adapter for the mood journal.

Usage:
    python run_api.py

Or directly:
    uvicorn adapters.rest.app:app --host 0.0.0.0 --port 8000 --reload
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

# Ensure src/ is on sys.path when invoked via uvicorn directly
_src_dir = Path(__file__).resolve().parent.parent.parent
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

from infrastructure.config import Settings, configure_logging
from factory import ServiceFactory
from domain.exceptions import EntryNotFoundError, InvalidInputError
from adapters.rest.dependencies import set_factory
from adapters.rest.routers import analytics, auth, chat, entries, suggestions

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


def create_app(factory: Optional[ServiceFactory] = None) -> FastAPI:
    """Build the API. Tests pass a pre-built factory; production reads the env."""
    if factory is None:
        config = Settings.from_env(project_root=_src_dir.parent)
        factory = ServiceFactory(config)
    config = factory.config

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize ServiceFactory on startup."""
        configure_logging(config.log_level)
        await factory.initialize()
        set_factory(factory)
        yield
        # No teardown needed, aiosqlite connections are per-operation
        set_factory(None)

    app = FastAPI(
        title="Mood Journal",
        version=VERSION,
        description="Photo mood journal with AI mood analysis, analytics and chat.",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(entries.router)
    app.include_router(analytics.router)
    app.include_router(suggestions.router)
    app.include_router(chat.router)

    # Directory is created by factory.initialize() during startup
    app.mount(
        "/uploads",
        StaticFiles(directory=config.upload_dir, check_dir=False),
        name="uploads",
    )

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "ok", "version": VERSION}

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": jsonable_errors(exc)},
        )

    @app.exception_handler(InvalidInputError)
    async def invalid_input(request: Request, exc: InvalidInputError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(EntryNotFoundError)
    async def not_found(request: Request, exc: EntryNotFoundError):
        return JSONResponse(status_code=404, content={"detail": "Post not found"})

    @app.exception_handler(Exception)
    async def unhandled(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]


app = create_app()
