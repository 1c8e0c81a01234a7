from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles
from pymongo import MongoClient

from .db import ClientFactory, MongoConnection
from .logging_setup import setup_logging
from .metrics import Metrics, request_counter_middleware
from .repositories import LoginRepository, TaskRepository, UserRepository
from .routers import accounts, observability, pages, tasks
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

ASSETS_DIR = Path(__file__).resolve().parent / "assets"

openapi_tags = [
    {"name": "health", "description": "Service health and Prometheus metrics."},
    {"name": "accounts", "description": "User registration."},
    {"name": "tasks", "description": "Create, complete and delete dashboard tasks."},
    {"name": "pages", "description": "Server-rendered pages."},
]


# PUBLIC_INTERFACE
def create_app(
    settings: Optional[Settings] = None,
    client_factory: ClientFactory = MongoClient,
) -> FastAPI:
    """
    Build the application.

    The MongoDB connection is owned by the app: it is opened when the app
    starts, handed to every repository, and closed on shutdown. Pass
    client_factory to swap the driver (tests use mongomock).
    """
    settings = settings or get_settings()

    connection = MongoConnection(
        settings.mongodb_url,
        settings.mongodb_db_name,
        options={"serverSelectionTimeoutMS": settings.mongodb_timeout_ms},
        client_factory=client_factory,
        ping_timeout_ms=settings.health_timeout_ms,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        connection.connect()
        try:
            yield
        finally:
            connection.close()

    app = FastAPI(
        title="Taskboard",
        description="Server-rendered task manager backed by MongoDB.",
        version="0.1.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.db = connection
    app.state.users = UserRepository(connection)
    app.state.logins = LoginRepository(connection)
    app.state.tasks = TaskRepository(connection)
    app.state.metrics = Metrics()

    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(request_counter_middleware(app.state.metrics))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> PlainTextResponse:
        """Catch-all for errors no handler dealt with."""
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return PlainTextResponse("Something broke!", status_code=500)

    app.mount("/assets", StaticFiles(directory=str(ASSETS_DIR)), name="assets")

    app.include_router(observability.router)
    app.include_router(pages.router)
    app.include_router(accounts.router)
    app.include_router(tasks.router)

    return app


# PUBLIC_INTERFACE
def run() -> None:
    """Start the server on HOST:PORT (default 0.0.0.0:4000)."""
    settings = get_settings()
    setup_logging(settings.log_level)
    logger.info("Server running on port %s", settings.port)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)
