from __future__ import annotations

import asyncio
import logging
import os
import threading
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.concurrency import run_in_threadpool

from .db import get_database, reset_database
from .error_handlers import register_error_handlers
from .logging_config import setup_logging
from .routers import health as health_router
from .routers import instance as instance_router
from .routers import todos as todos_router
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Liveness and readiness probes."},
    {"name": "todos", "description": "CRUD operations for Todo items."},
    {"name": "instance", "description": "Identity of the instance serving the request."},
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Configure logging and bring the database up. When the first attempt fails
    the retry loop runs in the background so probes keep answering; shutdown
    stops the loop and closes the pool.
    """
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database = get_database()
    stop_event = threading.Event()
    retry_task = None

    if await run_in_threadpool(database.initialize):
        logger.info("Connected to database")
    else:
        logger.error(
            f"Database connection failed. Retrying every {database.retry_delay:g} seconds..."
        )
        retry_task = asyncio.create_task(
            run_in_threadpool(database.connect_with_retry, stop_event=stop_event, delay_first=True)
        )

    logger.info(f"Server running on port {settings.port}")
    yield
    logger.info("Shutting down")
    stop_event.set()
    if retry_task is not None:
        await retry_task
    reset_database()


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application: CORS, error handling, API routers and, when
    the static directory exists, static assets mounted after the routes.
    """
    settings = settings or get_settings()
    app = FastAPI(
        title="Todo Service",
        description="CRUD API for todos stored in a relational table, with health and instance metadata endpoints.",
        version="1.0.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )

    # Configure CORS based on settings (.env -> CORS_ALLOW_ORIGINS), with '*' fallback
    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(health_router.router)
    app.include_router(todos_router.router)
    app.include_router(instance_router.router)

    # Static assets are mounted last so the API routes take precedence
    if os.path.isdir(settings.static_dir):
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
    return app


app = create_app()
