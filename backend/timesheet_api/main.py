"""
FastAPI application entry point.
Assembles the app with routers, middleware, lifespan handlers, and exception handlers.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

# Registers every mapped class before relationships are resolved
import timesheet_api.models  # noqa: F401
from timesheet_api.api.v1.router import api_router
from timesheet_api.core.config import settings
from timesheet_api.core.exceptions import setup_exception_handlers
from timesheet_api.core.logging import setup_logging
from timesheet_api.core.rate_limit import limiter
from timesheet_api.db.session import close_db, init_db
from timesheet_api.deps.di_container import Container, set_container

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    Initializes logging, the database and the DI container.
    """
    setup_logging()
    await init_db()

    container = Container()
    app.state.container = container
    set_container(container)
    logger.info("Application started", extra={"version": settings.VERSION})

    yield

    await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Weekly timesheet logging and approval API",
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    app.include_router(api_router, prefix=settings.API_V1_PREFIX)

    setup_exception_handlers(app)

    return app


app = create_app()
