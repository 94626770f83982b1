"""FastAPI application factory.

Creates and configures the FastAPI application with all routers,
middleware, and exception handlers.

API Versioning:
    All API endpoints are versioned under /api/v1/ prefix.
    The health check endpoint remains unversioned at /health.

Run with:
    uvicorn pazireshino.presentation.api.app:create_app --factory
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncEngine

from pazireshino.presentation.api.config import (
    API_V1_PREFIX,
    API_VERSION,
    USERS_PREFIX,
)
from pazireshino.presentation.api.dependencies import get_engine, get_password_service
from pazireshino.presentation.api.exception_handlers import setup_exception_handlers
from pazireshino.presentation.api.routers import users_router
from pazireshino.presentation.api.schemas.common import HealthResponse
from pazireshino_config.settings import Settings, get_settings
from pazireshino_identity.infrastructure.persistence.sqlalchemy import IdentityBase

_logging_configured = False


def _configure_logging(settings: Settings) -> None:
    """Configure application logging once per process.

    - Console output with timestamps and module names
    - Configurable log level for pazireshino modules (from settings)
    - WARNING level for noisy third-party libraries
    """
    global _logging_configured  # noqa: PLW0603
    if _logging_configured:
        return

    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,  # Override any existing config
    )

    for name in ("pazireshino", "pazireshino_auth", "pazireshino_identity"):
        logging.getLogger(name).setLevel(log_level)

    # Quiet down noisy third-party loggers
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    _logging_configured = True


logger = logging.getLogger(__name__)

OPENAPI_TAGS = [
    {
        "name": "Users",
        "description": """Student accounts and credential lifecycle.

**Signup & Login:**
- Signup returns a bearer token straight away
- Login with email and password

**Passwords:**
- Stored as bcrypt hashes only
- Changing or resetting a password revokes every earlier token
- Reset tokens are emailed, valid for 10 minutes and usable once
""",
    },
    {
        "name": "Health",
        "description": "Service health monitoring endpoints.",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    logger.info("Starting %s API v%s...", settings.app_name, API_VERSION)
    engine = get_engine(settings.database_url)
    await _init_database_schema(engine)
    await get_password_service(settings).warm_up_async()
    yield

    logger.info("Shutting down %s API...", settings.app_name)
    await engine.dispose()
    logger.info("Database connections closed")


async def _init_database_schema(engine: AsyncEngine) -> None:
    """Create missing tables and verify connectivity."""
    logger.info("Initializing database schema...")
    try:
        async with engine.begin() as conn:
            await conn.run_sync(IdentityBase.metadata.create_all)
    except ConnectionRefusedError:
        logger.critical("Could not connect to the database.")
        raise SystemExit(1) from None

    logger.info("Database schema initialized successfully")


def create_v1_router() -> APIRouter:
    v1_router = APIRouter()
    v1_router.include_router(users_router, prefix=USERS_PREFIX, tags=["Users"])
    return v1_router


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    settings
        Optional settings override for testing.

    Returns
    -------
    Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    _configure_logging(settings)

    app = FastAPI(
        title=f"{settings.app_name} API",
        description="Authentication and credential lifecycle for the Pazireshino platform.",
        version=API_VERSION,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
        lifespan=lifespan,
        openapi_tags=OPENAPI_TAGS,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_exception_handlers(app)

    app.include_router(create_v1_router(), prefix=API_V1_PREFIX)

    @app.get("/health", tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint (unversioned for load balancers)."""
        return HealthResponse(status="healthy", version=API_VERSION)

    return app
