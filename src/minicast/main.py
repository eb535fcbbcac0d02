"""FastAPI application factory and lifespan management."""

import logging
import os
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from minicast import __version__
from minicast.config import settings
from minicast.db.engine import create_db_engine, create_session_factory
from minicast.logging_config import configure_logging

# Configure logging at import time
_json_logs = os.environ.get("MINICAST_LOCAL", "0") != "1"
configure_logging(log_level=settings.log_level, json_output=_json_logs)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage database and outbound HTTP resources."""
    db_url = settings.effective_database_url
    engine = create_db_engine(db_url)

    # Auto-create tables for SQLite (local dev, no Alembic migrations)
    if "sqlite" in db_url:
        from minicast.db.base import Base
        import minicast.db.models  # noqa: F401 (register all ORM models)

        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("SQLite tables created (local mode)")

    app.state.db_engine = engine
    app.state.db_session_factory = create_session_factory(engine)
    app.state.http_client = httpx.AsyncClient(
        timeout=settings.fetch_timeout_seconds,
        headers={"User-Agent": settings.user_agent},
    )

    logger.info("Minicast API started (db=%s)", "sqlite" if "sqlite" in db_url else "postgresql")
    yield

    await app.state.http_client.aclose()
    await engine.dispose()
    logger.info("Minicast API shutdown complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Minicast API",
        version=__version__,
        description="Developer verification and approval engine for the mini app store.",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Order matters: last added = first executed
    from minicast.api.middleware.auth import AuthMiddleware
    from minicast.api.middleware.trace_id import TraceIdMiddleware
    app.add_middleware(AuthMiddleware)
    app.add_middleware(TraceIdMiddleware)

    from minicast.errors.handlers import register_exception_handlers
    register_exception_handlers(app)

    from minicast.api.router import api_router
    app.include_router(api_router)

    return app


app = create_app()
