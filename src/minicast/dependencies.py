"""FastAPI dependency injection providers."""

from collections.abc import AsyncGenerator
from typing import Annotated

import httpx
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from minicast.db.models.developer import DeveloperRow
from minicast.errors.exceptions import AuthenticationError
from minicast.repositories.developer_repo import DeveloperRepository
from minicast.services.identity import normalize_identity
from minicast.services.verification.manifest_fetcher import ManifestFetcher


async def get_db(request: Request) -> AsyncGenerator:
    """Yield a database session from the app's session factory."""
    session_factory = request.app.state.db_session_factory
    async with session_factory() as session:
        yield session


def get_session_factory(request: Request) -> async_sessionmaker:
    return request.app.state.db_session_factory


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Shared outbound client created in the app lifespan."""
    return request.app.state.http_client


def get_manifest_fetcher(client: httpx.AsyncClient = Depends(get_http_client)) -> ManifestFetcher:
    return ManifestFetcher(client)


def get_trace_id(request: Request) -> str:
    """Extract trace_id from request state (set by middleware)."""
    return getattr(request.state, "trace_id", "unknown")


async def get_current_identity(request: Request) -> str:
    """Return the normalized requester identity or raise 401."""
    identity = getattr(request.state, "identity", None)
    auth_error = getattr(request.state, "auth_error", None)
    if auth_error:
        raise AuthenticationError(auth_error)
    if not identity:
        raise AuthenticationError()
    return normalize_identity(identity)


async def get_current_developer(
    db: AsyncSession = Depends(get_db),
    identity: str = Depends(get_current_identity),
) -> DeveloperRow:
    """Developer for the requester, created lazily on first contact."""
    return await DeveloperRepository(db).get_or_create(identity)


async def get_actor(
    db: AsyncSession = Depends(get_db),
    identity: str = Depends(get_current_identity),
) -> DeveloperRow | None:
    """Acting developer for admin routes; role checks happen in the service."""
    return await DeveloperRepository(db).get_by_identity(identity)


# Type aliases for dependency injection
DBSession = Annotated[AsyncSession, Depends(get_db)]
TraceId = Annotated[str, Depends(get_trace_id)]
CurrentIdentity = Annotated[str, Depends(get_current_identity)]
CurrentDeveloper = Annotated[DeveloperRow, Depends(get_current_developer)]
Actor = Annotated[DeveloperRow | None, Depends(get_actor)]
Fetcher = Annotated[ManifestFetcher, Depends(get_manifest_fetcher)]
SessionFactory = Annotated[async_sessionmaker, Depends(get_session_factory)]
