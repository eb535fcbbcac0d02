"""Shared test fixtures."""

import json

import httpx
import pytest
from eth_account import Account
from eth_account.messages import encode_defunct
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from minicast.db.base import Base
# Import all models to register with Base.metadata
import minicast.db.models  # noqa: F401
from minicast.api.middleware.auth import issue_session_token
from minicast.services.verification.manifest_fetcher import ManifestFetcher
from minicast.services.verification.signature import verification_message

DEFAULT_OWNER = "0x000000000000000000000000000000000000d0d0"


class Wallet:
    """Deterministic test wallet that can sign the verification message."""

    def __init__(self, seed: int):
        self.account = Account.from_key("0x" + f"{seed:02x}" * 32)
        self.address = self.account.address.lower()

    def sign(self, message: str | None = None) -> str:
        signed = Account.sign_message(
            encode_defunct(text=message or verification_message()),
            private_key=self.account.key,
        )
        return "0x" + bytes(signed.signature).hex()

    def token(self) -> str:
        return issue_session_token(self.address)

    def headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token()}"}


class FakeWeb:
    """In-memory stand-in for the public internet, served via httpx.MockTransport."""

    def __init__(self):
        self.routes: dict[tuple[str, str], httpx.Response | Exception] = {}
        self.requests: list[httpx.Request] = []

    def add(self, url: str, *, status: int = 200, json_body=None, text: str | None = None, method: str = "GET"):
        if json_body is not None:
            content = json.dumps(json_body).encode()
            headers = {"content-type": "application/json"}
        else:
            content = (text or "").encode()
            headers = {"content-type": "text/plain"}
        self.routes[(method, url)] = httpx.Response(status, content=content, headers=headers)

    def fail(self, url: str, exc: Exception, method: str = "GET"):
        self.routes[(method, url)] = exc

    def manifest(self, origin: str, body) -> None:
        self.add(f"{origin}/.well-known/farcaster.json", json_body=body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        route = self.routes.get((request.method, url))
        if isinstance(route, Exception):
            raise route
        if route is None:
            return httpx.Response(404, content=b"not found")
        return httpx.Response(route.status_code, content=route.content, headers=route.headers)


@pytest.fixture
def web():
    return FakeWeb()


@pytest.fixture
async def http_client(web):
    async with httpx.AsyncClient(transport=httpx.MockTransport(web.handler)) as client:
        yield client


@pytest.fixture
def fetcher(http_client):
    return ManifestFetcher(http_client, timeout=2.0, user_agent="minicast-tests")


@pytest.fixture
def wallet():
    return Wallet(0x11)


@pytest.fixture
def other_wallet():
    return Wallet(0x22)


@pytest.fixture
def admin_wallet():
    return Wallet(0x33)


@pytest.fixture
async def db_engine():
    """Create an in-memory SQLite async engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def app(db_engine, session_factory, http_client, monkeypatch):
    """Create a test application instance with in-memory DB and fake web."""
    from minicast.config import settings
    from minicast.main import create_app

    monkeypatch.setattr(settings, "default_owner_address", DEFAULT_OWNER)

    _app = create_app()
    _app.state.db_engine = db_engine
    _app.state.db_session_factory = session_factory
    _app.state.http_client = http_client
    return _app


@pytest.fixture
async def client(app):
    """Async HTTP test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
